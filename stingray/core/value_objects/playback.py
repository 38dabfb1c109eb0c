"""
Objets valeur pour la lecture.

Objets valeur immutables echanges entre le coeur de lecture et ses
collaborateurs (serveur media, stockage des profils).
Tous les objets valeur utilisent @dataclass(frozen=True) pour garantir l'immutabilite.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class TrackType(Enum):
    """Type d'une piste d'une source media (valeurs du champ Type du serveur)."""

    VIDEO = "Video"
    AUDIO = "Audio"
    SUBTITLE = "Subtitle"
    UNKNOWN = "Unknown"

    @classmethod
    def from_server(cls, value: Optional[str]) -> "TrackType":
        """Convertit la valeur brute du serveur, UNKNOWN si non reconnue."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class PlaybackEvent(Enum):
    """Evenement de lecture rapporte au serveur."""

    STARTED = "started"
    PROGRESSED = "progressed"
    PAUSED = "paused"
    STOPPED = "stopped"


class ImageKind(Enum):
    """Type d'image demande au serveur."""

    THUMBNAIL = "Thumb"
    LOGO = "Logo"
    PRIMARY = "Primary"
    BACKDROP = "Backdrop"


@dataclass(frozen=True)
class FullBitrate:
    """Debit sans plafond: le debit de la piste video selectionnee."""

    @property
    def cap_bits(self) -> Optional[int]:
        return None


@dataclass(frozen=True)
class LimitedBitrate:
    """
    Debit plafonne demande au serveur (transcodage).

    Attributs :
        bits : Plafond en bits par seconde
    """

    bits: int

    @property
    def cap_bits(self) -> Optional[int]:
        return self.bits


Bitrate = Union[FullBitrate, LimitedBitrate]

FULL_BITRATE = FullBitrate()


def bitrate_from_cap(cap_bits: Optional[int]) -> Bitrate:
    """Construit un Bitrate depuis un plafond optionnel (None = plein debit)."""
    if cap_bits is None:
        return FULL_BITRATE
    return LimitedBitrate(cap_bits)


@dataclass(frozen=True)
class PlayableHandle:
    """
    Flux pret a etre lu.

    Attributs :
        url : URL complete du flux (playlist HLS)
        headers : En-tetes HTTP requis par le serveur
    """

    url: str
    headers: dict[str, str] = field(default_factory=dict, hash=False)


@dataclass(frozen=True)
class PlaybackReport:
    """
    Instantane de position envoye au serveur.

    Chaque rapport est complet: un rapport perdu est remplace par le suivant.

    Attributs :
        item_id : Identifiant de l'element lu
        media_source_id : Identifiant de la source media
        audio_track_id : Piste audio selectionnee
        subtitle_track_id : Piste de sous-titres (None = aucune)
        position_ticks : Position courante en ticks
        playback_session_id : Identifiant de la session de lecture
        user_session_id : Identifiant de la session utilisateur
    """

    item_id: str
    media_source_id: str
    audio_track_id: str
    subtitle_track_id: Optional[str]
    position_ticks: int
    playback_session_id: str
    user_session_id: str


@dataclass(frozen=True)
class UserPreferences:
    """
    Preferences de lecture de l'utilisateur prefere.

    Attributs :
        uses_subtitles : True si l'utilisateur active les sous-titres
        bitrate_cap_bits : Plafond de debit (None = plein debit)
    """

    uses_subtitles: bool = False
    bitrate_cap_bits: Optional[int] = None

    @property
    def bitrate(self) -> Bitrate:
        return bitrate_from_cap(self.bitrate_cap_bits)


@dataclass(frozen=True)
class LoginResult:
    """
    Reponse d'authentification du serveur.

    Attributs :
        user_id : Identifiant de l'utilisateur
        user_name : Nom affiche
        session_id : Identifiant de la session utilisateur
        access_token : Jeton d'acces
        server_id : Identifiant du serveur
    """

    user_id: str
    user_name: str
    session_id: str
    access_token: str
    server_id: str
