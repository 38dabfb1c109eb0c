"""
Interface port pour le serveur media.

Interface abstraite (port) définissant le contrat du serveur media
(protocole compatible Jellyfin) consommé par le coeur de lecture.
L'implémentation HTTP se trouve dans adapters/api/jellyfin_client.py.
"""

from abc import ABC, abstractmethod
from typing import Optional

from stingray.core.entities import MediaItem, Season
from stingray.core.value_objects import (
    ImageKind,
    LoginResult,
    PlayableHandle,
    PlaybackEvent,
    PlaybackReport,
)


class MediaServerError(Exception):
    """
    Erreur de base du serveur media.

    Attributs :
        status_code : Code HTTP de la réponse fautive, None si la requête
                      n'a pas abouti (timeout, connexion refusée...)
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class AuthenticationError(MediaServerError):
    """Identifiants refusés par le serveur."""


class DecodeError(MediaServerError):
    """Réponse du serveur impossible à décoder."""


class IMediaServerClient(ABC):
    """
    Interface du serveur media.

    Seules les opérations touchant la lecture sont définies: construction
    du flux, rapports de lecture, saisons d'une série, détail d'un élément,
    URL d'image et authentification.
    """

    @abstractmethod
    def build_playback_request(
        self,
        access_token: str,
        media_id: str,
        video_track_id: str,
        audio_track_id: str,
        subtitle_track_id: Optional[str],
        bitrate_bits: Optional[int],
        playback_session_id: str,
    ) -> Optional[PlayableHandle]:
        """
        Construit la requête de flux pour une source media.

        Args :
            access_token : Jeton d'accès
            media_id : ID de la source media
            video_track_id : Piste vidéo
            audio_track_id : Piste audio
            subtitle_track_id : Piste de sous-titres (None = aucune)
            bitrate_bits : Débit cible en bits/s
            playback_session_id : ID unique de la session de lecture

        Retourne :
            Le flux prêt à lire, ou None si les paramètres sont invalides
        """
        ...

    @abstractmethod
    async def report_playback_event(
        self,
        event: PlaybackEvent,
        report: PlaybackReport,
        access_token: str,
    ) -> None:
        """
        Pousse un état de lecture au serveur.

        Lève :
            MediaServerError : Si le serveur refuse ou ne répond pas.
                               Les appelants ignorent cette erreur.
        """
        ...

    @abstractmethod
    def get_image_url(self, kind: ImageKind, media_id: str, width: int) -> Optional[str]:
        """Construit l'URL d'une image, None si impossible."""
        ...

    @abstractmethod
    async def authenticate(self, username: str, password: str) -> LoginResult:
        """
        Authentifie un utilisateur par nom et mot de passe.

        Lève :
            AuthenticationError : Si les identifiants sont refusés
        """
        ...

    @abstractmethod
    async def get_seasons(self, series_id: str, access_token: str) -> list[Season]:
        """Récupère les saisons (avec épisodes et sources) d'une série."""
        ...

    @abstractmethod
    async def get_item(self, item_id: str, user_id: str, access_token: str) -> MediaItem:
        """Récupère un élément (film, série ou collection) pour un utilisateur."""
        ...
