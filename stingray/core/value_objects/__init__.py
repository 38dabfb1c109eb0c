"""
Objets valeur immutables representant des concepts du domaine sans identite.

Exports :
- TrackType : Type de piste (video, audio, sous-titres)
- PlaybackEvent : Evenement de lecture rapporte au serveur
- ImageKind : Type d'image
- Bitrate, FullBitrate, LimitedBitrate : Debit demande
- PlayableHandle : URL + en-tetes d'un flux
- PlaybackReport : Instantane de position
- UserPreferences : Preferences de l'utilisateur prefere
- LoginResult : Reponse d'authentification
"""

from stingray.core.value_objects.playback import (
    FULL_BITRATE,
    Bitrate,
    FullBitrate,
    ImageKind,
    LimitedBitrate,
    LoginResult,
    PlayableHandle,
    PlaybackEvent,
    PlaybackReport,
    TrackType,
    UserPreferences,
    bitrate_from_cap,
)

__all__ = [
    "FULL_BITRATE",
    "Bitrate",
    "FullBitrate",
    "ImageKind",
    "LimitedBitrate",
    "LoginResult",
    "PlayableHandle",
    "PlaybackEvent",
    "PlaybackReport",
    "TrackType",
    "UserPreferences",
    "bitrate_from_cap",
]
