"""
Ports (interfaces abstraites) définissant les contrats pour les adaptateurs.

Les ports sont les frontières de l'architecture hexagonale. Ils définissent
ce dont le coeur de lecture a besoin du monde extérieur sans spécifier
comment ces besoins sont satisfaits.

Port serveur media :
- IMediaServerClient : Flux, rapports de lecture, saisons, images
- MediaServerError, AuthenticationError, DecodeError : Erreurs du serveur

Port profils utilisateur :
- IUserProfileStore : Préférences de l'utilisateur préféré
- UserProfile : Profil enregistré

Port lecteur :
- IPlayer, IPlayerFactory : Lecteur fourni par la couche d'affichage
"""

from stingray.core.ports.media_server import (
    AuthenticationError,
    DecodeError,
    IMediaServerClient,
    MediaServerError,
)
from stingray.core.ports.player import IPlayer, IPlayerFactory
from stingray.core.ports.user_profiles import IUserProfileStore, UserProfile

__all__ = [
    # Serveur media
    "IMediaServerClient",
    "MediaServerError",
    "AuthenticationError",
    "DecodeError",
    # Lecteur
    "IPlayer",
    "IPlayerFactory",
    # Profils
    "IUserProfileStore",
    "UserProfile",
]
