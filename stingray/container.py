"""
Container d'injection de dependances via dependency-injector.

Assemble le client du serveur media, le stockage des profils et les
services de lecture pour la CLI (ou toute couche d'affichage).
"""

from dependency_injector import containers, providers

from .adapters.api.jellyfin_client import JellyfinClient
from .adapters.user_profiles import JsonUserProfileStore
from .config import Settings
from .services.playback_session import PlaybackSessionController
from .services.player_view_model import PlayerViewModel


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        client = container.media_server()
        controller = container.playback_controller(
            player_factory=factory,
            access_token=token,
            user_session_id=session_id,
        )
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    # Client du serveur media - Factory: server_url peut etre surcharge
    # a l'appel (login sur un autre serveur que celui de la config)
    media_server = providers.Factory(
        JellyfinClient,
        server_url=config.provided.server_url,
        timeout=config.provided.http_timeout,
        connect_timeout=config.provided.http_connect_timeout,
    )

    user_profiles = providers.Singleton(
        JsonUserProfileStore,
        path=config.provided.profiles_file,
    )

    # Controleur de session - le lecteur et les identifiants viennent de l'appelant
    playback_controller = providers.Factory(
        PlaybackSessionController,
        media_server=media_server,
    )

    # Utiliser: container.player_view_model(controller=..., media_source=...)
    player_view_model = providers.Factory(
        PlayerViewModel,
        user_profiles=user_profiles,
        media_server=media_server,
    )
