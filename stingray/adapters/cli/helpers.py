"""
Utilitaires partages pour les commandes CLI de Stingray.

Ce module fournit :
- suppress_loguru : context manager pour desactiver/reactiver les logs loguru
- with_container : decorateur injectant un container initialise
- console : instance Rich Console partagee
- Credentials / resolve_credentials : identifiants du serveur a utiliser
"""

from contextlib import contextmanager
from dataclasses import dataclass
from functools import wraps
from typing import Optional

from loguru import logger as loguru_logger
from rich.console import Console

from stingray.container import Container

console = Console()


@contextmanager
def suppress_loguru():
    """
    Context manager pour desactiver les logs loguru pendant l'affichage Rich.

    Usage:
        with suppress_loguru():
            console.print(...)
    """
    loguru_logger.disable("stingray")
    try:
        yield
    finally:
        loguru_logger.enable("stingray")


def with_container():
    """
    Decorateur qui injecte un container initialise en premier argument.

    Usage:
        @with_container()
        async def my_command(container, ...):
            config = container.config()
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            container = Container()
            return await func(container, *args, **kwargs)
        return wrapper
    return decorator


@dataclass(frozen=True)
class Credentials:
    """Identifiants d'acces au serveur media."""

    server_url: str
    access_token: str
    user_id: str
    user_session_id: str


def resolve_credentials(container) -> Optional[Credentials]:
    """
    Identifiants a utiliser: ceux de la configuration s'ils sont complets,
    sinon ceux de l'utilisateur prefere du fichier de profils.

    Returns:
        Credentials, ou None si aucun utilisateur n'est connecte
    """
    config = container.config()
    if config.authenticated:
        return Credentials(
            server_url=config.server_url,
            access_token=config.access_token,
            user_id=config.user_id,
            user_session_id=config.user_session_id,
        )
    profile = container.user_profiles().get_preferred_profile()
    if profile is None or not profile.access_token:
        return None
    return Credentials(
        server_url=profile.server_url or config.server_url,
        access_token=profile.access_token,
        user_id=profile.id,
        user_session_id=profile.session_id,
    )
