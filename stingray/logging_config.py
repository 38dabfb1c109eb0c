"""
Configuration loguru de Stingray.

Deux sorties :
- console (stderr) : lignes colorées, préfixées par la session de lecture
  courante quand le message en porte une
- fichier : JSON avec rotation, niveau DEBUG, pour suivre les rapports
  envoyés au serveur (y compris ceux qui ont échoué)
"""

import sys
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from .config import Settings

_CONSOLE_PREFIX = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
_SESSION_TAG = "<magenta>[{extra[playback_session_id]:.8}]</magenta> "


def _console_format(record) -> str:
    tag = _SESSION_TAG if "playback_session_id" in record["extra"] else ""
    return _CONSOLE_PREFIX + tag + "<level>{message}</level>\n{exception}"


def configure_logging(settings: "Settings") -> list[int]:
    """
    Installe les handlers loguru à partir des réglages.

    Retourne les identifiants des handlers ajoutés, pour pouvoir les
    retirer avec ``logger.remove``.
    """
    logger.remove()

    handler_ids = [
        logger.add(sys.stderr, level=settings.log_level, format=_console_format, colorize=True)
    ]

    log_file = settings.log_file
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler_ids.append(
        logger.add(
            log_file,
            level="DEBUG",
            serialize=True,
            rotation=settings.log_rotation_size,
            retention=settings.log_retention_count,
            compression="zip",
            enqueue=True,
        )
    )

    logger.debug("Journal {path} ({rotation})", path=str(log_file), rotation=settings.log_rotation_size)
    return handler_ids
