"""
Utilitaires partages (conversion de ticks, constantes).
"""

from stingray.utils.ticks import format_ticks, seconds_to_ticks, ticks_to_seconds

__all__ = [
    "format_ticks",
    "seconds_to_ticks",
    "ticks_to_seconds",
]
