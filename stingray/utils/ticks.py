"""
Conversion entre les ticks du serveur et les secondes.

Toute position qui traverse la frontiere reseau est exprimee en ticks;
toute position utilisee pour le lecteur (seek, comparaison) est en secondes.
Les valeurs negatives sont transmises telles quelles, l'appelant borne.
"""

from stingray.utils.constants import TICKS_PER_SECOND


def ticks_to_seconds(ticks: int) -> float:
    """Convertit des ticks (1/10 000 000 s) en secondes."""
    return ticks / TICKS_PER_SECOND


def seconds_to_ticks(seconds: float) -> int:
    """Convertit des secondes en ticks, arrondi au tick le plus proche."""
    return round(seconds * TICKS_PER_SECOND)


def format_ticks(ticks: int) -> str:
    """
    Formate une position en ticks pour l'affichage.

    Returns:
        "H:MM:SS" au-dela d'une heure, "M:SS" sinon. Les valeurs negatives
        sont affichees comme 0:00.
    """
    total_seconds = max(0, int(ticks_to_seconds(ticks)))
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"
