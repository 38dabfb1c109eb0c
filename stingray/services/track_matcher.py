"""
Correspondance de pistes entre sources media.

Les identifiants de pistes sont locaux a une source: "English 5.1" peut etre
l'index 2 d'un episode et l'index 3 du suivant. Le titre affiche est la seule
cle stable entre deux sources.

Limitation connue: deux pistes distinctes peuvent partager un titre,
la premiere l'emporte. Aucune desambiguisation (langue, canaux) n'est faite.
"""

from typing import Optional

from stingray.core.entities import MediaSource, Track
from stingray.core.value_objects import TrackType


def find_similar_track(
    base_track: Track,
    in_source: MediaSource,
    track_type: TrackType,
) -> Optional[Track]:
    """
    Trouve dans une autre source la piste equivalente a base_track.

    Args:
        base_track: Piste selectionnee dans la source d'origine
        in_source: Source dans laquelle chercher
        track_type: Liste de pistes a parcourir

    Returns:
        La premiere piste de meme titre, ou None (pas une erreur)
    """
    for track in in_source.tracks(track_type):
        if track.title == base_track.title:
            return track
    return None


def default_track(tracks: list[Track]) -> Optional[Track]:
    """Piste marquee par defaut, sinon la premiere, sinon None."""
    for track in tracks:
        if track.is_default:
            return track
    return tracks[0] if tracks else None
