"""
Business entities representing core domain concepts.

Entities are mutable objects with identity (tracks excepted, which are
immutable once decoded).

Exports:
- Track: One video, audio or subtitle stream
- MediaSource: A playable rendition with its tracks and resume position
- Episode, Season: TV series structure
- Movie, Series, Collection: The media kinds (MediaItem union)
"""

from stingray.core.entities.media import (
    Collection,
    Episode,
    MediaItem,
    MediaSource,
    Movie,
    Season,
    Series,
    Track,
    all_episodes,
)

__all__ = [
    "Collection",
    "Episode",
    "MediaItem",
    "MediaSource",
    "Movie",
    "Season",
    "Series",
    "Track",
    "all_episodes",
]
