"""
Media entities.

Entities representing playable content decoded from the media server:
tracks, media sources, episodes, seasons and the three media kinds
(movie, series, collection).
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Union

from stingray.core.value_objects import TrackType


@dataclass(frozen=True)
class Track:
    """
    One selectable video, audio or subtitle stream of a media source.

    Tracks are immutable once decoded. The id is the server's stream index
    and is only unique within its parent media source.

    Attributes:
        id: Stream index within the media source
        title: Display title (e.g. "English 5.1")
        type: Video, audio or subtitle
        codec: Codec name (e.g. "hevc", "eac3")
        bitrate: Bits per second
        is_default: Default flag as decoded from the server
    """

    id: str
    title: str
    type: TrackType
    codec: str = ""
    bitrate: int = 0
    is_default: bool = False


@dataclass
class MediaSource:
    """
    A playable rendition of a movie or of one episode.

    The currently selected tracks are not stored here: they belong to the
    active playback session.

    Attributes:
        id: Media source ID
        name: Display name
        video_tracks: Video streams, in server order
        audio_tracks: Audio streams, in server order
        subtitle_tracks: Subtitle streams, in server order
        resume_ticks: Resume position in ticks (0 = start)
        duration_ticks: Total runtime in ticks, if known
    """

    id: str
    name: str = ""
    video_tracks: list[Track] = field(default_factory=list)
    audio_tracks: list[Track] = field(default_factory=list)
    subtitle_tracks: list[Track] = field(default_factory=list)
    resume_ticks: int = 0
    duration_ticks: Optional[int] = None

    def tracks(self, track_type: TrackType) -> list[Track]:
        """Returns the track list of the given type (empty for UNKNOWN)."""
        if track_type is TrackType.VIDEO:
            return self.video_tracks
        if track_type is TrackType.AUDIO:
            return self.audio_tracks
        if track_type is TrackType.SUBTITLE:
            return self.subtitle_tracks
        return []

    def find_track(self, track_type: TrackType, track_id: Optional[str]) -> Optional[Track]:
        """Looks up a track by id in the list of the given type."""
        if track_id is None:
            return None
        return next((t for t in self.tracks(track_type) if t.id == track_id), None)


@dataclass
class Episode:
    """
    Individual episode of a TV series.

    Attributes:
        id: Episode ID
        title: Episode title
        episode_number: Episode number within its season
        media_sources: Playable sources (normally exactly one)
        last_played: Last time the active user played it (None = never)
        overview: Episode description
        season_number: Season number, if known
    """

    id: str
    title: str = ""
    episode_number: int = 0
    media_sources: list[MediaSource] = field(default_factory=list)
    last_played: Optional[datetime] = None
    overview: Optional[str] = None
    season_number: Optional[int] = None


@dataclass
class Season:
    """
    Season of a TV series.

    Episodes keep the server order, which is not necessarily the
    episode-number order.

    Attributes:
        id: Season ID
        title: Season title
        season_number: Season number, if known
        episodes: Episodes in server order
    """

    id: str
    title: str = ""
    season_number: Optional[int] = None
    episodes: list[Episode] = field(default_factory=list)


@dataclass
class Movie:
    """A movie and its playable sources."""

    id: str
    title: str = ""
    media_sources: list[MediaSource] = field(default_factory=list)
    overview: Optional[str] = None


@dataclass
class Series:
    """A TV series and its seasons."""

    id: str
    title: str = ""
    seasons: list[Season] = field(default_factory=list)
    overview: Optional[str] = None


@dataclass
class Collection:
    """A collection (box set). Not playable by itself."""

    id: str
    title: str = ""


MediaItem = Union[Movie, Series, Collection]


def all_episodes(seasons: list[Season]) -> list[Episode]:
    """Flattens seasons into one list, season order then episode order."""
    return [episode for season in seasons for episode in season.episodes]
