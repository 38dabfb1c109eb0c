"""
Decodage des reponses JSON du serveur Jellyfin en entites du domaine.

Toutes les fonctions levent DecodeError sur un payload mal forme
(cle obligatoire absente, type inattendu).
"""

import re
from datetime import datetime
from typing import Any, Optional

from stingray.core.entities import (
    Collection,
    Episode,
    MediaItem,
    MediaSource,
    Movie,
    Season,
    Series,
    Track,
)
from stingray.core.ports import DecodeError
from stingray.core.value_objects import LoginResult, TrackType
from stingray.utils.constants import (
    AV1_BITRATE_FACTOR,
    DEFAULT_TRACK_BITRATE,
    UNKNOWN_TRACK_TITLE,
)

# Jellyfin renvoie jusqu'a 7 decimales et un suffixe Z
_ISO_DATE = re.compile(r"^(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(?::\d{2})?)(?:\.(?P<fraction>\d+))?(?P<tz>Z|[+-]\d{2}:\d{2})?$")

SPECIALS_SEASON_NAME = "Specials"
SPECIAL_SEASON_TITLE = "Special"
UNKNOWN_SEASON_TITLE = "Unknown Season"


def parse_server_date(value: Optional[str]) -> Optional[datetime]:
    """
    Parse une date ISO 8601 du serveur.

    Returns:
        Datetime avec fuseau (UTC si non precise), None si absente ou illisible
    """
    if not value:
        return None
    match = _ISO_DATE.match(value.strip())
    if match is None:
        return None
    text = match.group("base")
    if match.group("fraction"):
        text += "." + match.group("fraction")[:6].ljust(6, "0")
    tz = match.group("tz")
    text += "+00:00" if tz in (None, "Z") else tz
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def decode_track(data: dict[str, Any]) -> Track:
    """Decode une entree de MediaStreams."""
    codec = data.get("Codec") or ""
    bitrate = data.get("BitRate") or DEFAULT_TRACK_BITRATE
    if codec == "av1":
        bitrate = int(bitrate * AV1_BITRATE_FACTOR)
    index = data.get("Index")
    if index is None:
        raise DecodeError("MediaStream sans Index")
    return Track(
        id=str(index),
        title=data.get("DisplayTitle") or UNKNOWN_TRACK_TITLE,
        type=TrackType.from_server(data.get("Type")),
        codec=codec,
        bitrate=bitrate,
        is_default=bool(data.get("IsDefault", False)),
    )


def decode_media_source(data: dict[str, Any]) -> MediaSource:
    """
    Decode une entree de MediaSources.

    Les pistes sont reparties par type. DefaultAudioStreamIndex, s'il est
    present, remplace les drapeaux IsDefault des pistes audio.
    """
    try:
        tracks = [decode_track(stream) for stream in data.get("MediaStreams") or []]
        audio_tracks = [t for t in tracks if t.type is TrackType.AUDIO]
        default_audio = data.get("DefaultAudioStreamIndex")
        if default_audio is not None:
            audio_tracks = [
                Track(
                    id=t.id,
                    title=t.title,
                    type=t.type,
                    codec=t.codec,
                    bitrate=t.bitrate,
                    is_default=t.id == str(default_audio),
                )
                for t in audio_tracks
            ]
        return MediaSource(
            id=data["Id"],
            name=data.get("Name") or "",
            video_tracks=[t for t in tracks if t.type is TrackType.VIDEO],
            audio_tracks=audio_tracks,
            subtitle_tracks=[t for t in tracks if t.type is TrackType.SUBTITLE],
            duration_ticks=data.get("RunTimeTicks"),
        )
    except (KeyError, TypeError, AttributeError) as e:
        raise DecodeError(f"MediaSource illisible: {e}") from e


def _decode_sources(item: dict[str, Any]) -> list[MediaSource]:
    """Sources d'un element, avec duree et position de reprise de l'element."""
    sources = [decode_media_source(source) for source in item.get("MediaSources") or []]
    runtime = item.get("RunTimeTicks")
    position = (item.get("UserData") or {}).get("PlaybackPositionTicks")
    for source in sources:
        if source.duration_ticks is None and runtime:
            source.duration_ticks = runtime
        if position is not None:
            source.resume_ticks = position
    return sources


def decode_episode(item: dict[str, Any], fallback_number: int) -> Episode:
    """
    Decode un episode de /Shows/{id}/Episodes.

    Args:
        item: Entree de Items
        fallback_number: Numero utilise si IndexNumber est absent
    """
    try:
        user_data = item.get("UserData") or {}
        return Episode(
            id=item["Id"],
            title=item.get("Name") or "",
            episode_number=item.get("IndexNumber") or fallback_number,
            media_sources=_decode_sources(item),
            last_played=parse_server_date(user_data.get("LastPlayedDate")),
            overview=item.get("Overview"),
            season_number=item.get("ParentIndexNumber"),
        )
    except (KeyError, TypeError, AttributeError) as e:
        raise DecodeError(f"Episode illisible: {e}") from e


def decode_seasons(items: list[dict[str, Any]]) -> list[Season]:
    """
    Regroupe la liste plate des episodes d'une serie en saisons.

    - Les episodes consecutifs d'un meme SeasonId (a defaut SeriesId)
      forment une saison.
    - Un episode "Specials" forme sa propre saison "Special".
    - Une saison coupee par un special reprend en "<nom> Cont.".
    """
    seasons: list[Season] = []
    last_season_id = ""
    for position, item in enumerate(items, start=1):
        episode = decode_episode(item, fallback_number=position)
        season_id = item.get("SeasonId") or item.get("SeriesId")
        if season_id is None:
            raise DecodeError(f"Episode {episode.id} sans SeasonId ni SeriesId")
        season_title = item.get("SeasonName") or UNKNOWN_SEASON_TITLE

        if season_title == SPECIALS_SEASON_NAME:
            seasons.append(
                Season(id=season_id, title=SPECIAL_SEASON_TITLE, episodes=[episode])
            )
        elif season_id == last_season_id and seasons and seasons[-1].title == SPECIAL_SEASON_TITLE:
            seasons.append(
                Season(
                    id=season_id,
                    title=f"{season_title} Cont.",
                    season_number=episode.season_number,
                    episodes=[episode],
                )
            )
        elif season_id == last_season_id and seasons:
            seasons[-1].episodes.append(episode)
        else:
            last_season_id = season_id
            seasons.append(
                Season(
                    id=season_id,
                    title=season_title,
                    season_number=episode.season_number,
                    episodes=[episode],
                )
            )
    return seasons


def decode_item(item: dict[str, Any]) -> MediaItem:
    """
    Decode un element de bibliotheque selon son Type.

    Movie -> Movie (avec sources), Series -> Series (saisons a charger a part),
    BoxSet -> Collection.
    """
    try:
        item_type = item["Type"]
        item_id = item["Id"]
    except (KeyError, TypeError) as e:
        raise DecodeError(f"Element illisible: {e}") from e

    title = item.get("Name") or ""
    if item_type == "Movie":
        return Movie(
            id=item_id,
            title=title,
            media_sources=_decode_sources(item),
            overview=item.get("Overview"),
        )
    if item_type == "Series":
        return Series(id=item_id, title=title, overview=item.get("Overview"))
    if item_type == "BoxSet":
        return Collection(id=item_id, title=title)
    raise DecodeError(f"Type de media inconnu: {item_type}")


def decode_login(data: dict[str, Any]) -> LoginResult:
    """Decode la reponse de /Users/AuthenticateByName."""
    try:
        return LoginResult(
            user_id=data["SessionInfo"]["UserId"],
            user_name=data["User"]["Name"],
            session_id=data["SessionInfo"]["Id"],
            access_token=data["AccessToken"],
            server_id=data["ServerId"],
        )
    except (KeyError, TypeError) as e:
        raise DecodeError(f"Reponse de connexion illisible: {e}") from e
