"""
View-model du lecteur.

Traduit les actions de l'utilisateur (choix des sous-titres, de la piste
audio ou video, du debit, episode suivant/precedent, reprise/redemarrage)
en appels au controleur de session.

Chaque changement est un arret suivi d'un redemarrage: le serveur recoit
toujours une paire STOPPED/STARTED coherente. Les selections sont relues sur
la session active; sans session, ce sont celles du dernier demarrage reussi,
toujours valables pour media_source.
"""

from datetime import datetime, timezone
from typing import Callable, Optional

from loguru import logger

from stingray.core.entities import Episode, MediaSource, Season, Track, all_episodes
from stingray.core.ports import IMediaServerClient, IPlayer, IUserProfileStore
from stingray.core.value_objects import Bitrate, ImageKind, TrackType
from stingray.services.playback_session import PlaybackSessionController
from stingray.services.track_matcher import default_track, find_similar_track
from stingray.utils.ticks import seconds_to_ticks, ticks_to_seconds

# Marqueur "conserver la piste de sous-titres actuelle" (None signifie "aucune")
_KEEP = object()


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PlayerViewModel:
    """
    Coordonne le lecteur, le controleur de session et les preferences.

    Les preferences de l'utilisateur prefere (sous-titres, debit) sont lues
    a la construction pour choisir les pistes initiales, puis reecrites
    apres chaque demarrage reussi.

    Attributes:
        player: Lecteur de la session en cours (None si rien ne joue)
        media_source: Source media en cours
        episode: Episode en cours (None pour un film)
        seasons: Saisons de la serie (None pour un film)
    """

    def __init__(
        self,
        controller: PlaybackSessionController,
        user_profiles: IUserProfileStore,
        media_server: IMediaServerClient,
        media_source: MediaSource,
        seasons: Optional[list[Season]] = None,
        item_id: Optional[str] = None,
        now: Callable[[], datetime] = _utc_now,
    ) -> None:
        """
        Initialise le view-model.

        Args:
            controller: Controleur de session (possede exclusivement)
            user_profiles: Stockage des preferences
            media_server: Serveur media (URL d'images)
            media_source: Source a lire
            seasons: Saisons si la source est un episode
            item_id: Element rapporte au serveur pour un film (defaut: ID de la source)
            now: Horloge (UTC) utilisee pour dater le dernier visionnage
        """
        self._controller = controller
        self._user_profiles = user_profiles
        self._media_server = media_server
        self._now = now
        self._movie_item_id = item_id

        self.player: Optional[IPlayer] = None
        self.media_source = media_source
        self.seasons = seasons
        self.episode = self._find_episode(media_source)

        preferences = user_profiles.get_preferred_user()
        video = default_track(media_source.video_tracks)
        audio = default_track(media_source.audio_tracks)
        subtitle = default_track(media_source.subtitle_tracks) if preferences.uses_subtitles else None
        self._last_video_id = video.id if video else None
        self._last_audio_id = audio.id if audio else None
        self._last_subtitle_id = subtitle.id if subtitle else None
        self._last_bitrate = preferences.bitrate

    # ------------------------------------------------------------------
    # Selections (session active, sinon derniere session demarree)
    # ------------------------------------------------------------------

    @property
    def selected_video_id(self) -> Optional[str]:
        progress = self._controller.progress
        return progress.video_id if progress else self._last_video_id

    @property
    def selected_audio_id(self) -> Optional[str]:
        progress = self._controller.progress
        return progress.audio_id if progress else self._last_audio_id

    @property
    def selected_subtitle_id(self) -> Optional[str]:
        progress = self._controller.progress
        return progress.subtitle_id if progress else self._last_subtitle_id

    @property
    def bitrate(self) -> Bitrate:
        progress = self._controller.progress
        return progress.bitrate if progress else self._last_bitrate

    @property
    def video_tracks(self) -> list[Track]:
        return self.media_source.video_tracks

    @property
    def audio_tracks(self) -> list[Track]:
        return self.media_source.audio_tracks

    @property
    def subtitle_tracks(self) -> list[Track]:
        return self.media_source.subtitle_tracks

    @property
    def current_position_ticks(self) -> int:
        """Position du lecteur, ou position de reprise si rien ne joue."""
        if self.player is not None and self._controller.is_active:
            return seconds_to_ticks(self.player.current_time)
        return self.media_source.resume_ticks

    def image_url(self, kind: ImageKind, width: int) -> Optional[str]:
        """URL d'image de l'element en cours."""
        return self._media_server.get_image_url(kind, self._item_id(self.episode), width)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def play(self, start_ticks: int = 0) -> Optional[IPlayer]:
        """Demarre la lecture avec les selections courantes."""
        return await self._new_player(start_ticks)

    async def resume(self) -> Optional[IPlayer]:
        """Reprend a la position enregistree de la source."""
        return await self._new_player(self.media_source.resume_ticks)

    async def restart(self) -> Optional[IPlayer]:
        """Reprend depuis le debut."""
        return await self._new_player(0)

    async def select_subtitle(self, subtitle_id: Optional[str]) -> Optional[IPlayer]:
        """Change de sous-titres (None = aucun) sans perdre la position."""
        return await self._new_player(self.current_position_ticks, subtitle_id=subtitle_id)

    async def select_audio(self, audio_id: str) -> Optional[IPlayer]:
        return await self._new_player(self.current_position_ticks, audio_id=audio_id)

    async def select_video(self, video_id: str) -> Optional[IPlayer]:
        return await self._new_player(self.current_position_ticks, video_id=video_id)

    async def change_bitrate(self, bitrate: Bitrate) -> Optional[IPlayer]:
        return await self._new_player(self.current_position_ticks, bitrate=bitrate)

    async def play_episode(self, episode: Episode) -> Optional[IPlayer]:
        """
        Passe a un autre episode en conservant des pistes equivalentes.

        Les pistes sont retrouvees par titre dans la nouvelle source; a defaut,
        la piste par defaut (ou la premiere) de la nouvelle source est prise.
        Les sous-titres restent desactives s'ils l'etaient.

        Returns:
            Le nouveau lecteur, ou None si l'episode n'est pas lisible
            (la session en cours n'est alors pas interrompue si les pistes
            n'ont pas pu etre resolues)
        """
        if not episode.media_sources:
            logger.warning(f"Episode sans source media: {episode.id}")
            return None
        new_source = episode.media_sources[0]

        video = self._carry_over(TrackType.VIDEO, self.selected_video_id, new_source)
        audio = self._carry_over(TrackType.AUDIO, self.selected_audio_id, new_source)
        subtitle = None
        if self.selected_subtitle_id is not None:
            subtitle = self._carry_over(TrackType.SUBTITLE, self.selected_subtitle_id, new_source)

        if video is None or audio is None:
            logger.warning(f"Pistes introuvables pour l'episode {episode.id}")
            return None

        logger.info(
            "Transition vers l'episode {title}",
            title=episode.title,
            video_id=video.id,
            audio_id=audio.id,
            subtitle_id=subtitle.id if subtitle else None,
        )
        return await self._new_player(
            0,
            video_id=video.id,
            audio_id=audio.id,
            subtitle_id=subtitle.id if subtitle else None,
            media_source=new_source,
            episode=episode,
        )

    async def next_episode(self) -> Optional[IPlayer]:
        """Episode suivant dans l'ordre des saisons, None apres le dernier."""
        episode = self._neighbour(+1)
        if episode is None:
            return None
        return await self.play_episode(episode)

    async def previous_episode(self) -> Optional[IPlayer]:
        """Episode precedent, None avant le premier."""
        episode = self._neighbour(-1)
        if episode is None:
            return None
        return await self.play_episode(episode)

    async def close(self) -> None:
        """Arrete la session (fermeture de la vue)."""
        await self._stop_current()
        self.player = None

    # ------------------------------------------------------------------
    # Interne
    # ------------------------------------------------------------------

    async def _new_player(
        self,
        start_ticks: int,
        video_id: Optional[str] = None,
        audio_id: Optional[str] = None,
        subtitle_id=_KEEP,
        bitrate: Optional[Bitrate] = None,
        media_source: Optional[MediaSource] = None,
        episode: Optional[Episode] = None,
    ) -> Optional[IPlayer]:
        """Arrete la session en cours puis en demarre une nouvelle."""
        source = media_source or self.media_source
        target_episode = episode if media_source is not None else self.episode
        video_id = video_id or self.selected_video_id
        audio_id = audio_id or self.selected_audio_id
        if subtitle_id is _KEEP:
            subtitle_id = self.selected_subtitle_id
        bitrate = bitrate or self.bitrate

        await self._stop_current()
        self.player = None

        if video_id is None or audio_id is None:
            logger.warning(f"Aucune piste video/audio pour {source.id}")
            return None

        player = await self._controller.start(
            source,
            video_id,
            audio_id,
            subtitle_id,
            bitrate,
            item_id=self._item_id(target_episode),
        )
        if player is None:
            return None

        self.media_source = source
        self.episode = target_episode
        self.player = player
        self._last_video_id = video_id
        self._last_audio_id = audio_id
        self._last_subtitle_id = subtitle_id
        self._last_bitrate = bitrate
        player.seek(ticks_to_seconds(start_ticks))
        player.play()

        self._user_profiles.update_preferred_user(
            uses_subtitles=subtitle_id is not None,
            bitrate_cap_bits=bitrate.cap_bits,
        )
        self._stamp_last_played()
        return player

    async def _stop_current(self) -> None:
        if self._controller.is_active:
            await self._controller.stop()
            self._stamp_last_played()

    def _stamp_last_played(self) -> None:
        if self.episode is not None:
            self.episode.last_played = self._now()

    def _item_id(self, episode: Optional[Episode]) -> str:
        if episode is not None:
            return episode.id
        return self._movie_item_id or self.media_source.id

    def _carry_over(
        self,
        track_type: TrackType,
        track_id: Optional[str],
        new_source: MediaSource,
    ) -> Optional[Track]:
        """Piste equivalente dans new_source, sinon sa piste par defaut."""
        old_track = self.media_source.find_track(track_type, track_id)
        if old_track is not None:
            similar = find_similar_track(old_track, new_source, track_type)
            if similar is not None:
                return similar
        return default_track(new_source.tracks(track_type))

    def _find_episode(self, media_source: MediaSource) -> Optional[Episode]:
        for episode in all_episodes(self.seasons or []):
            if any(source.id == media_source.id for source in episode.media_sources):
                return episode
        return None

    def _neighbour(self, offset: int) -> Optional[Episode]:
        if self.episode is None:
            return None
        episodes = all_episodes(self.seasons or [])
        ids = [episode.id for episode in episodes]
        if self.episode.id not in ids:
            return None
        index = ids.index(self.episode.id) + offset
        if 0 <= index < len(episodes):
            return episodes[index]
        return None
