"""
Controleur de session de lecture.

PlaybackSessionController possede au plus une session active et la tache
de fond qui rapporte la progression au serveur.

Etats:
- Idle : aucune session
- Active : session en cours + tache de rapport armee

Cycle de vie d'une session:
    start() -> rapport STARTED (en tache de fond) -> rapports PROGRESSED/PAUSED chaque seconde
    stop()  -> annulation de la tache -> rapport STOPPED (toujours le dernier)

Tous les rapports sont envoyes au mieux: une erreur reseau est journalisee
puis ignoree, elle n'interrompt jamais la lecture. Seul l'echec de
construction du flux est remonte (None: rien a lire).
"""

import asyncio
import uuid
from dataclasses import dataclass
from typing import Optional, Union

from loguru import logger

from stingray.core.entities import MediaSource
from stingray.core.ports import (
    IMediaServerClient,
    IPlayer,
    IPlayerFactory,
)
from stingray.core.value_objects import (
    Bitrate,
    FullBitrate,
    PlaybackEvent,
    PlaybackReport,
    TrackType,
)
from stingray.utils.constants import (
    BARELY_STARTED_THRESHOLD,
    FINISHED_THRESHOLD,
    REPORT_INTERVAL_SECONDS,
)
from stingray.utils.ticks import seconds_to_ticks


def finalize_resume_ticks(position_ticks: int, duration_ticks: Optional[int]) -> int:
    """
    Normalise une position de reprise en fin de session.

    "Presque fini" (>= 90%) et "a peine commence" (< 10%) deviennent 0,
    c'est-a-dire "pas en cours". La fonction est idempotente.

    Args:
        position_ticks: Position atteinte
        duration_ticks: Duree totale, None si inconnue

    Returns:
        0 ou la position inchangee. Sans duree connue, la position est conservee.
    """
    if not duration_ticks:
        return position_ticks
    if position_ticks >= FINISHED_THRESHOLD * duration_ticks:
        return 0
    if position_ticks < BARELY_STARTED_THRESHOLD * duration_ticks:
        return 0
    return position_ticks


@dataclass
class PlayerProgress:
    """
    Etat vivant d'une session de lecture.

    Les identifiants de session ne changent jamais pendant la vie de l'objet:
    un changement de piste, de debit ou d'episode cree une nouvelle session.

    Attributs:
        player: Lecteur possede par la session
        media_source: Source media en lecture
        item_id: Element rapporte au serveur
        video_id: Piste video selectionnee
        audio_id: Piste audio selectionnee
        subtitle_id: Piste de sous-titres (None = aucune)
        bitrate: Debit demande
        playback_session_id: ID genere pour cette session
        user_session_id: ID de la session utilisateur
        last_position_ticks: Derniere position lue
    """

    player: IPlayer
    media_source: MediaSource
    item_id: str
    video_id: str
    audio_id: str
    subtitle_id: Optional[str]
    bitrate: Bitrate
    playback_session_id: str
    user_session_id: str
    last_position_ticks: int = 0

    def read_position(self) -> int:
        """Lit la position du lecteur (en ticks) et la memorise."""
        self.last_position_ticks = seconds_to_ticks(self.player.current_time)
        return self.last_position_ticks

    def report(self, position_ticks: int) -> PlaybackReport:
        return PlaybackReport(
            item_id=self.item_id,
            media_source_id=self.media_source.id,
            audio_track_id=self.audio_id,
            subtitle_track_id=self.subtitle_id,
            position_ticks=position_ticks,
            playback_session_id=self.playback_session_id,
            user_session_id=self.user_session_id,
        )


@dataclass(frozen=True)
class Idle:
    """Aucune session active."""


@dataclass(frozen=True)
class Active:
    """Session active et sa tache de rapport."""

    progress: PlayerProgress
    reporter: asyncio.Task


SessionState = Union[Idle, Active]


class PlaybackSessionController:
    """
    Orchestre le cycle de vie d'une session de lecture.

    Une seule session et une seule tache de rapport existent a la fois:
    start() sur une session active arrete d'abord l'ancienne, et le
    rapport STOPPED de l'ancienne precede toujours le STARTED de la nouvelle.

    Example:
        controller = PlaybackSessionController(server, factory, token, session_id)
        player = await controller.start(source, "0", "1", None, FULL_BITRATE)
        ...
        await controller.stop()
    """

    def __init__(
        self,
        media_server: IMediaServerClient,
        player_factory: IPlayerFactory,
        access_token: str,
        user_session_id: str,
        report_interval: float = REPORT_INTERVAL_SECONDS,
    ) -> None:
        """
        Initialise le controleur.

        Args:
            media_server: Serveur media (flux + rapports)
            player_factory: Cree le lecteur a partir du flux
            access_token: Jeton d'acces de l'utilisateur
            user_session_id: ID de la session utilisateur cote serveur
            report_interval: Intervalle entre deux rapports (secondes)
        """
        self._media_server = media_server
        self._player_factory = player_factory
        self._access_token = access_token
        self._user_session_id = user_session_id
        self._report_interval = report_interval
        self._state: SessionState = Idle()
        self._lock = asyncio.Lock()
        self._in_flight: Optional[asyncio.Task] = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_active(self) -> bool:
        return isinstance(self._state, Active)

    @property
    def progress(self) -> Optional[PlayerProgress]:
        """Session en cours, None si inactif."""
        if isinstance(self._state, Active):
            return self._state.progress
        return None

    async def start(
        self,
        media_source: MediaSource,
        video_id: str,
        audio_id: str,
        subtitle_id: Optional[str],
        bitrate: Bitrate,
        item_id: Optional[str] = None,
    ) -> Optional[IPlayer]:
        """
        Demarre une session de lecture.

        Les pistes doivent deja etre resolues par l'appelant.

        Args:
            media_source: Source a lire
            video_id: Piste video
            audio_id: Piste audio
            subtitle_id: Piste de sous-titres (None = aucune)
            bitrate: Debit plein ou plafonne
            item_id: Element rapporte au serveur (defaut: ID de la source)

        Returns:
            Le lecteur pret a jouer, ou None si le flux n'a pas pu etre construit
            (aucune session n'est alors active)
        """
        async with self._lock:
            if isinstance(self._state, Active):
                logger.warning(
                    "Session encore active, arret avant redemarrage",
                    playback_session_id=self._state.progress.playback_session_id,
                )
                await self._stop_locked()

            video_track = media_source.find_track(TrackType.VIDEO, video_id)
            if video_track is None:
                logger.warning(f"Piste video {video_id} absente de {media_source.id}")
                return None

            if isinstance(bitrate, FullBitrate):
                bitrate_bits = video_track.bitrate
            else:
                bitrate_bits = bitrate.bits

            playback_session_id = str(uuid.uuid4())
            handle = self._media_server.build_playback_request(
                access_token=self._access_token,
                media_id=media_source.id,
                video_track_id=video_id,
                audio_track_id=audio_id,
                subtitle_track_id=subtitle_id,
                bitrate_bits=bitrate_bits,
                playback_session_id=playback_session_id,
            )
            if handle is None:
                logger.warning(f"Aucun flux lisible pour {media_source.id}")
                return None

            player = self._player_factory.create(handle)
            progress = PlayerProgress(
                player=player,
                media_source=media_source,
                item_id=item_id or media_source.id,
                video_id=video_id,
                audio_id=audio_id,
                subtitle_id=subtitle_id,
                bitrate=bitrate,
                playback_session_id=playback_session_id,
                user_session_id=self._user_session_id,
            )

            self._in_flight = asyncio.create_task(
                self._send(PlaybackEvent.STARTED, progress, progress.read_position())
            )
            reporter = asyncio.create_task(self._report_loop(progress))
            self._state = Active(progress=progress, reporter=reporter)

            logger.info(
                "Lecture demarree: {source}",
                source=media_source.name or media_source.id,
                playback_session_id=playback_session_id,
                video_id=video_id,
                audio_id=audio_id,
                subtitle_id=subtitle_id,
                bitrate_bits=bitrate_bits,
            )
            return player

    async def stop(self) -> None:
        """
        Arrete la session active. Sans session, ne fait rien.

        La tache de rapport est annulee avant l'envoi du rapport STOPPED,
        qui est donc le dernier rapport de la session.
        """
        async with self._lock:
            await self._stop_locked()

    async def _stop_locked(self) -> None:
        state = self._state
        if not isinstance(state, Active):
            return
        self._state = Idle()

        state.reporter.cancel()
        try:
            await state.reporter
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.debug(f"Tache de rapport interrompue: {e}")
        if self._in_flight is not None:
            await self._in_flight
            self._in_flight = None

        progress = state.progress
        try:
            position = progress.read_position()
        except Exception as e:
            logger.debug(f"Position illisible, derniere position connue conservee: {e}")
            position = progress.last_position_ticks
        progress.player.pause()
        progress.player.release()

        source = progress.media_source
        source.resume_ticks = finalize_resume_ticks(position, source.duration_ticks)

        await self._send(PlaybackEvent.STOPPED, progress, position)
        logger.info(
            "Lecture arretee: {source}",
            source=source.name or source.id,
            playback_session_id=progress.playback_session_id,
            position_ticks=position,
            resume_ticks=source.resume_ticks,
        )

    async def _report_loop(self, progress: PlayerProgress) -> None:
        """Rapporte la progression a intervalle fixe jusqu'a annulation."""
        while True:
            await asyncio.sleep(self._report_interval)
            if self._in_flight is not None and not self._in_flight.done():
                logger.debug("Rapport precedent en cours, tick ignore")
                continue
            event = PlaybackEvent.PROGRESSED if progress.player.is_playing else PlaybackEvent.PAUSED
            position = progress.read_position()
            self._in_flight = asyncio.create_task(self._send(event, progress, position))

    async def _send(self, event: PlaybackEvent, progress: PlayerProgress, position_ticks: int) -> None:
        """Envoie un rapport au serveur, les erreurs sont ignorees."""
        try:
            await self._media_server.report_playback_event(
                event, progress.report(position_ticks), self._access_token
            )
        except Exception as e:
            logger.debug(f"Rapport {event.value} ignore: {e}")
