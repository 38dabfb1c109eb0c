"""
Client HTTP pour un serveur compatible Jellyfin.

Implemente IMediaServerClient: construction de l'URL du flux HLS,
rapports de lecture, saisons d'une serie, detail d'un element,
URL d'images et authentification.

Les lectures (saisons, elements) passent par request_with_retry.
Les rapports de lecture ne sont jamais relances: le suivant remplace
celui qui a ete perdu.
"""

import uuid
from typing import Any, Optional
from urllib.parse import urlencode

import httpx
from loguru import logger

from stingray.adapters.api.jellyfin_decoder import (
    decode_item,
    decode_login,
    decode_seasons,
)
from stingray.adapters.api.retry import (
    RateLimitError,
    ServerBusyError,
    request_with_retry,
)
from stingray.core.entities import MediaItem, Season
from stingray.core.ports import (
    AuthenticationError,
    DecodeError,
    IMediaServerClient,
    MediaServerError,
)
from stingray.core.value_objects import (
    ImageKind,
    LoginResult,
    PlayableHandle,
    PlaybackEvent,
    PlaybackReport,
)
from stingray.utils.constants import STREAM_PARAMETERS

TOKEN_HEADER = "X-MediaBrowser-Token"
AUTHORIZATION_HEADER = "X-Emby-Authorization"

# Chemin et drapeau IsPaused de chaque evenement
_REPORT_ROUTES: dict[PlaybackEvent, tuple[str, bool]] = {
    PlaybackEvent.STARTED: ("Sessions/Playing", False),
    PlaybackEvent.PROGRESSED: ("Sessions/Playing/Progress", False),
    PlaybackEvent.PAUSED: ("Sessions/Playing/Progress", True),
    PlaybackEvent.STOPPED: ("Sessions/Playing/Stopped", False),
}


class JellyfinClient(IMediaServerClient):
    """
    Client du serveur media.

    Example:
        client = JellyfinClient("http://jellyfin.local:8096")
        login = await client.authenticate("alice", "secret")
        seasons = await client.get_seasons("series-id", login.access_token)
        await client.close()
    """

    def __init__(
        self,
        server_url: str,
        timeout: float = 30.0,
        connect_timeout: float = 10.0,
        device_name: str = "Stingray",
        device_id: Optional[str] = None,
        version: str = "0.1.0",
    ) -> None:
        """
        Initialise le client.

        Args:
            server_url: Adresse du serveur (ex: http://jellyfin.local:8096)
            timeout: Timeout global des requetes (secondes)
            connect_timeout: Timeout de connexion (secondes)
            device_name: Nom de l'appareil annonce au serveur
            device_id: Identifiant de l'appareil (genere si absent)
            version: Version du client annoncee au serveur
        """
        self._server_url = server_url.rstrip("/")
        self._timeout = timeout
        self._connect_timeout = connect_timeout
        self._device_name = device_name
        self._device_id = device_id or str(uuid.uuid4())
        self._version = version
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def server_url(self) -> str:
        return self._server_url

    async def _get_client(self) -> httpx.AsyncClient:
        """
        Retourne le client HTTP, cree s'il n'existe pas.

        Utilise un client unique pour beneficier du connection pooling.
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._server_url,
                timeout=httpx.Timeout(self._timeout, connect=self._connect_timeout),
            )
        return self._client

    def _authorization(self) -> str:
        return (
            f'MediaBrowser Client="Stingray", Device="{self._device_name}", '
            f'DeviceId="{self._device_id}", Version="{self._version}"'
        )

    def _build_url(self, path: str, params: list[tuple[str, str]]) -> str:
        url = f"{self._server_url}/{path.lstrip('/')}"
        if params:
            url += "?" + urlencode(params)
        return url

    # ------------------------------------------------------------------
    # Flux et images
    # ------------------------------------------------------------------

    def build_playback_request(
        self,
        access_token: str,
        media_id: str,
        video_track_id: str,
        audio_track_id: str,
        subtitle_track_id: Optional[str],
        bitrate_bits: Optional[int],
        playback_session_id: str,
    ) -> Optional[PlayableHandle]:
        """
        Construit l'URL de la playlist HLS d'une source.

        Returns:
            PlayableHandle avec le jeton en en-tete, None si un identifiant
            manque ou si le debit n'est pas strictement positif
        """
        if not (access_token and media_id and video_track_id and audio_track_id):
            return None
        if not playback_session_id or not bitrate_bits or bitrate_bits <= 0:
            return None

        params = [
            ("playSessionID", playback_session_id),
            ("mediaSourceID", media_id),
            ("audioStreamIndex", audio_track_id),
            ("videoStreamIndex", video_track_id),
            ("videoBitRate", str(bitrate_bits)),
            *STREAM_PARAMETERS,
        ]
        if subtitle_track_id is not None:
            params.append(("SubtitleMethod", "Encode"))
            params.append(("subtitleStreamIndex", subtitle_track_id))

        return PlayableHandle(
            url=self._build_url(f"/Videos/{media_id}/main.m3u8", params),
            headers={TOKEN_HEADER: access_token},
        )

    def get_image_url(self, kind: ImageKind, media_id: str, width: int) -> Optional[str]:
        """URL d'une image, None sans identifiant ou avec une largeur invalide."""
        if not media_id or width <= 0:
            return None
        return self._build_url(
            f"/Items/{media_id}/Images/{kind.value}",
            [("fillWidth", str(width)), ("quality", "95")],
        )

    # ------------------------------------------------------------------
    # Rapports de lecture
    # ------------------------------------------------------------------

    async def report_playback_event(
        self,
        event: PlaybackEvent,
        report: PlaybackReport,
        access_token: str,
    ) -> None:
        """
        Pousse un etat de lecture au serveur (une seule tentative).

        Raises:
            MediaServerError: Si la requete echoue ou si le serveur la refuse
        """
        path, is_paused = _REPORT_ROUTES[event]
        body = {
            "ItemId": report.item_id,
            "MediaSourceId": report.media_source_id,
            "AudioStreamIndex": report.audio_track_id,
            "SubtitleStreamIndex": report.subtitle_track_id if report.subtitle_track_id is not None else "-1",
            "PositionTicks": report.position_ticks,
            "PlaySessionId": report.playback_session_id,
            "SessionId": report.user_session_id,
            "IsPaused": is_paused,
        }
        client = await self._get_client()
        try:
            response = await client.post(
                f"/{path}",
                json=body,
                headers={TOKEN_HEADER: access_token},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise MediaServerError(
                f"Rapport {event.value} refuse: HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise MediaServerError(f"Rapport {event.value} impossible: {e}") from e

    # ------------------------------------------------------------------
    # Lectures
    # ------------------------------------------------------------------

    async def _get_json(self, url: str, access_token: str, params: Any = None) -> Any:
        """GET avec retry, erreurs converties en MediaServerError."""
        client = await self._get_client()
        try:
            response = await request_with_retry(
                client,
                "GET",
                url,
                params=params,
                headers={TOKEN_HEADER: access_token},
            )
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 401:
                raise AuthenticationError("Jeton refuse par le serveur", status_code=401) from e
            raise MediaServerError(
                f"HTTP {e.response.status_code} sur {url}",
                status_code=e.response.status_code,
            ) from e
        except RateLimitError as e:
            raise MediaServerError(str(e), status_code=429) from e
        except ServerBusyError as e:
            raise MediaServerError(str(e), status_code=503) from e
        except httpx.HTTPError as e:
            raise MediaServerError(f"Serveur injoignable: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"Reponse non JSON sur {url}") from e

    async def get_seasons(self, series_id: str, access_token: str) -> list[Season]:
        """
        Recupere les episodes d'une serie, regroupes en saisons.

        Raises:
            MediaServerError: Si la requete echoue
            DecodeError: Si la reponse est mal formee
        """
        params = [
            ("fields", "MediaSources"),
            ("fields", "Overview"),
            ("sortBy", "AiredEpisodeOrder"),
        ]
        data = await self._get_json(f"/Shows/{series_id}/Episodes", access_token, params)
        if not isinstance(data, dict) or not isinstance(data.get("Items"), list):
            raise DecodeError(f"Liste d'episodes absente pour la serie {series_id}")
        seasons = decode_seasons(data["Items"])
        logger.debug(
            "Saisons recuperees pour {series_id}",
            series_id=series_id,
            seasons=len(seasons),
        )
        return seasons

    async def get_item(self, item_id: str, user_id: str, access_token: str) -> MediaItem:
        """
        Recupere un element (film, serie, collection) pour un utilisateur.

        Raises:
            MediaServerError: Si la requete echoue
            DecodeError: Si la reponse est mal formee ou d'un type inconnu
        """
        data = await self._get_json(
            f"/Users/{user_id}/Items/{item_id}",
            access_token,
            [("fields", "MediaSources"), ("fields", "Overview")],
        )
        if not isinstance(data, dict):
            raise DecodeError(f"Element {item_id} illisible")
        return decode_item(data)

    # ------------------------------------------------------------------
    # Authentification
    # ------------------------------------------------------------------

    async def authenticate(self, username: str, password: str) -> LoginResult:
        """
        Authentifie un utilisateur par nom et mot de passe.

        Raises:
            AuthenticationError: Si le serveur refuse les identifiants
            MediaServerError: Si le serveur est injoignable
            DecodeError: Si la reponse est mal formee
        """
        client = await self._get_client()
        try:
            response = await client.post(
                "/Users/AuthenticateByName",
                json={"Username": username, "Pw": password},
                headers={AUTHORIZATION_HEADER: self._authorization()},
            )
        except httpx.HTTPError as e:
            raise MediaServerError(f"Serveur injoignable: {e}") from e

        if response.status_code in (401, 403):
            raise AuthenticationError(
                f"Identifiants refuses pour {username}",
                status_code=response.status_code,
            )
        if response.is_error:
            raise MediaServerError(
                f"Connexion impossible: HTTP {response.status_code}",
                status_code=response.status_code,
            )
        try:
            data = response.json()
        except ValueError as e:
            raise DecodeError("Reponse de connexion non JSON") from e

        result = decode_login(data)
        logger.info(
            "Connecte en tant que {user}",
            user=result.user_name,
            server_id=result.server_id,
        )
        return result

    async def close(self) -> None:
        """Ferme le client HTTP."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
