"""
Mecanisme de retry avec backoff exponentiel pour les lectures sur le serveur media.

Seules les requetes de lecture (saisons, details d'un element) sont relancees,
sur 429 (rate limiting) et 503 (serveur en demarrage ou surcharge).
Les rapports de lecture ne passent jamais par ici: un rapport perdu est
remplace par le suivant.

Usage:
    response = await request_with_retry(client, "GET", "/Shows/abc/Episodes")
"""

from typing import Optional

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)


class RateLimitError(Exception):
    """
    Exception levee quand le serveur retourne 429 Too Many Requests.

    Attributes:
        retry_after: Secondes a attendre (header Retry-After), ou None.
    """

    def __init__(self, retry_after: Optional[int] = None) -> None:
        self.retry_after = retry_after
        super().__init__(f"Rate limited. Retry after: {retry_after}s")


class ServerBusyError(Exception):
    """Exception levee quand le serveur retourne 503 Service Unavailable."""

    def __init__(self) -> None:
        super().__init__("Media server unavailable (503)")


def _parse_retry_after(value: Optional[str]) -> Optional[int]:
    """Header Retry-After en secondes; les dates HTTP sont ignorees."""
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def with_retry(max_attempts: int = 4, max_wait: int = 30):
    """
    Decorateur de retry sur RateLimitError et ServerBusyError.

    Utilise wait_random_exponential (jitter) pour ne pas relancer tous
    les clients d'un meme serveur en meme temps.

    Args:
        max_attempts: Nombre maximum de tentatives (defaut: 4)
        max_wait: Delai maximum entre les tentatives en secondes (defaut: 30)
    """
    return retry(
        retry=retry_if_exception_type((RateLimitError, ServerBusyError)),
        wait=wait_random_exponential(multiplier=1, min=1, max=max_wait),
        stop=stop_after_attempt(max_attempts),
        reraise=True,
    )


async def request_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    max_attempts: int = 4,
    **kwargs,
) -> httpx.Response:
    """
    Execute une requete HTTP avec retry automatique sur 429 et 503.

    Les autres erreurs HTTP (4xx, 5xx) sont propagees immediatement.

    Args:
        client: Client httpx async
        method: Methode HTTP
        url: URL ou chemin relatif a base_url
        max_attempts: Nombre maximum de tentatives
        **kwargs: Arguments passes a client.request()

    Returns:
        httpx.Response en cas de succes

    Raises:
        RateLimitError: Si 429 apres epuisement des tentatives
        ServerBusyError: Si 503 apres epuisement des tentatives
        httpx.HTTPStatusError: Pour les autres erreurs HTTP
    """

    @with_retry(max_attempts=max_attempts)
    async def _do_request() -> httpx.Response:
        response = await client.request(method, url, **kwargs)
        if response.status_code == 429:
            raise RateLimitError(_parse_retry_after(response.headers.get("Retry-After")))
        if response.status_code == 503:
            raise ServerBusyError()
        response.raise_for_status()
        return response

    return await _do_request()
