"""
Client du serveur media compatible Jellyfin.

- JellyfinClient: implementation HTTP de IMediaServerClient
- jellyfin_decoder: conversion des reponses JSON en entites

Infrastructure partagee:
- RateLimitError, ServerBusyError: erreurs 429 et 503
- with_retry, request_with_retry: backoff exponentiel pour les lectures
"""

from stingray.adapters.api.jellyfin_client import JellyfinClient
from stingray.adapters.api.retry import (
    RateLimitError,
    ServerBusyError,
    request_with_retry,
    with_retry,
)

__all__ = [
    "JellyfinClient",
    "RateLimitError",
    "ServerBusyError",
    "request_with_retry",
    "with_retry",
]
