"""
Fixtures pytest partagees pour les tests Stingray.

Ce module contient les fixtures communes utilisees dans les tests:
- FakePlayer / FakePlayerFactory : lecteur pilotable sans decodeur video
- Mocks des ports (IMediaServerClient, IUserProfileStore)
- Sources media et saisons d'exemple
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from stingray.core.entities import MediaSource, Season
from stingray.core.ports import IMediaServerClient, IPlayer, IPlayerFactory, IUserProfileStore
from stingray.core.value_objects import PlayableHandle, UserPreferences
from tests.fixtures.media import make_episode, make_source


class FakePlayer(IPlayer):
    """Lecteur en memoire: la position est fixee par le test."""

    def __init__(self, handle: PlayableHandle) -> None:
        self.handle = handle
        self.position = 0.0
        self.playing = False
        self.released = False
        self.calls: list[str] = []

    @property
    def current_time(self) -> float:
        return self.position

    @property
    def is_playing(self) -> bool:
        return self.playing

    def seek(self, seconds: float) -> None:
        self.calls.append(f"seek:{seconds}")
        self.position = seconds

    def play(self) -> None:
        self.calls.append("play")
        self.playing = True

    def pause(self) -> None:
        self.calls.append("pause")
        self.playing = False

    def release(self) -> None:
        self.calls.append("release")
        self.released = True


class FakePlayerFactory(IPlayerFactory):
    """Fabrique qui garde la trace des lecteurs crees."""

    def __init__(self) -> None:
        self.players: list[FakePlayer] = []

    def create(self, handle: PlayableHandle) -> FakePlayer:
        player = FakePlayer(handle)
        self.players.append(player)
        return player


@pytest.fixture
def player_factory() -> FakePlayerFactory:
    return FakePlayerFactory()


@pytest.fixture
def mock_media_server() -> MagicMock:
    """
    Mock de IMediaServerClient.

    build_playback_request retourne un flux valide par defaut,
    report_playback_event enregistre les appels sans erreur.
    """
    mock = MagicMock(spec=IMediaServerClient)
    mock.build_playback_request.side_effect = lambda **kwargs: PlayableHandle(
        url=f"http://server/Videos/{kwargs['media_id']}/main.m3u8",
        headers={"X-MediaBrowser-Token": kwargs["access_token"]},
    )
    mock.report_playback_event = AsyncMock(return_value=None)
    mock.get_image_url.return_value = "http://server/image"
    return mock


@pytest.fixture
def mock_user_profiles() -> MagicMock:
    """Mock de IUserProfileStore (pas de sous-titres, plein debit)."""
    mock = MagicMock(spec=IUserProfileStore)
    mock.get_preferred_user.return_value = UserPreferences()
    return mock


@pytest.fixture
def media_source() -> MediaSource:
    return make_source("src-movie")


@pytest.fixture
def two_seasons() -> list[Season]:
    """Deux saisons de deux episodes, jamais regardees."""
    return [
        Season(id="s1", title="Season 1", season_number=1, episodes=[make_episode("e1", 1), make_episode("e2", 2)]),
        Season(id="s2", title="Season 2", season_number=2, episodes=[make_episode("e3", 1), make_episode("e4", 2)]),
    ]
