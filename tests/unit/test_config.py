"""
Tests unitaires pour la configuration pydantic-settings.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from stingray.config import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("SERVER_URL", "ACCESS_TOKEN", "USER_ID", "USER_SESSION_ID", "HTTP_TIMEOUT", "PROFILES_FILE"):
        monkeypatch.delenv(f"STINGRAY_{name}", raising=False)


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings(_env_file=None)

        assert settings.server_url == "http://localhost:8096"
        assert settings.http_timeout == 30.0
        assert not settings.authenticated

    def test_env_prefix_and_trailing_slash(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STINGRAY_SERVER_URL", "http://jellyfin.local:8096/")

        assert Settings(_env_file=None).server_url == "http://jellyfin.local:8096"

    def test_authenticated_requires_all_ids(self) -> None:
        assert not Settings(_env_file=None, access_token="t", user_id="u").authenticated
        assert Settings(_env_file=None, access_token="t", user_id="u", user_session_id="s").authenticated

    def test_profiles_file_is_expanded(self) -> None:
        settings = Settings(_env_file=None, profiles_file="~/stingray/users.json")

        assert settings.profiles_file == Path.home() / "stingray" / "users.json"

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, http_timeout=0)
