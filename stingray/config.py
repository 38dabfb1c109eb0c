"""
Configuration de l'application via pydantic-settings.

La configuration est chargée depuis les variables d'environnement avec le préfixe STINGRAY_,
et peut optionnellement être fournie via un fichier .env.

Les identifiants (jeton, utilisateur, session) sont optionnels: sans eux, la CLI
se rabat sur l'utilisateur préféré du fichier de profils.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Trouver le fichier .env à la racine du projet (parent de stingray/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Paramètres de l'application avec support des variables d'environnement.

    Tous les paramètres peuvent être surchargés via des variables d'environnement
    avec le préfixe STINGRAY_.
    Exemple : STINGRAY_SERVER_URL=http://jellyfin.local:8096

    Les chemins sont automatiquement étendus (~ -> répertoire home).
    """

    model_config = SettingsConfigDict(
        env_prefix="STINGRAY_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Serveur media
    server_url: str = Field(default="http://localhost:8096")
    access_token: Optional[str] = Field(default=None)
    user_id: Optional[str] = Field(default=None)
    user_session_id: Optional[str] = Field(default=None)

    # HTTP
    http_timeout: float = Field(default=30.0, gt=0)
    http_connect_timeout: float = Field(default=10.0, gt=0)

    # Profils utilisateur
    profiles_file: Path = Field(default=Path("~/.config/stingray/users.json"))

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de rétention)
    log_level: str = Field(default="INFO")
    log_file: Path = Field(default=Path("logs/stingray.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)

    @field_validator("server_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Supprime le / final de l'adresse du serveur."""
        return str(v).rstrip("/")

    @field_validator("profiles_file", "log_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        """Étend ~ vers le répertoire home dans les chemins."""
        return Path(v).expanduser()

    @property
    def authenticated(self) -> bool:
        """Vérifie si jeton, utilisateur et session sont configurés."""
        return bool(self.access_token and self.user_id and self.user_session_id)
