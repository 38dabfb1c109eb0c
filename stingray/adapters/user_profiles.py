"""
Stockage des profils utilisateur dans un fichier JSON.

Format du fichier:
    {
      "preferred": "<id de l'utilisateur prefere>",
      "users": [{"id": ..., "display_name": ..., "uses_subtitles": ..., ...}]
    }

Un fichier absent ou illisible equivaut a "aucun utilisateur": les
preferences par defaut sont alors retournees.
"""

import json
from dataclasses import asdict, fields
from pathlib import Path
from typing import Optional

from loguru import logger

from stingray.core.ports import IUserProfileStore, UserProfile
from stingray.core.value_objects import UserPreferences

_PROFILE_FIELDS = tuple(f.name for f in fields(UserProfile))


def _to_profile(raw: dict) -> Optional[UserProfile]:
    """Construit un profil depuis le JSON, None si l'id manque."""
    if not isinstance(raw, dict) or not raw.get("id"):
        return None
    return UserProfile(**{k: v for k, v in raw.items() if k in _PROFILE_FIELDS})


class JsonUserProfileStore(IUserProfileStore):
    """
    Implementation JSON de IUserProfileStore.

    Le fichier est relu a chaque appel: plusieurs processus peuvent
    partager le meme fichier de profils.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict:
        """Charge le fichier, structure vide si absent ou invalide."""
        if not self._path.exists():
            return {"preferred": None, "users": []}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            logger.warning(f"Fichier de profils illisible ({self._path}): {e}")
            return {"preferred": None, "users": []}
        if not isinstance(data, dict) or not isinstance(data.get("users"), list):
            logger.warning(f"Fichier de profils invalide: {self._path}")
            return {"preferred": None, "users": []}
        return data

    def _save(self, data: dict) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            json.dumps(data, indent=2, ensure_ascii=False) + "\n",
            encoding="utf-8",
        )

    def list_users(self) -> list[UserProfile]:
        """Profils enregistres (les entrees invalides sont ignorees)."""
        profiles = (_to_profile(raw) for raw in self._load()["users"])
        return [p for p in profiles if p is not None]

    def get_preferred_profile(self) -> Optional[UserProfile]:
        """Profil prefere, None si aucun."""
        data = self._load()
        preferred = data.get("preferred")
        for raw in data["users"]:
            profile = _to_profile(raw)
            if profile is not None and profile.id == preferred:
                return profile
        return None

    def get_preferred_user(self) -> UserPreferences:
        profile = self.get_preferred_profile()
        if profile is None:
            return UserPreferences()
        return UserPreferences(
            uses_subtitles=bool(profile.uses_subtitles),
            bitrate_cap_bits=profile.bitrate_cap_bits,
        )

    def update_preferred_user(self, uses_subtitles: bool, bitrate_cap_bits: Optional[int]) -> None:
        data = self._load()
        preferred = data.get("preferred")
        for raw in data["users"]:
            if isinstance(raw, dict) and raw.get("id") == preferred and preferred:
                raw["uses_subtitles"] = uses_subtitles
                raw["bitrate_cap_bits"] = bitrate_cap_bits
                self._save(data)
                return
        logger.debug("Aucun utilisateur prefere, preferences non enregistrees")

    def add_user(self, profile: UserProfile) -> None:
        data = self._load()
        users = [
            raw for raw in data["users"]
            if not (isinstance(raw, dict) and raw.get("id") == profile.id)
        ]
        users.append(asdict(profile))
        data["users"] = users
        self._save(data)

    def set_preferred_user(self, user_id: str) -> bool:
        data = self._load()
        if not any(isinstance(raw, dict) and raw.get("id") == user_id for raw in data["users"]):
            return False
        data["preferred"] = user_id
        self._save(data)
        return True
