"""
Interface port pour le stockage des profils utilisateur.

Le coeur de lecture lit les préférences de l'utilisateur préféré au
démarrage d'une session et les réécrit après chaque démarrage réussi.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from stingray.core.value_objects import UserPreferences


@dataclass
class UserProfile:
    """
    Profil utilisateur enregistré.

    Attributs :
        id : ID de l'utilisateur sur le serveur
        display_name : Nom affiché
        server_url : Adresse du serveur
        access_token : Jeton d'accès
        session_id : ID de la session utilisateur
        server_id : ID du serveur
        uses_subtitles : Préférence de sous-titres
        bitrate_cap_bits : Plafond de débit (None = plein débit)
    """

    id: str
    display_name: str = ""
    server_url: str = ""
    access_token: str = ""
    session_id: str = ""
    server_id: str = ""
    uses_subtitles: bool = False
    bitrate_cap_bits: Optional[int] = None


class IUserProfileStore(ABC):
    """
    Interface de stockage des profils utilisateur.

    Injectée explicitement dans le view-model: aucun état global.
    """

    @abstractmethod
    def get_preferred_user(self) -> UserPreferences:
        """Préférences de l'utilisateur préféré (valeurs par défaut si aucun)."""
        ...

    @abstractmethod
    def update_preferred_user(self, uses_subtitles: bool, bitrate_cap_bits: Optional[int]) -> None:
        """Met à jour les préférences de l'utilisateur préféré (no-op si aucun)."""
        ...

    @abstractmethod
    def add_user(self, profile: UserProfile) -> None:
        """Ajoute ou remplace un profil (clé: id)."""
        ...

    @abstractmethod
    def set_preferred_user(self, user_id: str) -> bool:
        """Marque un profil comme préféré. Retourne False si inconnu."""
        ...
