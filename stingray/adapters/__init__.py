"""
Couche adaptateurs (infrastructure).

Les adaptateurs implémentent les ports définis dans core/ports/ :
- api/ : Client HTTP du serveur media (httpx + tenacity)
- user_profiles : Stockage JSON des profils utilisateur
- cli/ : Interface ligne de commande (Typer)

Chaque adaptateur dépend de core/ mais core/ ne dépend jamais des adaptateurs.
"""

from stingray.adapters.api import JellyfinClient
from stingray.adapters.user_profiles import JsonUserProfileStore

__all__ = [
    "JellyfinClient",
    "JsonUserProfileStore",
]
