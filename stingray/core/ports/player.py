"""
Interface port pour le lecteur video.

Le lecteur (sortie audio/video) est fourni par la couche d'affichage.
Une session de lecture possède exclusivement un lecteur.
"""

from abc import ABC, abstractmethod

from stingray.core.value_objects import PlayableHandle


class IPlayer(ABC):
    """Lecteur d'un flux."""

    @property
    @abstractmethod
    def current_time(self) -> float:
        """Position courante en secondes."""
        ...

    @property
    @abstractmethod
    def is_playing(self) -> bool:
        """True si le lecteur joue, False s'il est en pause ou arrêté."""
        ...

    @abstractmethod
    def seek(self, seconds: float) -> None:
        ...

    @abstractmethod
    def play(self) -> None:
        ...

    @abstractmethod
    def pause(self) -> None:
        ...

    @abstractmethod
    def release(self) -> None:
        """Libère la sortie. Le lecteur n'est plus utilisable ensuite."""
        ...


class IPlayerFactory(ABC):
    """Crée un lecteur pour un flux."""

    @abstractmethod
    def create(self, handle: PlayableHandle) -> IPlayer:
        ...
