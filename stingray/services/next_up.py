"""
Resolution de l'episode "a suivre" d'une serie.

Fonction pure sur la liste des saisons et l'historique de visionnage:
- Premier episode jamais vu: on le propose (nouveau spectateur)
- Sinon on part de l'episode vu le plus recemment:
  - position de reprise a 0 (termine puis remis a zero): episode suivant
  - position < 90% de la duree: reprise du meme episode
  - position >= 90% (finalisation pas encore appliquee): episode suivant
- Apres le dernier episode, on revient au premier.
"""

from datetime import datetime
from typing import Optional

from stingray.core.entities import Episode, Season, all_episodes
from stingray.utils.constants import FINISHED_THRESHOLD


def _most_recent_index(episodes: list[Episode]) -> Optional[int]:
    """
    Index de l'episode au last_played maximal.

    Comparaison stricte: en cas d'egalite, le premier rencontre gagne.
    Retourne None si aucun episode n'a ete vu.
    """
    best_index: Optional[int] = None
    best_played: Optional[datetime] = None
    for index, episode in enumerate(episodes):
        if episode.last_played is None:
            continue
        if best_played is None or episode.last_played > best_played:
            best_index = index
            best_played = episode.last_played
    return best_index


def _following(episodes: list[Episode], index: int) -> Episode:
    """Episode suivant dans l'ordre aplati, le premier apres le dernier."""
    if index + 1 < len(episodes):
        return episodes[index + 1]
    return episodes[0]


def resolve_next_up(seasons: list[Season]) -> Optional[Episode]:
    """
    Determine l'episode a proposer pour continuer le visionnage.

    Args:
        seasons: Saisons dans l'ordre du serveur

    Returns:
        L'episode a proposer, ou None si la serie n'a aucun episode
    """
    episodes = all_episodes(seasons)
    if not episodes:
        return None

    if episodes[0].last_played is None:
        return episodes[0]

    index = _most_recent_index(episodes)
    if index is None:
        return episodes[0]

    episode = episodes[index]
    if not episode.media_sources:
        return episode
    source = episode.media_sources[0]

    if source.resume_ticks == 0:
        return _following(episodes, index)

    # Duree inconnue: traite comme termine
    if (
        source.duration_ticks is not None
        and source.resume_ticks < FINISHED_THRESHOLD * source.duration_ticks
    ):
        return episode

    return _following(episodes, index)
