"""
Services du coeur de lecture.

- track_matcher : correspondance de pistes entre deux sources
- next_up : episode a proposer pour continuer une serie
- playback_session : controleur de session et rapports de progression
- player_view_model : orchestration des actions de l'utilisateur
"""

from stingray.services.next_up import resolve_next_up
from stingray.services.playback_session import (
    Active,
    Idle,
    PlaybackSessionController,
    PlayerProgress,
    finalize_resume_ticks,
)
from stingray.services.player_view_model import PlayerViewModel
from stingray.services.track_matcher import default_track, find_similar_track

__all__ = [
    "Active",
    "Idle",
    "PlaybackSessionController",
    "PlayerProgress",
    "PlayerViewModel",
    "default_track",
    "finalize_resume_ticks",
    "find_similar_track",
    "resolve_next_up",
]
