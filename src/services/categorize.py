"""
Per-viewer views over the full game list.

Pure functions: recompute whenever the games or the viewer change, never store the result.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from src.core.models import Address, Game


@dataclass(frozen=True)
class GameViews:
    active: list[Game]  # viewer takes part, no winner yet
    joinable: list[Game]  # waiting for a second player
    ended: list[Game]  # winner decided


def is_active_for(game: Game, viewer: Optional[Address]) -> bool:
    if viewer is None:
        return False
    return game.winner is None and viewer in (game.player_one, game.player_two)


def is_joinable_for(game: Game, viewer: Optional[Address]) -> bool:
    """A creator cannot join their own game as the second player."""
    if game.winner is not None or game.player_two is not None:
        return False
    return viewer is None or game.player_one != viewer


def is_ended(game: Game) -> bool:
    return game.winner is not None


def categorize_games(games: Sequence[Game], viewer: Optional[Address]) -> GameViews:
    """Split games into views for the viewer, keeping the input order. A game may end up in none of them."""
    return GameViews(
        active=[game for game in games if is_active_for(game, viewer)],
        joinable=[game for game in games if is_joinable_for(game, viewer)],
        ended=[game for game in games if is_ended(game)],
    )
