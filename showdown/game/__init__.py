"""Game package - rules and the round engine."""

from showdown.game.engine import RoundEngine, create_engine
from showdown.game.rules import MOVES, judge, pick_opponent_move

__all__ = [
    # Engine
    "RoundEngine",
    "create_engine",
    # Rules
    "MOVES",
    "judge",
    "pick_opponent_move",
]
