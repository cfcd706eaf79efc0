"""Move resolution and opponent selection."""

import random

from showdown.lib.models import Move, Outcome

MOVES: tuple[Move, ...] = (Move.ROCK, Move.PAPER, Move.SCISSORS)


def judge(player: Move, opponent: Move) -> Outcome:
    """Outcome of a round from the player's side."""
    if player == opponent:
        return Outcome.DRAW
    return Outcome.WIN if player.beats == opponent else Outcome.LOSE


def pick_opponent_move(rng: random.Random) -> Move:
    """Uniform draw over the three moves."""
    return MOVES[rng.randrange(len(MOVES))]
