"""Tests for move resolution and opponent selection."""

import random
from collections import Counter

import pytest

from showdown.game.rules import MOVES, judge, pick_opponent_move
from showdown.lib.models import Move, Outcome


OUTCOME_TABLE = [
    (Move.ROCK, Move.ROCK, Outcome.DRAW),
    (Move.ROCK, Move.PAPER, Outcome.LOSE),
    (Move.ROCK, Move.SCISSORS, Outcome.WIN),
    (Move.PAPER, Move.ROCK, Outcome.WIN),
    (Move.PAPER, Move.PAPER, Outcome.DRAW),
    (Move.PAPER, Move.SCISSORS, Outcome.LOSE),
    (Move.SCISSORS, Move.ROCK, Outcome.LOSE),
    (Move.SCISSORS, Move.PAPER, Outcome.WIN),
    (Move.SCISSORS, Move.SCISSORS, Outcome.DRAW),
]


class TestJudge:
    """The full 3x3 outcome table."""

    @pytest.mark.parametrize("player,opponent,expected", OUTCOME_TABLE)
    def test_outcome_table(self, player, opponent, expected):
        assert judge(player, opponent) == expected

    @pytest.mark.parametrize("player,opponent,_", OUTCOME_TABLE)
    def test_outcome_matches_beats_relation(self, player, opponent, _):
        outcome = judge(player, opponent)
        assert (outcome == Outcome.DRAW) == (player == opponent)
        assert (outcome == Outcome.WIN) == (player.beats == opponent)

    def test_outcomes_are_mirrored(self):
        """A win for one side is a loss for the other."""
        mirror = {Outcome.WIN: Outcome.LOSE, Outcome.LOSE: Outcome.WIN, Outcome.DRAW: Outcome.DRAW}
        for a in MOVES:
            for b in MOVES:
                assert judge(b, a) == mirror[judge(a, b)]


class TestBeatsRelation:
    """beats must form a single 3-cycle."""

    def test_no_move_beats_itself(self):
        for move in Move:
            assert move.beats != move

    def test_each_move_is_beaten_exactly_once(self):
        beaten = Counter(move.beats for move in Move)
        assert beaten == Counter({Move.ROCK: 1, Move.PAPER: 1, Move.SCISSORS: 1})

    def test_no_mutual_beats(self):
        for move in Move:
            assert move.beats.beats != move

    def test_cycle_visits_all_moves(self):
        seen = []
        move = Move.ROCK
        for _ in range(3):
            seen.append(move)
            move = move.beats
        assert move == Move.ROCK
        assert set(seen) == set(Move)


class TestPickOpponentMove:
    """Opponent selection from an injectable random source."""

    def test_seeded_source_is_deterministic(self):
        first = [pick_opponent_move(random.Random(7)) for _ in range(5)]
        second = [pick_opponent_move(random.Random(7)) for _ in range(5)]
        assert first == second

    def test_roughly_uniform(self):
        rng = random.Random(1234)
        counts = Counter(pick_opponent_move(rng) for _ in range(3000))
        assert set(counts) == set(Move)
        for move in Move:
            assert 850 < counts[move] < 1150

    def test_index_maps_to_move(self):
        class FixedRandom(random.Random):
            def randrange(self, *args, **kwargs):
                return 2

        assert pick_opponent_move(FixedRandom()) == MOVES[2]
