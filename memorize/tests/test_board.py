"""
Tests for board generation.

Tests:
- Pairing and id invariants
- Deterministic symbol selection
- Shuffle uniformity (statistical)
"""

from collections import Counter
import random

import pytest

from ..engine_core import LevelDefinition, generate_board


def make_level(pair_count, symbols="ABCDEFGH"):
    return LevelDefinition(level_number=1, pair_count=pair_count, symbols=tuple(symbols))


class TestBoardShape:
    """Every generated board is a valid set of pairs."""

    @pytest.mark.parametrize("pair_count", [1, 3, 4, 8])
    def test_each_symbol_appears_exactly_twice(self, pair_count):
        rng = random.Random(7)
        for _ in range(50):
            board = generate_board(make_level(pair_count), rng)
            counts = Counter(card.symbol for card in board)
            assert len(board) == pair_count * 2
            assert set(counts.values()) == {2}

    def test_ids_are_positions(self):
        """Card ids are exactly 0..2k-1 in board order."""
        board = generate_board(make_level(4), random.Random(3))
        assert [card.id for card in board] == list(range(8))

    def test_uses_first_symbols_in_order(self):
        """The first pair_count symbols are used; the rest are ignored."""
        board = generate_board(make_level(3, "XYZW"), random.Random(11))
        assert {card.symbol for card in board} == {"X", "Y", "Z"}

    def test_cards_start_unmatched(self):
        board = generate_board(make_level(3), random.Random(0))
        assert not any(card.matched for card in board)

    def test_same_seed_same_board(self):
        first = generate_board(make_level(4), random.Random(99))
        second = generate_board(make_level(4), random.Random(99))
        assert [c.symbol for c in first] == [c.symbol for c in second]


class TestShuffleUniformity:
    """The shuffle does not favour any position or ordering."""

    def test_symbol_frequency_per_position(self):
        """Each symbol lands on each position about 1/3 of the time (3 pairs)."""
        rng = random.Random(2024)
        trials = 6000
        counts = [Counter() for _ in range(6)]
        for _ in range(trials):
            for card in generate_board(make_level(3), rng):
                counts[card.id][card.symbol] += 1

        expected = trials / 3
        for position_counts in counts:
            for symbol in "ABC":
                assert abs(position_counts[symbol] - expected) < expected * 0.1

    def test_every_arrangement_is_reachable_and_balanced(self):
        """All 90 distinct arrangements of AABBCC occur with similar frequency."""
        rng = random.Random(42)
        trials = 9000
        arrangements = Counter(
            "".join(card.symbol for card in generate_board(make_level(3), rng))
            for _ in range(trials)
        )
        assert len(arrangements) == 90
        expected = trials / 90
        assert min(arrangements.values()) > expected * 0.5
        assert max(arrangements.values()) < expected * 1.5
