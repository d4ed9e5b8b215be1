"""
Board generation.

A board is dealt by taking the first `pair_count` symbols of a level,
duplicating each one, shuffling uniformly and numbering the cards by
position.
"""

from __future__ import annotations
import random

from .state import Card, LevelDefinition


def generate_board(level: LevelDefinition, rng: random.Random | None = None) -> list[Card]:
    """
    Deal a fresh board for a level.

    Args:
        level: Level to deal (assumed valid)
        rng: Random source; a freshly seeded generator if omitted

    Returns:
        Cards whose ids are 0..2k-1 in board order
    """
    rng = rng or random.Random()
    symbols = list(level.symbols[:level.pair_count]) * 2
    # random.shuffle is Fisher-Yates, so every ordering is equally likely
    rng.shuffle(symbols)
    return [Card(id=position, symbol=symbol) for position, symbol in enumerate(symbols)]
