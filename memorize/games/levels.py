"""
Level Sets

Hand-authored level lists. `classic` is the two-level game (3 pairs,
then 4 pairs); `single` is the one-board 6-card game.
"""

from __future__ import annotations
from typing import Callable, Sequence

from ..engine_core.state import LevelDefinition, validate_levels


ANIMAL_SYMBOLS: tuple[str, ...] = (
    "🐶", "🐱", "🐰", "🐼", "🐨", "🦊",
    "🐻", "🦁", "🐷", "🐸", "🐵", "🐯",
)


def build_levels(
    pair_counts: Sequence[int],
    symbols: Sequence[str] = ANIMAL_SYMBOLS,
) -> list[LevelDefinition]:
    """
    Build a level list with one level per entry of `pair_counts`.

    Every level draws from the same symbol pool. The result is validated.
    """
    levels = [
        LevelDefinition(level_number=number, pair_count=pairs, symbols=tuple(symbols))
        for number, pairs in enumerate(pair_counts, start=1)
    ]
    return list(validate_levels(levels))


def create_classic_levels() -> list[LevelDefinition]:
    """Two levels: 3 pairs (6 cards), then 4 pairs (8 cards)."""
    return build_levels([3, 4])


def create_single_level() -> list[LevelDefinition]:
    """One 3-pair board; clearing it completes the game."""
    return build_levels([3])


LEVEL_SETS: dict[str, Callable[[], list[LevelDefinition]]] = {
    "classic": create_classic_levels,
    "single": create_single_level,
}


def get_level_set(name: str) -> list[LevelDefinition]:
    """
    Look up a built-in level set by name.

    Raises:
        KeyError: if no level set has that name
    """
    try:
        factory = LEVEL_SETS[name]
    except KeyError:
        raise KeyError(
            f"Unknown level set {name!r}; choose from {', '.join(sorted(LEVEL_SETS))}"
        ) from None
    return factory()
