"""
Pytest fixtures for Memorize tests.
"""

from collections import defaultdict
import random

import pytest

from ..engine_core import GameController, LevelDefinition, ManualScheduler
from ..games import create_classic_levels


def board_pairs(controller: GameController) -> list[tuple[int, int]]:
    """Positions of each matching pair on the controller's current board."""
    positions = defaultdict(list)
    for card in controller._session.board:  # noqa: SLF001
        positions[card.symbol].append(card.id)
    return [tuple(ids) for ids in positions.values()]


def mismatched_pair(controller: GameController) -> tuple[int, int]:
    """Two positions holding different symbols."""
    pairs = board_pairs(controller)
    return pairs[0][0], pairs[1][0]


def clear_board(controller: GameController) -> None:
    """Match every pair on the current board."""
    for first, second in board_pairs(controller):
        controller.tap(first)
        controller.tap(second)


@pytest.fixture
def classic_levels() -> list[LevelDefinition]:
    """The built-in two-level game."""
    return create_classic_levels()


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Virtual-clock scheduler; nothing fires until advanced."""
    return ManualScheduler()


@pytest.fixture
def controller(classic_levels, scheduler) -> GameController:
    """Seeded controller on the classic levels, not yet begun."""
    return GameController(
        classic_levels,
        scheduler=scheduler,
        mismatch_delay=1.0,
        transition_delay=1.0,
        rng=random.Random(1234),
    )


@pytest.fixture
def playing(controller) -> GameController:
    """Controller with level 1 dealt."""
    controller.begin()
    return controller
