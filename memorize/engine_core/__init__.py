"""
Engine Core - The matching-game state machine.

The engine:
1. Validates an ordered list of LevelDefinitions
2. Deals shuffled boards of paired cards
3. Accepts taps and resolves pairs
4. Defers mismatch flip-back and level transitions through a Scheduler
5. Publishes frozen Snapshots to renderers
"""

from .state import (
    Card,
    CardView,
    GameSession,
    LevelDefinition,
    Phase,
    PhaseKind,
    Snapshot,
    validate_levels,
)
from .board import generate_board
from .errors import MemorizeError, InvalidLevelConfigError, InvalidTransitionError
from .scheduler import Scheduler, TimerHandle, AsyncioScheduler, ManualScheduler, ManualTimer
from .controller import GameController, DEFAULT_MISMATCH_DELAY, DEFAULT_TRANSITION_DELAY

__all__ = [
    "Card",
    "CardView",
    "GameSession",
    "LevelDefinition",
    "Phase",
    "PhaseKind",
    "Snapshot",
    "validate_levels",
    "generate_board",
    "MemorizeError",
    "InvalidLevelConfigError",
    "InvalidTransitionError",
    "Scheduler",
    "TimerHandle",
    "AsyncioScheduler",
    "ManualScheduler",
    "ManualTimer",
    "GameController",
    "DEFAULT_MISMATCH_DELAY",
    "DEFAULT_TRANSITION_DELAY",
]
