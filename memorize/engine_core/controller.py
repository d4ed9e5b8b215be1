"""
Game Controller - The single writer of GameSession.

Design principles:
- Commands mutate, queries copy: begin/tap/advance_level/restart
  change the session, snapshot() returns a frozen view
- Invalid taps are no-ops, never errors
- Deferred work goes through a Scheduler and is tagged with the session
  generation it was scheduled for; a callback whose generation is stale
  does nothing
"""

from __future__ import annotations
from typing import Callable
import logging
import random

from .board import generate_board
from .errors import InvalidLevelConfigError, InvalidTransitionError
from .scheduler import Scheduler, TimerHandle, AsyncioScheduler
from .state import (
    GameSession,
    LevelDefinition,
    Phase,
    PhaseKind,
    Snapshot,
    validate_levels,
)

logger = logging.getLogger(__name__)

DEFAULT_MISMATCH_DELAY = 1.0
DEFAULT_TRANSITION_DELAY = 1.0

Listener = Callable[[Snapshot], None]


class GameController:
    """
    Owns one game and its timers.

    Usage:
        controller = GameController(create_classic_levels(), scheduler=ManualScheduler())
        controller.begin()
        controller.tap(0)
        controller.tap(3)
        view = controller.snapshot()
    """

    def __init__(
        self,
        levels: list[LevelDefinition] | tuple[LevelDefinition, ...],
        scheduler: Scheduler | None = None,
        mismatch_delay: float = DEFAULT_MISMATCH_DELAY,
        transition_delay: float = DEFAULT_TRANSITION_DELAY,
        rng: random.Random | None = None,
    ):
        self.levels = validate_levels(levels)
        if mismatch_delay < 0 or transition_delay < 0:
            raise InvalidLevelConfigError("Resolution delays must not be negative")
        self.scheduler = scheduler or AsyncioScheduler()
        self.mismatch_delay = mismatch_delay
        self.transition_delay = transition_delay
        self._rng = rng or random.Random()
        self._session = GameSession()
        self._pending_timer: TimerHandle | None = None
        self._listeners: list[Listener] = []

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def phase(self) -> Phase:
        return self._session.phase

    @property
    def current_level(self) -> LevelDefinition:
        return self.levels[self._session.current_level_index]

    @property
    def has_pending_callback(self) -> bool:
        return self._pending_timer is not None

    def snapshot(self) -> Snapshot:
        """Return a frozen view of the current state."""
        return Snapshot.of(self._session, level_count=len(self.levels))

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Call `listener` with a new snapshot after every state change.

        Returns a function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # =========================================================================
    # Commands
    # =========================================================================

    def begin(self) -> None:
        """Start (or start over) at the first level."""
        self._deal(0)
        logger.info("Game started: level 1 with %d cards", self.current_level.card_count)
        self._notify()

    def restart(self) -> None:
        """Return to level 1 with a fresh board, from any phase."""
        logger.info("Restarting from %s", self._session.phase)
        self.begin()

    def advance_level(self) -> None:
        """
        Move from a cleared level to the next one.

        Raises:
            InvalidTransitionError: if the phase is not LevelCleared
        """
        phase = self._session.phase
        if phase.kind is not PhaseKind.LEVEL_CLEARED:
            raise InvalidTransitionError("advance level", phase)
        self._deal(self._session.current_level_index + 1)
        logger.info(
            "Advanced to level %d with %d cards",
            self._session.current_level_index + 1,
            self.current_level.card_count,
        )
        self._notify()

    def tap(self, card_index: int) -> None:
        """
        Reveal the card at `card_index`.

        Ignored when not playing, while input is locked, for indices off
        the board, for matched cards and for cards already face up.
        """
        session = self._session
        if not session.phase.is_playing or session.input_locked:
            return
        if not 0 <= card_index < len(session.board):
            return
        card = session.board[card_index]
        if card.matched or card_index in session.pending_selection:
            return

        session.pending_selection.append(card_index)
        if len(session.pending_selection) == 2:
            session.input_locked = True
            self._resolve_pair()
        self._notify()

    # =========================================================================
    # Internals
    # =========================================================================

    def _deal(self, level_index: int) -> None:
        """Replace the board with a fresh one for `level_index`."""
        self._cancel_pending()
        session = self._session
        session.generation += 1
        session.current_level_index = level_index
        session.board = generate_board(self.levels[level_index], self._rng)
        session.pending_selection = []
        session.input_locked = False
        session.phase = Phase.playing(self.levels[level_index].level_number)

    def _resolve_pair(self) -> None:
        session = self._session
        first, second = (session.board[i] for i in session.pending_selection)

        if first.symbol == second.symbol:
            first.matched = True
            second.matched = True
            session.pending_selection = []
            session.input_locked = False
            logger.debug("Matched cards %d and %d", first.id, second.id)
            if session.all_matched:
                self._schedule(self.transition_delay, self._finish_level)
        else:
            logger.debug("Mismatch on cards %d and %d", first.id, second.id)
            self._schedule(self.mismatch_delay, self._hide_mismatch)

    def _schedule(self, delay: float, action: Callable[[], None]) -> None:
        generation = self._session.generation

        def fire() -> None:
            if self._session.generation != generation:
                logger.debug("Dropping stale callback from generation %d", generation)
                return
            self._pending_timer = None
            action()
            self._notify()

        self._pending_timer = self.scheduler.call_later(delay, fire)

    def _hide_mismatch(self) -> None:
        self._session.pending_selection = []
        self._session.input_locked = False

    def _finish_level(self) -> None:
        session = self._session
        level_number = self.current_level.level_number
        if session.current_level_index + 1 < len(self.levels):
            session.phase = Phase.level_cleared(level_number)
            logger.info("Level %d cleared", level_number)
        else:
            session.phase = Phase.completed()
            logger.info("All %d levels completed", len(self.levels))

    def _cancel_pending(self) -> None:
        if self._pending_timer is not None:
            self._pending_timer.cancel()
            self._pending_timer = None

    def close(self) -> None:
        """Cancel outstanding timers and drop listeners."""
        self._cancel_pending()
        self._listeners.clear()

    def _notify(self) -> None:
        if not self._listeners:
            return
        view = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(view)
            except Exception:
                logger.exception("State listener failed")
