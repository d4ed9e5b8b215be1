"""
Tests for schedulers.
"""

import asyncio
import random

from ..engine_core import AsyncioScheduler, GameController, ManualScheduler, Phase
from ..games import create_single_level
from .conftest import clear_board, mismatched_pair


class TestManualScheduler:
    """Virtual clock behaviour."""

    def test_nothing_fires_until_advanced(self):
        scheduler = ManualScheduler()
        fired = []
        scheduler.call_later(1.0, lambda: fired.append("a"))
        assert fired == []
        assert scheduler.pending == 1

    def test_fires_in_due_order(self):
        scheduler = ManualScheduler()
        fired = []
        scheduler.call_later(2.0, lambda: fired.append("late"))
        scheduler.call_later(1.0, lambda: fired.append("early"))
        scheduler.call_later(1.0, lambda: fired.append("early-2"))

        assert scheduler.advance(5.0) == 3
        assert fired == ["early", "early-2", "late"]
        assert scheduler.now == 5.0

    def test_only_due_callbacks_fire(self):
        scheduler = ManualScheduler()
        fired = []
        scheduler.call_later(1.0, lambda: fired.append(1))
        scheduler.call_later(3.0, lambda: fired.append(3))

        scheduler.advance(2.0)
        assert fired == [1]
        assert scheduler.next_due == 3.0

    def test_cancelled_timer_does_not_fire(self):
        scheduler = ManualScheduler()
        fired = []
        timer = scheduler.call_later(1.0, lambda: fired.append(1))
        timer.cancel()

        assert scheduler.pending == 0
        assert scheduler.advance(2.0) == 0
        assert fired == []

    def test_callback_scheduled_while_firing(self):
        scheduler = ManualScheduler()
        fired = []

        def first():
            fired.append("first")
            scheduler.call_later(0.5, lambda: fired.append("second"))

        scheduler.call_later(1.0, first)
        scheduler.advance(2.0)
        assert fired == ["first", "second"]

    def test_run_all(self):
        scheduler = ManualScheduler()
        fired = []
        scheduler.call_later(10.0, lambda: fired.append(1))
        assert scheduler.run_all() == 1
        assert fired == [1]


class TestAsyncioScheduler:
    """Real event-loop scheduling."""

    def test_mismatch_resolves_on_event_loop(self):
        async def scenario():
            controller = GameController(
                create_single_level(),
                scheduler=AsyncioScheduler(),
                mismatch_delay=0.01,
                transition_delay=0.01,
                rng=random.Random(5),
            )
            controller.begin()
            first, second = mismatched_pair(controller)
            controller.tap(first)
            controller.tap(second)
            locked = controller.snapshot().input_locked
            await asyncio.sleep(0.05)
            return locked, controller.snapshot()

        locked, snapshot = asyncio.run(scenario())
        assert locked is True
        assert snapshot.input_locked is False
        assert snapshot.pending_selection == ()

    def test_level_transition_on_event_loop(self):
        async def scenario():
            controller = GameController(
                create_single_level(),
                scheduler=AsyncioScheduler(),
                transition_delay=0.01,
            )
            controller.begin()
            clear_board(controller)
            await asyncio.sleep(0.05)
            return controller.snapshot().phase

        assert asyncio.run(scenario()) == Phase.completed()

    def test_restart_cancels_asyncio_timer(self):
        async def scenario():
            controller = GameController(
                create_single_level(),
                scheduler=AsyncioScheduler(),
                transition_delay=0.01,
            )
            controller.begin()
            clear_board(controller)
            controller.restart()
            await asyncio.sleep(0.05)
            return controller.snapshot().phase

        assert asyncio.run(scenario()) == Phase.playing(1)
