"""
Session Manager - Creates and manages game sessions.

Sessions are EPHEMERAL:
- In-memory only, no persistence
- Each session owns one GameController
- Ending a session cancels its timers and forgets it
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
import random
import time
import uuid

from ..engine_core import (
    GameController,
    LevelDefinition,
    Scheduler,
    DEFAULT_MISMATCH_DELAY,
    DEFAULT_TRANSITION_DELAY,
)
from ..games import get_level_set

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """One play-through, from creation until it is ended or cleaned up."""
    session_id: str
    controller: GameController
    created_at: float
    level_set: str | None = None
    last_active_at: float = 0.0

    def touch(self) -> None:
        self.last_active_at = time.time()


class SessionManager:
    """
    Tracks active sessions.

    All controllers share one scheduler and the same resolution delays.
    """

    def __init__(
        self,
        scheduler: Scheduler | None = None,
        mismatch_delay: float = DEFAULT_MISMATCH_DELAY,
        transition_delay: float = DEFAULT_TRANSITION_DELAY,
        default_level_set: str = "classic",
    ):
        self.scheduler = scheduler
        self.mismatch_delay = mismatch_delay
        self.transition_delay = transition_delay
        self.default_level_set = default_level_set
        self._sessions: dict[str, Session] = {}

    def create_session(
        self,
        levels: list[LevelDefinition] | None = None,
        level_set: str | None = None,
        random_seed: int | None = None,
        auto_begin: bool = False,
    ) -> Session:
        """
        Create a new game session.

        Args:
            levels: Custom level list; overrides `level_set`
            level_set: Built-in level set name (manager default if omitted)
            random_seed: Seed for reproducible shuffles
            auto_begin: Deal the first board immediately

        Raises:
            KeyError: unknown level set
            InvalidLevelConfigError: unplayable custom levels
        """
        if levels is None:
            level_set = level_set or self.default_level_set
            levels = get_level_set(level_set)
        else:
            level_set = None

        controller = GameController(
            levels,
            scheduler=self.scheduler,
            mismatch_delay=self.mismatch_delay,
            transition_delay=self.transition_delay,
            rng=random.Random(random_seed),
        )
        now = time.time()
        session = Session(
            session_id=str(uuid.uuid4()),
            controller=controller,
            created_at=now,
            level_set=level_set,
            last_active_at=now,
        )
        if auto_begin:
            controller.begin()

        self._sessions[session.session_id] = session
        logger.info(
            "Created session %s with %d level(s)", session.session_id, len(controller.levels)
        )
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and clean up.

        Returns False if the session did not exist.
        """
        session = self._sessions.pop(session_id, None)
        if not session:
            return False
        session.controller.close()
        logger.info("Ended session %s (%s)", session_id, reason)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return list(self._sessions)

    def cleanup_stale_sessions(self, max_age_seconds: float = 3600) -> list[str]:
        """
        End sessions idle for longer than `max_age_seconds`.

        Returns the IDs that were removed.
        """
        current_time = time.time()
        stale = [
            session_id for session_id, session in self._sessions.items()
            if current_time - session.last_active_at > max_age_seconds
        ]
        for session_id in stale:
            self.end_session(session_id, reason="stale")
        return stale
