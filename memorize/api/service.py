"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to controller commands
2. Manages sessions
3. Formats snapshots for clients

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .schemas import (
    CardInfo,
    CreateSessionRequest,
    GameStateResponse,
    PhaseInfo,
    PhaseName,
    SessionResponse,
)
from ..engine_core import LevelDefinition, Snapshot
from ..session import SessionManager, Session

logger = logging.getLogger(__name__)


class SessionNotFoundError(LookupError):
    """No active session has the requested ID."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session {session_id} not found")


def state_response(session_id: str, snapshot: Snapshot) -> GameStateResponse:
    """Convert a controller snapshot into the API model."""
    return GameStateResponse(
        session_id=session_id,
        phase=PhaseInfo(
            name=PhaseName(snapshot.phase.kind.value),
            level=snapshot.phase.level,
        ),
        level_number=snapshot.level_number,
        level_count=snapshot.level_count,
        cards=[
            CardInfo(
                card_id=card.id,
                symbol=card.symbol,
                face_up=card.face_up,
                matched=card.matched,
            )
            for card in snapshot.cards
        ],
        pending_selection=list(snapshot.pending_selection),
        input_locked=snapshot.input_locked,
        matched_count=snapshot.matched_count,
    )


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()
        session = service.create_session(CreateSessionRequest(auto_begin=True))
        state = service.tap(session.session_id, 0)
    """
    session_manager: SessionManager = field(default_factory=SessionManager)
    session_max_age: float = 3600.0

    def create_session(self, request: CreateSessionRequest) -> SessionResponse:
        """
        Create a new game session.

        Raises:
            KeyError: unknown level set
            InvalidLevelConfigError: custom levels cannot be played
        """
        self.session_manager.cleanup_stale_sessions(self.session_max_age)

        levels = None
        if request.levels is not None:
            levels = [
                LevelDefinition(
                    level_number=number,
                    pair_count=level.pair_count,
                    symbols=tuple(level.symbols),
                )
                for number, level in enumerate(request.levels, start=1)
            ]

        session = self.session_manager.create_session(
            levels=levels,
            level_set=request.level_set,
            random_seed=request.random_seed,
            auto_begin=request.auto_begin,
        )
        return self.session_response(session)

    def get_session(self, session_id: str) -> SessionResponse:
        """Get session information."""
        return self.session_response(self._require(session_id))

    def get_game_state(self, session_id: str) -> GameStateResponse:
        """Get the current state of a session's game."""
        session = self._require(session_id)
        return state_response(session_id, session.controller.snapshot())

    def begin(self, session_id: str) -> GameStateResponse:
        session = self._require(session_id)
        session.controller.begin()
        return state_response(session_id, session.controller.snapshot())

    def restart(self, session_id: str) -> GameStateResponse:
        session = self._require(session_id)
        session.controller.restart()
        return state_response(session_id, session.controller.snapshot())

    def advance_level(self, session_id: str) -> GameStateResponse:
        """
        Move to the next level.

        Raises:
            InvalidTransitionError: the current level is not cleared
        """
        session = self._require(session_id)
        session.controller.advance_level()
        return state_response(session_id, session.controller.snapshot())

    def tap(self, session_id: str, card_index: int) -> GameStateResponse:
        """Reveal a card; ignored taps still return the current state."""
        session = self._require(session_id)
        session.controller.tap(card_index)
        return state_response(session_id, session.controller.snapshot())

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        """End a session."""
        return self.session_manager.end_session(session_id, reason)

    def list_sessions(self) -> list[str]:
        """List active session IDs."""
        return self.session_manager.list_active_sessions()

    def session_response(self, session: Session) -> SessionResponse:
        return SessionResponse(
            session_id=session.session_id,
            created_at=session.created_at,
            level_set=session.level_set,
            level_count=len(session.controller.levels),
            state=state_response(session.session_id, session.controller.snapshot()),
        )

    def _require(self, session_id: str) -> Session:
        session = self.session_manager.get_session(session_id)
        if not session:
            raise SessionNotFoundError(session_id)
        session.touch()
        return session
