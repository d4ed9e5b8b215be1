"""
API Module - Client interface.

Exposes the engine via REST and WebSocket. A client:
1. Creates a game session
2. Begins the game and sends taps
3. Renders the returned state (hidden symbols are withheld)
4. Advances levels or restarts when prompted by the phase

All state is session-scoped and in memory.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    TapRequest,
    LevelSchema,
    # Responses
    SessionResponse,
    GameStateResponse,
    ErrorResponse,
    # Shared
    CardInfo,
    PhaseInfo,
    PhaseName,
    ErrorCode,
)
from .service import APIService, SessionNotFoundError, state_response
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "TapRequest",
    "LevelSchema",
    # Responses
    "SessionResponse",
    "GameStateResponse",
    "ErrorResponse",
    # Shared
    "CardInfo",
    "PhaseInfo",
    "PhaseName",
    "ErrorCode",
    # Service
    "APIService",
    "SessionNotFoundError",
    "state_response",
    "create_app",
]
