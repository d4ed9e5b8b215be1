"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between a renderer (web or mobile
client) and the engine. Hidden card symbols are never present: a
face-down card is sent with `symbol: null`.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has been ended
- INVALID_TRANSITION: Command not accepted in the current phase
- INVALID_LEVELS: Level list or level set cannot be played
- VALIDATION_ERROR: Request body failed validation
- INTERNAL_ERROR: Unexpected server failure
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class PhaseName(str, Enum):
    """Game phase values."""
    NOT_STARTED = "not_started"
    PLAYING = "playing"
    LEVEL_CLEARED = "level_cleared"
    COMPLETED = "completed"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    INVALID_LEVELS = "INVALID_LEVELS"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class CardInfo(BaseModel):
    """One card as a renderer sees it."""
    card_id: int = Field(description="Position on the board, 0-based")
    symbol: Optional[str] = Field(None, description="Null while the card is face down")
    face_up: bool = False
    matched: bool = False


class PhaseInfo(BaseModel):
    """Current phase and, where relevant, its level number."""
    name: PhaseName
    level: Optional[int] = None


class LevelSchema(BaseModel):
    """A custom level: the first `pair_count` symbols are dealt as pairs."""
    pair_count: int = Field(..., ge=1, description="Number of pairs on the board")
    symbols: list[str] = Field(..., min_length=1, description="Distinct symbols, in order")


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to create a new game session."""
    levels: Optional[list[LevelSchema]] = Field(
        None, description="Custom levels; overrides level_set"
    )
    level_set: Optional[str] = Field(None, description="Built-in level set: classic, single")
    random_seed: Optional[int] = Field(None, description="Seed for reproducible shuffles")
    auto_begin: bool = Field(False, description="Deal the first board immediately")


class TapRequest(BaseModel):
    """Reveal one card. Invalid taps are ignored, not rejected."""
    card_index: int = Field(..., description="Board position of the card")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class GameStateResponse(BaseModel):
    """Everything a renderer needs to draw the game."""
    session_id: str
    phase: PhaseInfo
    level_number: Optional[int] = None
    level_count: int
    cards: list[CardInfo] = Field(default_factory=list)
    pending_selection: list[int] = Field(default_factory=list)
    input_locked: bool = False
    matched_count: int = 0
    api_version: str = "v1"


class SessionResponse(BaseModel):
    """Response containing session information."""
    session_id: str
    created_at: float
    level_set: Optional[str] = None
    level_count: int
    state: GameStateResponse
    api_version: str = "v1"


class SessionListResponse(BaseModel):
    """Response listing active sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
