"""
FastAPI Application - REST API for game clients.

Endpoints:
    POST   /api/v1/sessions                  Create game session
    GET    /api/v1/sessions                  List active sessions
    GET    /api/v1/sessions/{id}             Get session info
    DELETE /api/v1/sessions/{id}             End session
    POST   /api/v1/sessions/{id}/begin       Deal level 1
    POST   /api/v1/sessions/{id}/tap         Reveal a card
    POST   /api/v1/sessions/{id}/advance     Go to the next level
    POST   /api/v1/sessions/{id}/restart     Start over at level 1
    GET    /api/v1/sessions/{id}/state       Get game state
    WS     /api/v1/sessions/{id}/ws          Push state on every change

The mismatch flip-back and level transitions happen on the server's
event loop after the configured delays; clients see them by polling
/state or listening on the WebSocket.

Run with: uvicorn memorize.api.app:app
"""

from typing import Optional, Union
import asyncio
import contextlib
import json
import logging

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import Settings
from ..engine_core import InvalidLevelConfigError, InvalidTransitionError, Snapshot
from ..session import SessionManager
from .service import APIService, SessionNotFoundError, state_response
from .schemas import (
    CreateSessionRequest,
    TapRequest,
    SessionResponse,
    GameStateResponse,
    ErrorResponse,
    SessionListResponse,
    EndSessionResponse,
    HealthResponse,
    ErrorCode,
)

logger = logging.getLogger(__name__)


def create_app(service: Optional[APIService] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (built from settings if not provided)
        settings: Optional Settings (read from the environment if not provided)

    Returns:
        FastAPI application instance
    """
    settings = settings or Settings.from_env()

    app = FastAPI(
        title="Memorize API",
        description="""
Card-matching game engine. Reveal two cards per turn; matching pairs stay
face up, mismatches flip back after a short delay. Clear every board to
finish the game.

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `INVALID_TRANSITION` | Command not accepted in the current phase |
| `INVALID_LEVELS` | Level list or level set cannot be played |
| `VALIDATION_ERROR` | Request body failed validation |
| `INTERNAL_ERROR` | Unexpected server failure |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService(
        session_manager=SessionManager(
            mismatch_delay=settings.mismatch_delay,
            transition_delay=settings.transition_delay,
            default_level_set=settings.level_set,
        ),
        session_max_age=settings.session_max_age,
    )
    app.state.service = api_service

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(SessionNotFoundError)
    async def session_not_found_handler(request, exc: SessionNotFoundError):
        return make_error_response(
            ErrorCode.SESSION_NOT_FOUND,
            str(exc),
            status_code=404,
            details={"session_id": exc.session_id},
        )

    @app.exception_handler(InvalidTransitionError)
    async def invalid_transition_handler(request, exc: InvalidTransitionError):
        return make_error_response(
            ErrorCode.INVALID_TRANSITION,
            str(exc),
            status_code=409,
            details={"phase": exc.phase.kind.value, "level": exc.phase.level},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
            for error in exc.errors()
        ]
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Request validation failed",
            status_code=422,
            details={"errors": errors},
        )

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return make_error_response(
            ErrorCode.INTERNAL_ERROR,
            "Internal server error",
            status_code=500,
        )

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        responses={400: {"model": ErrorResponse, "description": "Unplayable levels"}},
        tags=["Sessions"],
        summary="Create a new game session",
    )
    async def create_session(
        body: Optional[CreateSessionRequest] = None,
    ) -> Union[SessionResponse, JSONResponse]:
        """
        Create a new game session.

        Omit `levels` to use a built-in `level_set` (default `classic`:
        3 pairs then 4 pairs). Set `auto_begin` to deal the first board
        right away; otherwise call `/begin`.
        """
        request = body or CreateSessionRequest()
        try:
            return api_service.create_session(request)
        except InvalidLevelConfigError as e:
            return make_error_response(ErrorCode.INVALID_LEVELS, str(e))
        except KeyError as e:
            return make_error_response(ErrorCode.INVALID_LEVELS, e.args[0])

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        """List all active session IDs."""
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session info",
    )
    async def get_session(session_id: str) -> SessionResponse:
        return api_service.get_session(session_id)

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a game session",
    )
    async def end_session(session_id: str) -> EndSessionResponse:
        """End a game session and cancel its timers."""
        success = api_service.end_session(session_id)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Game Commands
    # =========================================================================

    @app.post(
        "/api/v1/sessions/{session_id}/begin",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Deal the first level",
    )
    async def begin(session_id: str) -> GameStateResponse:
        return api_service.begin(session_id)

    @app.post(
        "/api/v1/sessions/{session_id}/tap",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Reveal a card",
    )
    async def tap(session_id: str, body: TapRequest) -> GameStateResponse:
        """
        Reveal the card at `card_index`.

        Taps that cannot apply (input locked, card matched or already face
        up, index off the board, not playing) are ignored and the unchanged
        state is returned.
        """
        return api_service.tap(session_id, body.card_index)

    @app.post(
        "/api/v1/sessions/{session_id}/advance",
        response_model=GameStateResponse,
        responses={
            404: {"model": ErrorResponse},
            409: {"model": ErrorResponse, "description": "Level not cleared"},
        },
        tags=["Game"],
        summary="Go to the next level",
    )
    async def advance_level(session_id: str) -> GameStateResponse:
        return api_service.advance_level(session_id)

    @app.post(
        "/api/v1/sessions/{session_id}/restart",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Start over at level 1",
    )
    async def restart(session_id: str) -> GameStateResponse:
        return api_service.restart(session_id)

    @app.get(
        "/api/v1/sessions/{session_id}/state",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Get current game state",
    )
    async def get_game_state(session_id: str) -> GameStateResponse:
        return api_service.get_game_state(session_id)

    # =========================================================================
    # WebSocket Endpoint
    # =========================================================================

    @app.websocket("/api/v1/sessions/{session_id}/ws")
    async def websocket_endpoint(websocket: WebSocket, session_id: str):
        """
        WebSocket for real-time updates.

        Messages from server:
        - state_update: Game state changed (sent once on connect, then on every change)
        - pong: Reply to ping
        - error: Unknown session or bad message

        Messages from client:
        - ping: Keep-alive
        """
        await websocket.accept()

        session = api_service.session_manager.get_session(session_id)
        if not session:
            await websocket.send_json({
                "type": "error",
                "payload": {
                    "message": f"Session {session_id} not found",
                    "error_code": ErrorCode.SESSION_NOT_FOUND.value,
                },
            })
            await websocket.close(code=4404)
            return

        loop = asyncio.get_running_loop()
        updates: asyncio.Queue = asyncio.Queue()

        def on_change(snapshot: Snapshot) -> None:
            # Timers may fire on another loop's thread
            loop.call_soon_threadsafe(updates.put_nowait, snapshot)

        def state_message(snapshot: Snapshot) -> dict:
            return {
                "type": "state_update",
                "payload": state_response(session_id, snapshot).model_dump(mode="json"),
            }

        await websocket.send_json(state_message(session.controller.snapshot()))
        unsubscribe = session.controller.subscribe(on_change)

        async def push_updates():
            while True:
                snapshot = await updates.get()
                await websocket.send_json(state_message(snapshot))

        pusher = asyncio.create_task(push_updates())
        try:
            while True:
                data = await websocket.receive_text()
                try:
                    message = json.loads(data)
                except json.JSONDecodeError:
                    await websocket.send_json({
                        "type": "error",
                        "payload": {"message": "Invalid JSON"},
                    })
                    continue
                if isinstance(message, dict) and message.get("type") == "ping":
                    await websocket.send_json({"type": "pong"})
        except WebSocketDisconnect:
            logger.debug("WebSocket for session %s disconnected", session_id)
        finally:
            unsubscribe()
            pusher.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await pusher

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="memorize",
            version=__version__,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Memorize API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn memorize.api.app:app
app = create_app()
