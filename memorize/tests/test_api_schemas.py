"""
Tests for API Pydantic schemas.

Validates that:
- Request/response models serialize correctly
- Error codes are properly structured
- Snapshots convert without leaking hidden symbols
- The OpenAPI schema lists every endpoint
"""

import pytest
from pydantic import ValidationError


class TestPydanticSchemas:
    """Tests for Pydantic schema validation."""

    def test_game_state_response_schema(self):
        """GameStateResponse serializes enums as plain strings."""
        from memorize.api.schemas import CardInfo, GameStateResponse, PhaseInfo, PhaseName

        response = GameStateResponse(
            session_id="session-123",
            phase=PhaseInfo(name=PhaseName.PLAYING, level=1),
            level_number=1,
            level_count=2,
            cards=[
                CardInfo(card_id=0, symbol=None),
                CardInfo(card_id=1, symbol="🐶", face_up=True),
            ],
            pending_selection=[1],
        )

        data = response.model_dump(mode="json")
        assert data["phase"] == {"name": "playing", "level": 1}
        assert data["cards"][0]["symbol"] is None
        assert data["cards"][1]["face_up"] is True
        assert data["api_version"] == "v1"

    def test_create_session_request_defaults(self):
        from memorize.api.schemas import CreateSessionRequest

        request = CreateSessionRequest()
        assert request.levels is None
        assert request.auto_begin is False

    def test_level_schema_rejects_zero_pairs(self):
        from memorize.api.schemas import LevelSchema

        with pytest.raises(ValidationError):
            LevelSchema(pair_count=0, symbols=["A"])

    def test_level_schema_rejects_empty_symbols(self):
        from memorize.api.schemas import LevelSchema

        with pytest.raises(ValidationError):
            LevelSchema(pair_count=1, symbols=[])

    def test_tap_request_requires_index(self):
        from memorize.api.schemas import TapRequest

        with pytest.raises(ValidationError):
            TapRequest()

    def test_error_response_schema(self):
        from memorize.api.schemas import ErrorCode, ErrorResponse

        response = ErrorResponse(
            error="Session abc not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
            details={"session_id": "abc"},
        )
        data = response.model_dump(mode="json")
        assert data["error_code"] == "SESSION_NOT_FOUND"
        assert data["details"]["session_id"] == "abc"

    def test_error_code_values_are_strings(self):
        """Error codes are string enums for JSON serialization."""
        from memorize.api.schemas import ErrorCode

        for code in ErrorCode:
            assert isinstance(code.value, str)
            assert code.value == code.value.upper()


class TestStateConversion:
    """Snapshot to GameStateResponse."""

    def test_hidden_symbols_stay_hidden(self, playing):
        from memorize.api.service import state_response

        playing.tap(0)
        response = state_response("s1", playing.snapshot())

        assert response.cards[0].symbol is not None
        assert all(card.symbol is None for card in response.cards[1:])
        assert response.pending_selection == [0]
        assert response.phase.name.value == "playing"

    def test_not_started_state(self, controller):
        from memorize.api.service import state_response

        response = state_response("s1", controller.snapshot())
        assert response.phase.name.value == "not_started"
        assert response.level_number is None
        assert response.cards == []


class TestOpenAPISchema:
    """Tests for OpenAPI schema generation."""

    @pytest.fixture
    def schema(self):
        from fastapi.openapi.utils import get_openapi
        from memorize.api.app import app

        return get_openapi(
            title=app.title,
            version=app.version,
            routes=app.routes,
        )

    def test_response_models_in_schema(self, schema):
        schemas = schema["components"]["schemas"]
        for name in [
            "SessionResponse",
            "GameStateResponse",
            "ErrorResponse",
            "SessionListResponse",
            "EndSessionResponse",
            "HealthResponse",
        ]:
            assert name in schemas, f"Missing schema: {name}"

    def test_game_endpoints_present(self, schema):
        paths = schema["paths"]
        for command in ("begin", "tap", "advance", "restart"):
            path = f"/api/v1/sessions/{{session_id}}/{command}"
            assert path in paths
            assert "200" in paths[path]["post"]["responses"]

        assert "409" in paths["/api/v1/sessions/{session_id}/advance"]["post"]["responses"]
        assert "get" in paths["/api/v1/sessions/{session_id}/state"]
