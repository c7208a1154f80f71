"""
Tests for API Pydantic schemas.

Validates that:
- Game snapshots enforce the board geometry
- Actions are discriminated by their "type" tag
- Error codes line up with the engine's codes
"""

import pytest
from pydantic import TypeAdapter, ValidationError

from ..api.schemas import (
    ActionModel,
    ConcedeModel,
    EndTurnModel,
    ErrorCode,
    ErrorResponse,
    GameModel,
    PlayCardModel,
    ResolveTurnRequest,
    UseSpellModel,
)
from ..engine_core.action import ErrorCode as EngineErrorCode
from .conftest import make_game


class TestGameModel:

    def test_engine_dict_validates(self, clash_game):
        model = GameModel.model_validate(clash_game.to_dict())
        assert model.players[0].board[0].card_id == 1
        assert model.players[0].board[2] is None
        assert model.model_dump(mode="json") == clash_game.to_dict()

    def test_board_needs_four_slots(self):
        data = make_game().to_dict()
        data["players"][1]["board"] = [None] * 5
        with pytest.raises(ValidationError):
            GameModel.model_validate(data)

    def test_two_players(self):
        data = make_game().to_dict()
        data["players"] = data["players"][:1]
        with pytest.raises(ValidationError):
            GameModel.model_validate(data)

    def test_status_values(self):
        data = make_game().to_dict()
        data["status"] = "Paused"
        with pytest.raises(ValidationError):
            GameModel.model_validate(data)


class TestActionModel:

    adapter = TypeAdapter(ActionModel)

    def test_discriminated_by_type(self):
        assert isinstance(
            self.adapter.validate_python({"type": "PlayCard", "hand_index": 0, "slot_index": 1}),
            PlayCardModel,
        )
        assert isinstance(
            self.adapter.validate_python({"type": "UseSpell", "hand_index": 0, "target_slot": 1}),
            UseSpellModel,
        )
        assert isinstance(self.adapter.validate_python({"type": "EndTurn"}), EndTurnModel)
        assert isinstance(self.adapter.validate_python({"type": "Concede"}), ConcedeModel)

    def test_unknown_type(self):
        with pytest.raises(ValidationError):
            self.adapter.validate_python({"type": "Dance"})

    def test_missing_fields(self):
        with pytest.raises(ValidationError):
            self.adapter.validate_python({"type": "PlayCard", "hand_index": 0})

    def test_request_parses_queue(self, empty_game):
        request = ResolveTurnRequest.model_validate({
            "game": empty_game.to_dict(),
            "actions": [{"type": "PlayCard", "hand_index": 0, "slot_index": 2}, {"type": "EndTurn"}],
            "player_idx": 0,
        })
        assert [a.type for a in request.actions] == ["PlayCard", "EndTurn"]

    def test_request_seat_range(self, empty_game):
        with pytest.raises(ValidationError):
            ResolveTurnRequest(game=GameModel.model_validate(empty_game.to_dict()), player_idx=2)


class TestErrorSchemas:

    def test_engine_codes_have_wire_equivalents(self):
        for code in EngineErrorCode:
            assert ErrorCode(code.value).value == code.value

    def test_error_response(self):
        response = ErrorResponse(error="Slot 2 is occupied", error_code=ErrorCode.SLOT_OCCUPIED)
        data = response.model_dump(mode="json")
        assert data == {"error": "Slot 2 is occupied", "error_code": "SlotOccupied", "details": None}
