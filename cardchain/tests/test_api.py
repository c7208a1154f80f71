"""
Tests for API layer.

Tests:
- EngineService methods
- HTTP endpoints through TestClient
- Session lifecycle via API
- Error handling and status codes
"""

import logging

import pytest
from fastapi.testclient import TestClient

from ..api.app import create_app
from ..api.schemas import (
    ConfirmRequest,
    CreateSessionRequest,
    ErrorCode,
    ErrorResponse,
    GameModel,
    GameRequest,
    PlayCardModel,
    QueueActionRequest,
    ResolveTurnRequest,
)
from ..api.service import EngineService, game_from_model, game_to_model
from .conftest import STRIKER, make_game, unit


def as_model(game) -> GameModel:
    return GameModel.model_validate(game.to_dict())


@pytest.fixture
def service(catalog):
    return EngineService(catalog=catalog)


@pytest.fixture
def client(service):
    return TestClient(create_app(service))


class TestEngineService:
    """Tests for EngineService."""

    def test_model_round_trip(self, clash_game):
        assert game_from_model(game_to_model(clash_game)) == clash_game

    def test_list_cards(self, service):
        response = service.list_cards()
        assert response.count == 7
        assert response.cards[0].name == "Striker"
        assert response.cards[3].card_type == "spell"

    def test_default_catalog(self):
        assert EngineService().list_cards().count == 8

    def test_resolve_turn(self, service, hand_game):
        response = service.resolve_turn(ResolveTurnRequest(
            game=as_model(hand_game),
            actions=[{"type": "PlayCard", "hand_index": 0, "slot_index": 0}, {"type": "EndTurn"}],
        ))
        assert response.success
        assert response.applied == 2
        assert response.destroyed_units == [(1, 0)]
        assert response.game.active_idx == 1
        assert "Played Striker to slot 1" in response.changes

    def test_resolve_turn_failure(self, service, empty_game):
        response = service.resolve_turn(ResolveTurnRequest(
            game=as_model(empty_game),
            actions=[{"type": "PlayCard", "hand_index": 3, "slot_index": 0}],
        ))
        assert not response.success
        assert response.error.error_code == ErrorCode.INVALID_HAND_INDEX
        assert response.error.action_index == 0
        assert response.game == as_model(empty_game)

    def test_malformed_snapshot(self, service, empty_game):
        model = as_model(empty_game)
        model.players[0].energy = 9  # Above max_energy
        response = service.resolve_turn(ResolveTurnRequest(game=model))
        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.VALIDATION_ERROR

    def test_analyze(self, service, clash_game):
        response = service.analyze(GameRequest(game=as_model(clash_game)))
        assert response.destroyed_units == [(0, 1), (1, 1), (1, 3)]
        assert response.player_damage == [(1, 3)]
        assert not response.game_over

    def test_animate(self, service, clash_game):
        response = service.animate(GameRequest(game=as_model(clash_game)))
        assert response.total_duration == 4350
        assert response.animations[0].id == "player-attack-0-0"

    def test_session_flow(self, service, hand_game):
        created = service.create_session(CreateSessionRequest(game=as_model(hand_game), player_idx=0))
        assert created.is_my_turn
        session_id = created.session_id

        queued = service.queue_action(session_id, QueueActionRequest(action=PlayCardModel(hand_index=0, slot_index=0)))
        assert queued.success
        assert service.get_session(session_id).pending_actions == [PlayCardModel(hand_index=0, slot_index=0)]

        prediction = service.predict(session_id)
        assert prediction.turn.success
        assert prediction.outcome.destroyed_units == [(1, 0)]
        assert prediction.animations.total_duration == 4350

        confirmed = service.confirm(session_id, ConfirmRequest(game=prediction.turn.game))
        assert confirmed.diverged is False
        assert confirmed.session.pending_actions == []
        assert not confirmed.session.is_my_turn

        assert service.end_session(session_id)
        assert service.list_sessions() == []

    def test_prediction_after_concede_has_no_preview(self, service, hand_game):
        created = service.create_session(CreateSessionRequest(game=as_model(hand_game), player_idx=0))
        service.queue_action(created.session_id, QueueActionRequest(action={"type": "Concede"}))

        prediction = service.predict(created.session_id)
        assert prediction.turn.success
        assert prediction.turn.game.winner_idx == 1
        assert prediction.outcome is None
        assert prediction.animations is None

    def test_unknown_session(self, service):
        response = service.get_session("nonexistent-id")
        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.GAME_NOT_FOUND
        assert isinstance(service.predict("nonexistent-id"), ErrorResponse)


class TestHTTP:
    """Endpoints and status codes."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_cards(self, client):
        data = client.get("/api/v1/cards").json()
        assert data["count"] == 7
        assert data["cards"][0]["id"] == 1

    def test_resolve(self, client):
        game = make_game(boards=([unit(STRIKER, 4), None, None, None], [None] * 4), hp=(20, 10))
        response = client.post("/api/v1/turns/resolve", json={
            "game": game.to_dict(),
            "actions": [{"type": "EndTurn"}],
        })
        assert response.status_code == 200
        data = response.json()
        assert data["game"]["players"][1]["hp"] == 7
        assert data["game"]["turn"] == 2

    def test_resolve_rejected_is_422(self, client, empty_game):
        response = client.post("/api/v1/turns/resolve", json={
            "game": empty_game.to_dict(),
            "actions": [{"type": "EndTurn"}],
            "player_idx": 1,
        })
        assert response.status_code == 422
        data = response.json()
        assert data["error_code"] == "NotYourTurn"
        assert data["details"]["game"] == empty_game.to_dict()

    def test_schema_violation_is_422(self, client):
        response = client.post("/api/v1/turns/resolve", json={"game": {"id": 1}})
        assert response.status_code == 422

    def test_unit_without_hp_is_422(self, client, empty_game):
        snapshot = empty_game.to_dict()
        snapshot["players"][0]["board"][0] = {"card_id": STRIKER, "current_hp": 0}
        response = client.post("/api/v1/turns/resolve", json={
            "game": snapshot,
            "actions": [{"type": "EndTurn"}],
        })
        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_app_leaves_logging_alone(self, service):
        """Building the app does not touch the root logger."""
        root = logging.getLogger()
        handlers = list(root.handlers)
        level = root.level
        create_app(service)
        assert root.handlers == handlers
        assert root.level == level

    def test_outcome(self, client, clash_game):
        response = client.post("/api/v1/combat/outcome", json={"game": clash_game.to_dict()})
        assert response.status_code == 200
        assert response.json()["destroyed_units"] == [[0, 1], [1, 1], [1, 3]]

    def test_animations(self, client, clash_game):
        response = client.post("/api/v1/combat/animations", json={"game": clash_game.to_dict()})
        assert response.status_code == 200
        ids = [a["id"] for a in response.json()["animations"]]
        assert "counter-damage-0-3" in ids
        assert ids[-1] == "death-1-3"

    def test_session_endpoints(self, client, hand_game):
        created = client.post("/api/v1/sessions", json={"game": hand_game.to_dict(), "player_idx": 0})
        assert created.status_code == 200
        session_id = created.json()["session_id"]

        queued = client.post(
            f"/api/v1/sessions/{session_id}/actions",
            json={"action": {"type": "PlayCard", "hand_index": 0, "slot_index": 1}},
        )
        assert queued.status_code == 200

        rejected = client.post(
            f"/api/v1/sessions/{session_id}/actions",
            json={"action": {"type": "PlayCard", "hand_index": 0, "slot_index": 1}},
        )
        assert rejected.status_code == 422
        assert rejected.json()["error_code"] == "SlotOccupied"

        prediction = client.get(f"/api/v1/sessions/{session_id}/prediction").json()
        assert prediction["turn"]["success"]
        ledger_game = prediction["turn"]["game"]
        ledger_game["players"][1]["hand"] = [STRIKER]

        confirmed = client.post(f"/api/v1/sessions/{session_id}/confirm", json={"game": ledger_game})
        assert confirmed.status_code == 200
        assert confirmed.json()["diverged"] is True

        status = client.get(f"/api/v1/sessions/{session_id}").json()
        assert status["state"] == "idle"
        assert status["game"]["turn"] == 2

        ended = client.delete(f"/api/v1/sessions/{session_id}")
        assert ended.json() == {"success": True, "session_id": session_id}

    def test_unknown_session_is_404(self, client):
        response = client.get("/api/v1/sessions/missing")
        assert response.status_code == 404
        assert response.json()["error_code"] == "GameNotFound"

        response = client.post("/api/v1/sessions/missing/actions", json={"action": {"type": "EndTurn"}})
        assert response.status_code == 404
