"""Tests for wire serialization and inbound message parsing."""

import json

import pytest

from snake_rooms.engine import ActorSpec, advance_tick, create_simulation
from snake_rooms.errors import InvalidMessage
from snake_rooms.food import seeded_random
from snake_rooms.protocol import (
    encode,
    error_message,
    parse_state,
    serialize_state,
    state_message,
    welcome_message,
)
from snake_rooms.server.models import (
    HostMessage,
    InputMessage,
    JoinMessage,
    RestartMessage,
    StartMessage,
    parse_message,
)


@pytest.fixture()
def game():
    members = [
        ActorSpec("p1", "Ann", "#111"),
        ActorSpec("p2", "Bob", "#222"),
        ActorSpec("p3", "Cid", "#333"),
    ]
    rnd = seeded_random(4)
    state = create_simulation(20, 20, members, rnd)
    for _ in range(3):
        state = advance_tick(state, rnd)
    return state


class TestSerializeState:
    def test_shape(self, game):
        data = serialize_state(game)
        assert set(data) == {"rows", "cols", "food", "status", "winnerId", "snakes"}
        assert data["rows"] == 20
        assert data["status"] == "running"
        assert [s["id"] for s in data["snakes"]] == ["p1", "p2", "p3"]
        first = data["snakes"][0]
        assert set(first) == {"id", "name", "color", "alive", "score", "body"}
        assert first["name"] == "Ann"
        assert first["body"][0] == {"x": game.snakes["p1"].head[0], "y": game.snakes["p1"].head[1]}

    def test_none(self):
        assert serialize_state(None) is None
        assert state_message(None) == {"type": "state", "state": None}

    def test_json_round_trip_preserves_board(self, game):
        text = encode(state_message(game))
        view = parse_state(json.loads(text)["state"])

        expected_cells = {c for s in game.snakes.values() for c in s.body}
        assert view.occupied == expected_cells
        assert view.heads == {sid: s.head for sid, s in game.snakes.items()}
        assert view.food == game.food
        assert (view.rows, view.cols) == (game.rows, game.cols)
        assert view.status == "running"
        assert view.winner_id is None


class TestOutboundMessages:
    def test_welcome(self):
        assert welcome_message("p1") == {"type": "welcome", "id": "p1"}

    def test_error(self):
        assert error_message("nope") == {"type": "error", "message": "nope"}

    def test_encode_is_compact(self):
        assert encode({"type": "x", "a": 1}) == '{"type":"x","a":1}'


class TestParseMessage:
    def test_host(self):
        msg = parse_message('{"type":"host","name":"Ann"}')
        assert isinstance(msg, HostMessage)
        assert msg.name == "Ann"

    def test_host_without_name(self):
        assert parse_message('{"type":"host"}').name is None

    def test_join(self):
        msg = parse_message('{"type":"join","code":"abcd","name":"Bob"}')
        assert isinstance(msg, JoinMessage)
        assert msg.code == "abcd"

    def test_start_and_restart(self):
        assert isinstance(parse_message('{"type":"start"}'), StartMessage)
        assert isinstance(parse_message('{"type":"restart"}'), RestartMessage)

    def test_input(self):
        msg = parse_message('{"type":"input","dir":"LEFT"}')
        assert isinstance(msg, InputMessage)
        assert msg.dir == "LEFT"

    def test_invalid_json(self):
        with pytest.raises(InvalidMessage, match="Invalid JSON"):
            parse_message("not-json")

    @pytest.mark.parametrize("raw", ["[]", "123", '"host"', "null"])
    def test_non_object(self, raw):
        with pytest.raises(InvalidMessage, match="Malformed"):
            parse_message(raw)

    def test_unknown_type(self):
        with pytest.raises(InvalidMessage, match="Unknown message type"):
            parse_message('{"type":"teleport"}')

    @pytest.mark.parametrize(
        "raw",
        [
            '{"type":"input","dir":"NORTH"}',
            '{"type":"input"}',
            '{"type":"join"}',
            '{"type":"join","code":""}',
            '{"type":"host","name":42}',
        ],
    )
    def test_malformed_payload(self, raw):
        with pytest.raises(InvalidMessage, match="Malformed"):
            parse_message(raw)
