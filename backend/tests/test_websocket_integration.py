"""
WebSocket integration tests using FastAPI TestClient.
Tests: create/join, capacity, host-only actions, full game flow,
disconnect handling, malformed input.
"""
import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from fastapi.testclient import TestClient
from main import app, socket_manager
import config
import words


NAMES = ["Alice", "Bob", "Charlie", "Dave", "Eve", "Frank", "Grace", "Heidi", "Ivan", "Judy", "Mallory"]


@pytest.fixture
def client():
    socket_manager.reset()
    socket_manager.reveal_delay = 0
    with TestClient(app) as test_client:
        yield test_client
    socket_manager.reset()
    socket_manager.reveal_delay = config.ROLE_REVEAL_SECONDS


def recv_until(ws, msg_type, max_messages=100):
    """Receive WS messages until we get the expected type."""
    for _ in range(max_messages):
        data = ws.receive_json()
        if data.get("type") == msg_type:
            return data["payload"]
    raise TimeoutError(f"Never received {msg_type} after {max_messages} messages")


def open_ws(client):
    return client.websocket_connect("/ws").__enter__()


def create_room(client, name="Alice"):
    ws = open_ws(client)
    ws.send_json({"type": "CREATE_ROOM", "payload": {"playerName": name, "color": "#FF6B6B"}})
    created = recv_until(ws, "ROOM_CREATED")
    return ws, created["playerId"], created["room"]["code"]


def join_room(client, room_code, name):
    ws = open_ws(client)
    ws.send_json({"type": "JOIN_ROOM", "payload": {"playerName": name, "roomCode": room_code}})
    joined = recv_until(ws, "ROOM_JOINED")
    return ws, joined["playerId"]


def setup_lobby(client, num_players=4):
    """Return (room_code, [(ws, player_id), ...]) in join order."""
    host_ws, host_id, room_code = create_room(client, NAMES[0])
    players = [(host_ws, host_id)]
    for name in NAMES[1:num_players]:
        players.append(join_room(client, room_code, name))
    return room_code, players


def cleanup(players):
    for ws, _ in players:
        ws.__exit__(None, None, None)


def get_room(client, room_code):
    res = client.get(f"/rooms/{room_code}")
    assert res.status_code == 200
    return res.json()


# =====================================================================
# Create and join
# =====================================================================

class TestCreateAndJoin:
    def test_create_room(self, client):
        ws, player_id, room_code = create_room(client)
        try:
            assert len(room_code) == 6
            room = get_room(client, room_code)
            assert room["phase"] == "LOBBY"
            assert room["players"][0]["id"] == player_id
            assert room["players"][0]["isHost"] is True
        finally:
            ws.__exit__(None, None, None)

    def test_join_with_lowercase_code(self, client):
        host_ws, _, room_code = create_room(client)
        try:
            ws, player_id = join_room(client, room_code.lower(), "Bob")
            joined = recv_until(host_ws, "PLAYER_JOINED")
            assert [p["id"] for p in joined["room"]["players"]][-1] == player_id
            ws.__exit__(None, None, None)
        finally:
            host_ws.__exit__(None, None, None)

    def test_joiner_also_receives_player_joined(self, client):
        host_ws, _, room_code = create_room(client)
        try:
            ws, _ = join_room(client, room_code, "Bob")
            msg = recv_until(ws, "PLAYER_JOINED")
            assert len(msg["room"]["players"]) == 2
            ws.__exit__(None, None, None)
        finally:
            host_ws.__exit__(None, None, None)

    def test_join_unknown_room(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.send_json({"type": "JOIN_ROOM", "payload": {"playerName": "Bob", "roomCode": "ZZZZZZ"}})
            err = recv_until(ws, "ERROR")
            assert err["code"] == "NOT_FOUND"
            assert "not found" in err["message"].lower()

    def test_eleventh_join_rejected(self, client):
        room_code, players = setup_lobby(client, 10)
        try:
            with client.websocket_connect("/ws") as ws:
                ws.send_json({"type": "JOIN_ROOM",
                              "payload": {"playerName": "Mallory", "roomCode": room_code}})
                err = recv_until(ws, "ERROR")
                assert err["code"] == "CAPACITY"
                assert "full" in err["message"].lower()
            assert len(get_room(client, room_code)["players"]) == 10
        finally:
            cleanup(players)

    def test_join_after_start_rejected(self, client):
        room_code, players = setup_lobby(client, 4)
        try:
            host_ws = players[0][0]
            host_ws.send_json({"type": "START_GAME"})
            recv_until(host_ws, "GAME_STARTED")
            with client.websocket_connect("/ws") as ws:
                ws.send_json({"type": "JOIN_ROOM",
                              "payload": {"playerName": "Eve", "roomCode": room_code}})
                err = recv_until(ws, "ERROR")
                assert err["code"] == "CAPACITY"
                assert "in progress" in err["message"].lower()
        finally:
            cleanup(players)


# =====================================================================
# Settings
# =====================================================================

class TestSettings:
    def test_host_updates_settings(self, client):
        room_code, players = setup_lobby(client, 2)
        try:
            host_ws = players[0][0]
            host_ws.send_json({"type": "UPDATE_SETTINGS",
                               "payload": {"settings": {"category": "ANIMALS", "clueRounds": 4}}})
            msg = recv_until(players[1][0], "SETTINGS_UPDATED")
            assert msg["room"]["settings"] == {
                "category": "ANIMALS", "difficulty": "MEDIUM", "clueRounds": 4, "allowPhrases": False,
            }
        finally:
            cleanup(players)

    def test_non_host_rejected(self, client):
        room_code, players = setup_lobby(client, 4)
        try:
            before = get_room(client, room_code)["settings"]
            bob_ws = players[1][0]
            bob_ws.send_json({"type": "UPDATE_SETTINGS",
                              "payload": {"settings": {"difficulty": "HARD"}}})
            err = recv_until(bob_ws, "ERROR")
            assert err["code"] == "UNAUTHORIZED"
            assert "host" in err["message"].lower()
            assert get_room(client, room_code)["settings"] == before
        finally:
            cleanup(players)

    def test_invalid_rounds_rejected(self, client):
        room_code, players = setup_lobby(client, 1)
        try:
            host_ws = players[0][0]
            host_ws.send_json({"type": "UPDATE_SETTINGS", "payload": {"settings": {"clueRounds": 9}}})
            err = recv_until(host_ws, "ERROR")
            assert err["code"] == "MALFORMED"
            assert get_room(client, room_code)["settings"]["clueRounds"] == 3
        finally:
            cleanup(players)


# =====================================================================
# Full game flow
# =====================================================================

class TestGameFlow:
    def test_start_requires_four_players(self, client):
        room_code, players = setup_lobby(client, 3)
        try:
            host_ws = players[0][0]
            host_ws.send_json({"type": "START_GAME"})
            err = recv_until(host_ws, "ERROR")
            assert "player" in err["message"].lower()
            assert get_room(client, room_code)["phase"] == "LOBBY"
        finally:
            cleanup(players)

    def test_full_game(self, client):
        room_code, players = setup_lobby(client, 4)
        try:
            host_ws = players[0][0]
            host_ws.send_json({"type": "UPDATE_SETTINGS", "payload": {"settings": {
                "category": "FOOD", "difficulty": "EASY", "clueRounds": 2, "allowPhrases": False,
            }}})
            recv_until(host_ws, "SETTINGS_UPDATED")
            host_ws.send_json({"type": "START_GAME"})

            roles = {}
            for ws, player_id in players:
                roles[player_id] = recv_until(ws, "ROLE_ASSIGNED")
            imposters = [pid for pid, role in roles.items() if role["isImposter"]]
            assert len(imposters) == 1
            imposter_id = imposters[0]
            assert "secretWord" not in roles[imposter_id]
            secret_words = {role["secretWord"] for pid, role in roles.items() if pid != imposter_id}
            assert len(secret_words) == 1
            secret_word = secret_words.pop()
            assert secret_word in words.WORDS["FOOD"]["EASY"]

            for ws, _ in players:
                started = recv_until(ws, "GAME_STARTED")
                assert started["room"]["phase"] == "ROLE_REVEAL"
                assert started["room"]["secretWord"] is None
                turn = recv_until(ws, "TURN_CHANGED")
                assert turn["room"]["phase"] == "GIVING_CLUES"

            # The host sees every broadcast in order, so it paces the turns.
            for i in range(8):
                ws, player_id = players[i % 4]
                ws.send_json({"type": "SUBMIT_CLUE", "payload": {"clue": f"clue {i}"}})
                if i < 7:
                    msg = recv_until(host_ws, "CLUE_SUBMITTED")
                    assert msg["room"]["clues"][-1]["playerId"] == player_id
                    assert msg["room"]["phase"] == "GIVING_CLUES"
                    assert msg["room"]["currentPlayerId"] == players[(i + 1) % 4][1]
                else:
                    msg = recv_until(host_ws, "VOTING_STARTED")
                    assert msg["room"]["phase"] == "VOTING"
                    assert len(msg["room"]["clues"]) == 8

            for i, (ws, _) in enumerate(players):
                ws.send_json({"type": "SUBMIT_VOTE", "payload": {"votedPlayerId": imposter_id}})
                if i < 3:
                    msg = recv_until(host_ws, "VOTE_SUBMITTED")
                    assert msg["room"]["phase"] == "VOTING"
                else:
                    msg = recv_until(host_ws, "GAME_ENDED")
                    assert msg["room"]["phase"] == "RESULTS"
                    assert msg["room"]["imposterId"] == imposter_id
                    assert msg["room"]["secretWord"] == secret_word
                    assert msg["tally"] == {imposter_id: 4}

            host_ws.send_json({"type": "NEXT_ROUND"})
            for ws, _ in players:
                state = recv_until(ws, "ROOM_STATE")
                assert state["room"]["phase"] == "LOBBY"
                assert state["room"]["clues"] == []
                assert state["room"]["settings"]["clueRounds"] == 2
                assert all(not p["hasVoted"] for p in state["room"]["players"])
        finally:
            cleanup(players)

    def test_clue_out_of_turn(self, client):
        room_code, players = setup_lobby(client, 4)
        try:
            host_ws = players[0][0]
            host_ws.send_json({"type": "START_GAME"})
            recv_until(host_ws, "TURN_CHANGED")
            dave_ws = players[3][0]
            dave_ws.send_json({"type": "SUBMIT_CLUE", "payload": {"clue": "sneaky"}})
            err = recv_until(dave_ws, "ERROR")
            assert err["code"] == "NOT_YOUR_TURN"
            assert get_room(client, room_code)["clues"] == []
        finally:
            cleanup(players)

    def test_clue_during_role_reveal_rejected(self, client):
        socket_manager.reveal_delay = 30
        room_code, players = setup_lobby(client, 4)
        try:
            host_ws = players[0][0]
            host_ws.send_json({"type": "START_GAME"})
            recv_until(host_ws, "GAME_STARTED")
            host_ws.send_json({"type": "SUBMIT_CLUE", "payload": {"clue": "too soon"}})
            err = recv_until(host_ws, "ERROR")
            assert err["code"] == "INVALID_PHASE"
            assert get_room(client, room_code)["phase"] == "ROLE_REVEAL"
        finally:
            cleanup(players)


# =====================================================================
# Disconnects
# =====================================================================

class TestDisconnect:
    def test_disconnect_broadcasts_player_left(self, client):
        room_code, players = setup_lobby(client, 3)
        try:
            charlie_ws, charlie_id = players.pop()
            charlie_ws.__exit__(None, None, None)
            left = recv_until(players[0][0], "PLAYER_LEFT")
            assert charlie_id not in [p["id"] for p in left["room"]["players"]]
            assert len(get_room(client, room_code)["players"]) == 2
        finally:
            cleanup(players)

    def test_host_disconnect_promotes_next(self, client):
        room_code, players = setup_lobby(client, 3)
        try:
            host_ws, _ = players.pop(0)
            host_ws.__exit__(None, None, None)
            left = recv_until(players[0][0], "PLAYER_LEFT")
            hosts = [p["id"] for p in left["room"]["players"] if p["isHost"]]
            assert hosts == [players[0][1]]
        finally:
            cleanup(players)

    def test_explicit_leave(self, client):
        room_code, players = setup_lobby(client, 2)
        try:
            bob_ws, bob_id = players[1]
            bob_ws.send_json({"type": "LEAVE_ROOM", "payload": {}})
            left = recv_until(players[0][0], "PLAYER_LEFT")
            assert [p["id"] for p in left["room"]["players"]] == [players[0][1]]
        finally:
            cleanup(players)

    def test_last_disconnect_deletes_room(self, client):
        ws, _, room_code = create_room(client)
        ws.__exit__(None, None, None)
        assert client.get(f"/rooms/{room_code}").status_code == 404
        assert len(socket_manager.store) == 0
        assert len(socket_manager.registry) == 0

    def test_everyone_leaves_during_role_reveal(self, client):
        socket_manager.reveal_delay = 30
        room_code, players = setup_lobby(client, 4)
        host_ws = players[0][0]
        host_ws.send_json({"type": "START_GAME"})
        recv_until(host_ws, "GAME_STARTED")
        cleanup(players)
        assert client.get(f"/rooms/{room_code}").status_code == 404
        assert room_code not in socket_manager.reveal_tasks


# =====================================================================
# Malformed input
# =====================================================================

class TestMalformedInput:
    def test_invalid_json(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.send_text("not json {")
            err = ws.receive_json()
            assert err["type"] == "ERROR"
            assert err["payload"]["code"] == "MALFORMED"

    def test_message_too_large(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.send_text("x" * (config.MAX_WS_MESSAGE_SIZE + 1))
            err = ws.receive_json()
            assert "too large" in err["payload"]["message"].lower()

    def test_binary_frame_rejected(self, client):
        room_code, players = setup_lobby(client, 2)
        try:
            bob_ws = players[1][0]
            bob_ws.send_bytes(b"\x00\x01")
            err = recv_until(bob_ws, "ERROR")
            assert err["code"] == "MALFORMED"
            assert len(get_room(client, room_code)["players"]) == 2
        finally:
            cleanup(players)

    def test_unknown_type_is_ignored(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.send_json({"type": "DANCE", "payload": {}})
            ws.send_json({"type": "START_GAME", "payload": {}})
            err = ws.receive_json()
            assert err["type"] == "ERROR"
            assert err["payload"]["code"] == "NOT_FOUND"

    def test_bad_payload_shape(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.send_json({"type": "CREATE_ROOM", "payload": {"playerName": "x" * 40}})
            err = ws.receive_json()
            assert err["payload"]["code"] == "MALFORMED"
            assert len(socket_manager.store) == 0

    def test_connection_survives_errors(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.send_text("[]")
            assert ws.receive_json()["type"] == "ERROR"
            ws.send_json({"type": "CREATE_ROOM", "payload": {"playerName": "Alice"}})
            assert ws.receive_json()["type"] == "ROOM_CREATED"

    def test_rate_limit(self, client):
        with client.websocket_connect("/ws") as ws:
            for _ in range(config.WS_RATE_LIMIT_PER_SEC + 1):
                ws.send_json({"type": "START_GAME"})
            messages = [ws.receive_json() for _ in range(config.WS_RATE_LIMIT_PER_SEC + 1)]
            assert any("too many" in m["payload"]["message"].lower() for m in messages)
