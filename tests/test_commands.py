from offline_furnaces.core.commands import (
    PlayerConnectedCommand,
    PlayerDisconnectedCommand,
    parse_player_connected,
    parse_player_disconnected,
)


def test_parse_player_connected():
    cmd: PlayerConnectedCommand = {"type": "player_connected", "user_id": 5}
    assert parse_player_connected(cmd) == 5


def test_parse_player_disconnected_defaults_reason():
    cmd: PlayerDisconnectedCommand = {"type": "player_disconnected", "user_id": 5}
    assert parse_player_disconnected(cmd) == (5, "")


def test_parse_player_disconnected_normalizes_bad_user_id():
    cmd = {"type": "player_disconnected", "user_id": "abc", "reason": "Kicked"}
    assert parse_player_disconnected(cmd) == (0, "Kicked")
