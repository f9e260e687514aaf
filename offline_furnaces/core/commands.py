from __future__ import annotations

from typing import TypedDict, NotRequired, Any, Tuple


# Command payload types
class BaseCommand(TypedDict):
    type: str
    user_id: int


class PlayerConnectedCommand(BaseCommand):
    pass


class PlayerDisconnectedCommand(BaseCommand):
    reason: NotRequired[str]


# Parse helpers to normalize incoming raw dicts into typed, validated tuples

def _get_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def parse_player_connected(cmd: PlayerConnectedCommand) -> int:
    return _get_int(cmd.get("user_id"))


def parse_player_disconnected(cmd: PlayerDisconnectedCommand) -> Tuple[int, str]:
    return _get_int(cmd.get("user_id")), str(cmd.get("reason") or "")
