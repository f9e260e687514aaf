"""Player and team lookups against the host's ECS world."""
from __future__ import annotations

from typing import Any, Optional

from offline_furnaces.models import Player, Team


def find_player(world: Any, user_id: int) -> Optional[Player]:
    """Return the Player component for user_id, or None when unknown."""
    if not user_id:
        return None
    for _ent, player in world.get_component(Player):
        if player.user_id == user_id:
            return player
    return None


def get_team(world: Any, user_id: int) -> Optional[Team]:
    """Return the team user_id belongs to, or None for solo players."""
    if not user_id:
        return None
    for _ent, team in world.get_component(Team):
        if user_id in team.members:
            return team
    return None


def is_offline(world: Any, user_id: int) -> bool:
    """A player is offline when unknown to the world or not connected."""
    player = find_player(world, user_id)
    return player is None or not player.connected


__all__ = [
    "find_player",
    "get_team",
    "is_offline",
]
