from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Set

from offline_furnaces.core.time_utils import utc_now


@dataclass
class Player:
    """Represents a player profile and connection state.

    Attributes:
        name: Display name of the player.
        user_id: Unique player identifier (0 is never a real player).
        connected: Whether the player currently has a live connection.
        last_active: Timestamp of the last connect/disconnect transition.
    """
    name: str
    user_id: int
    connected: bool = True
    last_active: datetime = field(default_factory=utc_now)


@dataclass
class Team:
    """A group of players sharing responsibility for their base."""
    team_id: int
    leader_id: int = 0
    members: Set[int] = field(default_factory=set)


@dataclass
class Oven:
    """A fuel-burning station (furnace, refinery, ...) placed in the world.

    ``short_prefab_name`` is the type tag matched against the configured
    allow-list; ``owner_id`` of 0 means the oven is not owned by a player.
    """
    short_prefab_name: str
    owner_id: int = 0
    cooking: bool = False

    def start_cooking(self) -> None:
        self.cooking = True

    def stop_cooking(self) -> None:
        """Stop burning fuel. Calling this on a stopped oven is a no-op."""
        self.cooking = False
