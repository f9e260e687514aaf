from __future__ import annotations

import logging
from typing import Dict, List, Optional, Set

logger = logging.getLogger(__name__)

# Players holding this permission keep their ovens running while offline
IGNORE = "offlinefurnaces.ignore"

PERMISSIONS: List[str] = [
    IGNORE,
]


class PermissionGate:
    """Registry of named permissions and the players they are granted to.

    Unknown players and unregistered permission names are never permitted.
    """

    def __init__(self) -> None:
        # permission name -> registering owner
        self._registered: Dict[str, str] = {}
        self._grants: Dict[int, Set[str]] = {}

    def register_permission(self, name: str, owner: str) -> None:
        """Register a permission name; registering a known name is a no-op."""
        if not name or name in self._registered:
            return
        self._registered[name] = owner
        logger.debug(
            "permission_registered",
            extra={"permission": name, "owner": owner},
        )

    def permission_exists(self, name: str) -> bool:
        return name in self._registered

    def grant_permission(self, user_id: int, name: str) -> bool:
        if not user_id or name not in self._registered:
            return False
        self._grants.setdefault(int(user_id), set()).add(name)
        return True

    def revoke_permission(self, user_id: int, name: str) -> None:
        granted = self._grants.get(int(user_id or 0))
        if granted is not None:
            granted.discard(name)

    def has_permission(self, user_id: Optional[int], name: str) -> bool:
        if not user_id or name not in self._registered:
            return False
        return name in self._grants.get(int(user_id), ())


def register_permissions(gate: PermissionGate, owner: str) -> None:
    for permission in PERMISSIONS:
        gate.register_permission(permission, owner)


__all__ = [
    "IGNORE",
    "PERMISSIONS",
    "PermissionGate",
    "register_permissions",
]
