from __future__ import annotations

import logging
import time
import uuid
from typing import Any, AbstractSet, Optional, Set

from offline_furnaces.core.config import get_sweep_batch_size
from offline_furnaces.core.metrics import metrics
from offline_furnaces.core.permissions import IGNORE, PermissionGate
from offline_furnaces.core.players import get_team, is_offline
from offline_furnaces.core.plugin_config import PluginConfig
from offline_furnaces.core.tasks import Task, TaskRegistry
from offline_furnaces.models import Oven, Player

logger = logging.getLogger(__name__)


def turn_off_ovens(
    world: Any,
    player_ids: AbstractSet[int],
    allowed_prefabs: AbstractSet[str],
    batch_size: int = 1,
) -> Task:
    """Stop every allow-listed oven owned by one of ``player_ids``.

    The set of ovens is captured when the sweep starts; ovens placed later are
    left for the next sweep and ovens destroyed meanwhile are skipped. Yields
    after every ``batch_size`` inspected ovens.
    """
    batch_size = max(1, int(batch_size))
    started = time.perf_counter()
    oven_entities = [ent for ent, _oven in world.get_component(Oven)]
    stopped = 0

    for index, ent in enumerate(oven_entities, start=1):
        oven = world.try_component(ent, Oven) if world.entity_exists(ent) else None
        if (
            oven is not None
            and oven.short_prefab_name in allowed_prefabs
            and oven.owner_id != 0
            and oven.owner_id in player_ids
        ):
            oven.stop_cooking()
            stopped += 1
            metrics.increment_event("ovens.stopped")

        if index % batch_size == 0:
            yield

    metrics.increment_event("sweeps.completed")
    metrics.record_timer("sweep.duration_s", time.perf_counter() - started)
    logger.info(
        "oven_sweep_complete",
        extra={
            "player_ids": sorted(player_ids),
            "inspected_count": len(oven_entities),
            "stopped_count": stopped,
        },
    )


class ShutdownHandler:
    """Decides on each disconnect whether the player's ovens should stop.

    A player's ovens are only stopped once nobody from their team is left
    online to tend the shared base. Players holding the ``IGNORE``
    permission are exempt.
    """

    def __init__(
        self,
        world: Any,
        tasks: TaskRegistry,
        permissions: PermissionGate,
        config: PluginConfig,
        batch_size: Optional[int] = None,
    ) -> None:
        self.world = world
        self.tasks = tasks
        self.permissions = permissions
        self.config = config
        self.batch_size = batch_size if batch_size is not None else get_sweep_batch_size()

    def on_player_disconnected(self, player: Optional[Player], reason: str = "") -> Optional[str]:
        """Schedule an oven sweep for ``player`` and return its task name.

        Returns None when the disconnect does not qualify.
        """
        user_id = getattr(player, "user_id", 0) if player is not None else 0
        if not user_id:
            return None

        if self.permissions.has_permission(user_id, IGNORE):
            logger.debug(
                "oven_shutdown_skipped",
                extra={"user_id": user_id, "action_context": "disconnect:ignore_permission"},
            )
            return None

        team = get_team(self.world, user_id)
        player_ids: Set[int] = {user_id}
        if team is not None:
            for member_id in team.members:
                # The disconnecting player counts as offline even if the host
                # has not flipped its connection flag yet
                if member_id != user_id and not is_offline(self.world, member_id):
                    logger.debug(
                        "oven_shutdown_skipped",
                        extra={
                            "user_id": user_id,
                            "online_member_id": member_id,
                            "action_context": "disconnect:team_online",
                        },
                    )
                    return None
            player_ids.update(team.members)

        task_name = str(uuid.uuid4())
        allowed = frozenset(self.config.oven_short_prefab_names)
        metrics.increment_event("sweeps.started")
        logger.info(
            "oven_sweep_scheduled",
            extra={
                "user_id": user_id,
                "team_id": team.team_id if team is not None else None,
                "reason": reason,
                "task_name": task_name,
            },
        )
        self.tasks.enqueue(
            task_name,
            turn_off_ovens(self.world, player_ids, allowed, batch_size=self.batch_size),
        )
        return task_name


__all__ = ["ShutdownHandler", "turn_off_ovens"]
