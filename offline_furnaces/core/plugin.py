from __future__ import annotations

import logging
from typing import Any, Optional

from offline_furnaces.core.config import get_config_path
from offline_furnaces.core.permissions import PermissionGate, register_permissions
from offline_furnaces.core.plugin_config import PLUGIN_VERSION, PluginConfig, load_config
from offline_furnaces.core.tasks import TaskRegistry
from offline_furnaces.models import Player
from offline_furnaces.systems.oven_shutdown import ShutdownHandler

logger = logging.getLogger(__name__)


class OfflineFurnaces:
    """Turns off furnaces when players go offline.

    Lifecycle: ``init()`` registers permissions and loads the configuration;
    ``unload()`` cancels every outstanding sweep and drops the configuration
    so nothing can fire after shutdown. Hooks are no-ops while unloaded.
    """

    name = "OfflineFurnaces"
    version = PLUGIN_VERSION

    def __init__(
        self,
        world: Any,
        permissions: PermissionGate,
        tasks: TaskRegistry,
        config_path: Optional[str] = None,
    ) -> None:
        self.world = world
        self.permissions = permissions
        self.tasks = tasks
        self.config_path = config_path or get_config_path()
        self.config: Optional[PluginConfig] = None
        self._handler: Optional[ShutdownHandler] = None

    @property
    def loaded(self) -> bool:
        return self.config is not None

    def init(self) -> None:
        register_permissions(self.permissions, self.name)
        self.config = load_config(self.config_path, self.version)
        self._handler = ShutdownHandler(self.world, self.tasks, self.permissions, self.config)
        logger.info(
            "plugin_loaded",
            extra={
                "plugin": self.name,
                "version": self.version,
                "oven_prefabs": list(self.config.oven_short_prefab_names),
                "action_context": "plugin:init",
            },
        )

    def unload(self) -> None:
        cancelled = self.tasks.cancel_all()
        self._handler = None
        self.config = None
        logger.info(
            "plugin_unloaded",
            extra={
                "plugin": self.name,
                "cancelled_tasks": cancelled,
                "action_context": "plugin:unload",
            },
        )

    def on_player_disconnected(self, player: Optional[Player], reason: str = "") -> Optional[str]:
        if self._handler is None:
            return None
        return self._handler.on_player_disconnected(player, reason)


__all__ = ["OfflineFurnaces"]
