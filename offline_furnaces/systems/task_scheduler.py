from __future__ import annotations

import esper

from offline_furnaces.core.tasks import TaskRegistry


class TaskSchedulerSystem(esper.Processor):
    """ECS processor that advances every deferred task one step per tick."""

    def __init__(self, registry: TaskRegistry) -> None:
        super().__init__()
        self.registry = registry

    def process(self) -> None:
        """Run one tick of the deferred task scheduler."""
        self.registry.tick()
