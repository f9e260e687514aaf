from .task_scheduler import TaskSchedulerSystem
from .oven_shutdown import ShutdownHandler, turn_off_ovens

__all__ = [
    "TaskSchedulerSystem",
    "ShutdownHandler",
    "turn_off_ovens",
]
