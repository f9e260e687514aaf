from __future__ import annotations

import logging
from typing import Dict, Generator, List

from offline_furnaces.core.metrics import metrics

logger = logging.getLogger(__name__)

# A deferred task is a generator that yields whenever it is willing to give
# the rest of the tick back to the game loop.
Task = Generator[None, None, None]


class TaskRegistry:
    """Named, cancellable deferred tasks driven one step per world tick.

    At most one task is registered per name: enqueuing under a name that is
    already in use cancels the previous task first. Finished, failed and
    cancelled tasks leave the registry immediately, so ``len(registry)`` is
    always the number of tasks in flight.

    Not thread-safe; only the game loop thread may touch a registry.
    """

    def __init__(self) -> None:
        self._tasks: Dict[str, Task] = {}

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, name: object) -> bool:
        return name in self._tasks

    def names(self) -> List[str]:
        return list(self._tasks)

    def enqueue(self, name: str, work: Task) -> None:
        """Cancel any task registered as ``name``, then register and start ``work``.

        Starting runs ``work`` up to its first yield.
        """
        self.cancel(name)
        self._tasks[name] = work
        logger.debug("task_enqueued", extra={"task_name": name})
        self._step(name, work)

    def cancel(self, name: str) -> bool:
        """Cancel the task registered as ``name``. Absent names are ignored."""
        work = self._tasks.pop(name, None)
        if work is None:
            return False
        # Raises GeneratorExit at the suspended yield; nothing after it runs
        work.close()
        metrics.increment_event("tasks.cancelled")
        logger.debug("task_cancelled", extra={"task_name": name})
        return True

    def cancel_all(self) -> int:
        cancelled = 0
        for name in list(self._tasks):
            if self.cancel(name):
                cancelled += 1
        return cancelled

    def tick(self) -> None:
        """Advance every registered task by one step."""
        for name, work in list(self._tasks.items()):
            # An earlier task this tick may have replaced or cancelled this one
            if self._tasks.get(name) is not work:
                continue
            self._step(name, work)

    def _step(self, name: str, work: Task) -> None:
        try:
            next(work)
        except StopIteration:
            self._forget(name, work)
            metrics.increment_event("tasks.completed")
            logger.debug("task_completed", extra={"task_name": name})
        except Exception:
            self._forget(name, work)
            metrics.increment_event("tasks.failed")
            logger.warning(
                "task_failed",
                extra={"task_name": name, "action_context": "tasks:step"},
                exc_info=True,
            )

    def _forget(self, name: str, work: Task) -> None:
        if self._tasks.get(name) is work:
            del self._tasks[name]


__all__ = ["Task", "TaskRegistry"]
