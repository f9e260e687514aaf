from offline_furnaces.core.metrics import metrics
from offline_furnaces.core.tasks import TaskRegistry


def counting_task(log, label, steps):
    for i in range(steps):
        log.append((label, i))
        yield


def test_enqueue_starts_task_up_to_first_yield():
    registry = TaskRegistry()
    log = []
    registry.enqueue("a", counting_task(log, "a", 3))
    assert log == [("a", 0)]
    assert "a" in registry
    assert len(registry) == 1


def test_tick_advances_each_task_one_step_and_completed_tasks_deregister():
    registry = TaskRegistry()
    log = []
    registry.enqueue("a", counting_task(log, "a", 3))
    registry.enqueue("b", counting_task(log, "b", 1))

    registry.tick()
    # 'b' was exhausted on this step
    assert registry.names() == ["a"]
    assert log == [("a", 0), ("b", 0), ("a", 1)]

    registry.tick()
    registry.tick()
    assert len(registry) == 0
    assert [entry for entry in log if entry[0] == "a"] == [("a", 0), ("a", 1), ("a", 2)]


def test_enqueue_same_name_cancels_previous_task_first():
    registry = TaskRegistry()
    log = []
    registry.enqueue("sweep", counting_task(log, "first", 5))
    registry.tick()
    registry.enqueue("sweep", counting_task(log, "second", 2))
    assert len(registry) == 1

    while len(registry):
        registry.tick()

    assert log == [("first", 0), ("first", 1), ("second", 0), ("second", 1)]


def test_cancel_closes_generator_at_its_yield_point():
    registry = TaskRegistry()
    events = []

    def task():
        try:
            events.append("step1")
            yield
            events.append("step2")
            yield
        finally:
            events.append("closed")

    registry.enqueue("t", task())
    assert registry.cancel("t") is True
    assert events == ["step1", "closed"]
    assert len(registry) == 0


def test_cancel_absent_name_is_noop():
    registry = TaskRegistry()
    assert registry.cancel("missing") is False
    registry.tick()
    assert len(registry) == 0


def test_cancel_all_empties_registry():
    registry = TaskRegistry()
    log = []
    for name in ("a", "b", "c"):
        registry.enqueue(name, counting_task(log, name, 10))
    before = metrics.event_count("tasks.cancelled")

    assert registry.cancel_all() == 3
    assert len(registry) == 0
    assert metrics.event_count("tasks.cancelled") - before == 3

    registry.tick()
    assert len(log) == 3


def test_failing_task_is_dropped_without_affecting_others():
    registry = TaskRegistry()
    log = []

    def failing():
        yield
        raise RuntimeError("boom")

    before = metrics.event_count("tasks.failed")
    registry.enqueue("bad", failing())
    registry.enqueue("good", counting_task(log, "good", 3))

    registry.tick()
    assert "bad" not in registry
    assert "good" in registry
    assert metrics.event_count("tasks.failed") - before == 1

    registry.tick()
    assert log == [("good", 0), ("good", 1), ("good", 2)]


def test_task_finishing_on_first_step_never_stays_registered():
    registry = TaskRegistry()

    def empty():
        return
        yield

    registry.enqueue("empty", empty())
    assert len(registry) == 0
