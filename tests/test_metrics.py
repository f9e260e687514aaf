from offline_furnaces.core.metrics import MetricsCollector


def test_snapshot_reports_ticks_events_and_timers():
    m = MetricsCollector()
    m.record_tick(0.002, jitter_s=-0.001)
    m.record_tick(0.004)
    m.increment_event("ovens.stopped")
    m.increment_event("ovens.stopped", 2)
    m.increment_event("")
    m.record_timer("sweep.duration_s", 0.5)

    snap = m.snapshot()
    assert snap["game_loop"]["ticks"] == 2
    assert snap["game_loop"]["max_ms"] == 4.0
    assert snap["game_loop"]["jitter"]["count"] == 1
    assert snap["events"] == {"ovens.stopped": 3}
    assert m.event_count("ovens.stopped") == 3
    assert snap["timers"]["sweep.duration_s"]["count"] == 1
    assert snap["process"]["uptime_s"] >= 0.0


def test_stat_reports_only_accumulated_fields():
    m = MetricsCollector()
    m.record_timer("sweep.duration_s", 0.25)
    stat = m.snapshot()["timers"]["sweep.duration_s"]
    assert set(stat) == {"count", "total_ms", "avg_ms", "min_ms", "max_ms", "last_ms"}
    assert stat["min_ms"] == stat["max_ms"] == 250.0
