from datetime import datetime, timedelta, timezone

from actions.history import ExecutionLog


def test_append_keeps_order_and_timestamps():
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    ticks = iter(start + timedelta(seconds=i) for i in range(10))
    log = ExecutionLog(clock=lambda: next(ticks))
    log.append("a", True, "Status: 200 OK")
    log.append("b", False, "Request failed: boom")
    entries = log.list()
    assert [e.action_id for e in entries] == ["a", "b"]
    assert [e.success for e in entries] == [True, False]
    assert entries[0].timestamp < entries[1].timestamp


def test_list_is_a_snapshot():
    log = ExecutionLog()
    log.append("a", True, "ok")
    seen = log.list()
    log.append("b", True, "ok")
    assert len(seen) == 1 and len(log) == 2
