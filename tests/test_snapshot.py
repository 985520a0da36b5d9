import json
import os
import stat
from datetime import datetime, timezone

import pytest

from actions.catalog import ActionRegistry
from actions.history import ExecutionLog
from storage.snapshot import SnapshotStore


def _store(path):
    reg, log = ActionRegistry(), ExecutionLog()
    return reg, log, SnapshotStore(str(path), reg, log)


def test_save_then_load_round_trip(tmp_path):
    path = tmp_path / "data.json"
    reg, log, store = _store(path)
    a = reg.create("A", "http://e.com", method="GET", headers={"K": "V"}, body="x")
    reg.create("B", "http://f.com")
    log.append(a.id, True, "Status: 200 OK")
    log.append("gone", False, "Request failed: nope")
    assert store.save() is True

    reg2, log2, store2 = _store(path)
    assert store2.load() is True
    assert reg2.snapshot() == reg.snapshot()
    assert log2.list() == log.list()


def test_file_shape(tmp_path):
    path = tmp_path / "data.json"
    reg, log, store = _store(path)
    a = reg.create("A", "http://e.com")
    log.append(a.id, True, "Status: 204 No Content")
    store.save()
    data = json.loads(path.read_text())
    assert set(data) == {"actions", "logs"}
    assert set(data["actions"][a.id]) == {"id", "name", "url", "method", "headers", "body"}
    entry = data["logs"][0]
    assert set(entry) == {"timestamp", "action_id", "success", "response"}
    assert datetime.fromisoformat(entry["timestamp"]).tzinfo is not None


def test_missing_file_is_first_run(tmp_path):
    reg, log, store = _store(tmp_path / "absent.json")
    reg.create("Keep", "http://e.com")
    assert store.load() is False
    assert len(reg) == 1


def test_corrupt_file_is_ignored(tmp_path, caplog):
    path = tmp_path / "data.json"
    path.write_text("{not json")
    reg, log, store = _store(path)
    reg.create("Keep", "http://e.com")
    assert store.load() is False
    assert [a.name for a in reg.list()] == ["Keep"]
    assert "Error parsing data" in caplog.text


def test_wrong_shape_leaves_state_untouched(tmp_path):
    path = tmp_path / "data.json"
    path.write_text(json.dumps({"actions": {"x": {"name": "no id"}}, "logs": []}))
    reg, log, store = _store(path)
    log.append("a", True, "ok")
    assert store.load() is False
    assert len(log) == 1


def test_loads_snapshot_with_nulls_and_nanoseconds(tmp_path):
    path = tmp_path / "data.json"
    path.write_text(json.dumps({
        "actions": {"00ff00ff00ff00ff": {
            "id": "00ff00ff00ff00ff", "name": "Old", "url": "http://e.com",
            "method": "POST", "headers": None, "body": ""}},
        "logs": [{"timestamp": "2025-03-04T05:06:07.123456789Z",
                  "action_id": "00ff00ff00ff00ff", "success": True,
                  "response": "Status: 200 OK"}],
    }))
    reg, log, store = _store(path)
    assert store.load() is True
    assert reg.get("00ff00ff00ff00ff").headers == {}
    ts = log.list()[0].timestamp
    assert ts == datetime(2025, 3, 4, 5, 6, 7, 123456, tzinfo=timezone.utc)


def test_save_failure_keeps_previous_file(tmp_path, caplog):
    path = tmp_path / "data.json"
    reg, log, store = _store(path)
    reg.create("A", "http://e.com")
    store.save()
    before = path.read_text()

    store.path = str(tmp_path / "missing-dir" / "data.json")
    reg.create("B", "http://e.com")
    assert store.save() is False
    assert "Error saving data" in caplog.text
    assert path.read_text() == before


def test_save_leaves_no_temp_files(tmp_path):
    reg, log, store = _store(tmp_path / "data.json")
    reg.create("A", "http://e.com")
    store.save()
    store.save()
    assert sorted(p.name for p in tmp_path.iterdir()) == ["data.json"]


def test_odd_text_survives_save_and_load(tmp_path):
    path = tmp_path / "data.json"
    reg, log, store = _store(path)
    a = reg.create("Ünï", "http://e.com", headers={"X-Note": "日本"}, body="\udcff raw ✓")
    log.append(a.id, False, "Request failed: \udcfe")
    assert store.save() is True

    reg2, log2, store2 = _store(path)
    assert store2.load() is True
    assert reg2.get(a.id) == a
    assert log2.list() == log.list()


def test_unencodable_payload_is_logged_not_raised(tmp_path, monkeypatch, caplog):
    import storage.snapshot as snapshot

    path = tmp_path / "data.json"
    reg, log, store = _store(path)
    reg.create("A", "http://e.com")
    store.save()
    before = path.read_text()

    def refuse(path, payload):
        raise UnicodeEncodeError("utf-8", payload, 0, 1, "surrogates not allowed")

    monkeypatch.setattr(snapshot, "_atomic_write", refuse)
    reg.create("B", "http://e.com")
    assert store.save() is False
    assert "Error saving data" in caplog.text
    assert path.read_text() == before


@pytest.mark.skipif(os.name == "nt", reason="POSIX file modes")
def test_snapshot_is_world_readable(tmp_path):
    path = tmp_path / "data.json"
    reg, log, store = _store(path)
    reg.create("A", "http://e.com")
    store.save()
    assert stat.S_IMODE(path.stat().st_mode) == 0o644
