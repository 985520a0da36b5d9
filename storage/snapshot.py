"""
JSON snapshot of the registry and the execution log.

File shape:
    {"actions": {"<id>": {...action...}, ...}, "logs": [{...entry...}, ...]}

load() and save() never raise: failures are logged and the previous state
(in memory for load, on disk for save) is left as it was.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from typing import Any, Dict, List, Tuple

from actions.catalog import ActionRegistry
from actions.history import ExecutionLog
from actions.models import Action, LogEntry

logger = logging.getLogger(__name__)

SNAPSHOT_MODE = 0o644


class SnapshotStore:
    def __init__(self, path: str, registry: ActionRegistry, history: ExecutionLog):
        self.path = path
        self.registry = registry
        self.history = history
        self._lock = threading.Lock()

    def load(self) -> bool:
        """Hydrate registry and log from disk. Returns True if a snapshot was applied."""
        with self._lock:
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    raw = f.read()
            except FileNotFoundError:
                logger.debug("No snapshot at %s, starting empty", self.path)
                return False
            except OSError as e:
                logger.error("Error loading data from %s: %s", self.path, e)
                return False

            try:
                actions, entries = decode_snapshot(raw)
            except (ValueError, TypeError, KeyError, AttributeError) as e:
                logger.error("Error parsing data in %s: %s", self.path, e)
                return False

            self.registry.replace_all(actions)
            self.history.replace_all(entries)
            logger.info("Loaded %d action(s) and %d log entr(ies) from %s",
                        len(actions), len(entries), self.path)
            return True

    def save(self) -> bool:
        """Write the current state over the snapshot file. Returns False on failure."""
        with self._lock:
            try:
                payload = encode_snapshot(self.registry.snapshot(), self.history.list())
            except (TypeError, ValueError) as e:
                logger.error("Error marshaling data: %s", e)
                return False
            try:
                _atomic_write(self.path, payload)
            except (OSError, ValueError) as e:
                logger.error("Error saving data to %s: %s", self.path, e)
                return False
            return True


def encode_snapshot(actions: Dict[str, Action], entries: List[LogEntry]) -> str:
    data = {
        "actions": {k: a.to_dict() for k, a in actions.items()},
        "logs": [e.to_dict() for e in entries],
    }
    # ASCII escapes keep lone surrogates (undecodable argv bytes) round-trippable
    return json.dumps(data, indent=2, ensure_ascii=True)


def decode_snapshot(raw: str) -> Tuple[Dict[str, Action], List[LogEntry]]:
    data: Any = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("snapshot must be a JSON object")
    raw_actions = data.get("actions") or {}
    raw_logs = data.get("logs") or []
    if not isinstance(raw_actions, dict):
        raise ValueError("'actions' must be an object")
    if not isinstance(raw_logs, list):
        raise ValueError("'logs' must be a list")

    actions = {str(k): Action.from_dict(v) for k, v in raw_actions.items()}
    entries = [LogEntry.from_dict(e) for e in raw_logs]
    return actions, entries


def _atomic_write(path: str, payload: str) -> None:
    directory = os.path.dirname(os.path.abspath(path))
    fd, tmp_path = tempfile.mkstemp(prefix=".snapshot-", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_path, SNAPSHOT_MODE)
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise
