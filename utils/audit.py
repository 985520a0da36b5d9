# Append-only audit trail: one JSON record per administrative event, in <audit dir>/audit.jsonl

import json
import os
import time
import uuid
from datetime import datetime, timezone

from configs.settings import audit_dir


def audit_path() -> str:
    return os.path.join(audit_dir(), "audit.jsonl")


def audit_log(event: str, **payload):
    """
    Write a single audit record (action_create/action_update/trigger/etc.).
    Returns the record dict so callers can reuse it in responses/tests.
    """
    record = {
        "id": str(uuid.uuid4()),
        "event": event,
        "ts": time.time(),
        "iso": datetime.now(timezone.utc).isoformat(),
        **payload,
    }
    os.makedirs(audit_dir(), exist_ok=True)
    with open(audit_path(), "a", encoding="utf-8", errors="surrogateescape") as f:
        f.write(json.dumps(record, ensure_ascii=False) + "\n")
    return record
