from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict

DEFAULT_METHOD = "POST"

_FRACTION = re.compile(r"\.(\d{6})\d+")


@dataclass(frozen=True)
class Action:
    id: str
    name: str
    url: str
    method: str = DEFAULT_METHOD
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""

    def copy(self) -> "Action":
        return Action(self.id, self.name, self.url, self.method, dict(self.headers), self.body)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "url": self.url,
            "method": self.method,
            "headers": dict(self.headers),
            "body": self.body,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Action":
        headers = data.get("headers") or {}
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            url=str(data.get("url") or ""),
            method=str(data.get("method") or DEFAULT_METHOD),
            headers={str(k): str(v) for k, v in headers.items()},
            body=str(data.get("body") or ""),
        )


@dataclass(frozen=True)
class LogEntry:
    timestamp: datetime
    action_id: str
    success: bool
    response: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": format_timestamp(self.timestamp),
            "action_id": self.action_id,
            "success": self.success,
            "response": self.response,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LogEntry":
        success = data["success"]
        if not isinstance(success, bool):
            raise TypeError(f"success must be a bool, got {success!r}")
        return cls(
            timestamp=parse_timestamp(data["timestamp"]),
            action_id=str(data["action_id"]),
            success=success,
            response=str(data.get("response") or ""),
        )


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(ts: datetime) -> str:
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.isoformat()


def parse_timestamp(raw: str) -> datetime:
    """
    Parse an RFC 3339 timestamp.
    Accepts a trailing 'Z' and nanosecond fractions (truncated to microseconds).
    """
    text = str(raw).strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(r".\1", text)
    ts = datetime.fromisoformat(text)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts
