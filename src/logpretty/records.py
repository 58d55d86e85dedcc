from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

# Field names the producer reserves, apart from the level/message keys which are configurable.
RESERVED_FIELDS = ("time", "pid", "hostname", "name", "v")


def _as_str(v: Any) -> str | None:
    if v is None:
        return None
    if isinstance(v, str):
        return v or None
    if isinstance(v, (dict, list)):
        return json.dumps(v, ensure_ascii=False, separators=(",", ":"))
    return str(v)


def extract_identity(obj: dict[str, Any]) -> tuple[str | None, str | None, str | None]:
    """Return (name, pid, hostname) as display strings."""

    pid = obj.get("pid")
    if isinstance(pid, bool) or not isinstance(pid, (int, str)):
        pid = None
    return _as_str(obj.get("name")), _as_str(pid), _as_str(obj.get("hostname"))


def is_error_shape(obj: dict[str, Any], *, message_key: str) -> bool:
    if obj.get("type") == "Error":
        return True
    has_message = isinstance(obj.get("message"), str) or isinstance(obj.get(message_key), str)
    return isinstance(obj.get("stack"), str) and has_message


def extract_stack(obj: dict[str, Any]) -> list[str]:
    stack = obj.get("stack")
    if not isinstance(stack, str) or not stack:
        return []
    return stack.split("\n")


@dataclass(frozen=True)
class LogRecord:
    time: Any = None
    level: Any = None
    pid: str | None = None
    hostname: str | None = None
    name: str | None = None
    message: str | None = None

    is_error: bool = False
    stack: list[str] = field(default_factory=list)

    extras: dict[str, Any] = field(default_factory=dict)
    raw: dict[str, Any] = field(default_factory=dict)

    @property
    def is_log_record(self) -> bool:
        """Objects with neither a level nor a time are somebody else's JSON."""
        return self.level is not None or self.time is not None


def to_record(obj: dict[str, Any], *, message_key: str = "msg", level_key: str = "level") -> LogRecord:
    name, pid, hostname = extract_identity(obj)
    reserved = {*RESERVED_FIELDS, message_key, level_key}

    is_error = is_error_shape(obj, message_key=message_key)
    message = _as_str(obj.get(message_key))
    if is_error:
        # The trace replaces `stack`; `type` and `message` are only consumed when they describe the error.
        if isinstance(obj.get("stack"), str):
            reserved.add("stack")
        if obj.get("type") == "Error":
            reserved.add("type")
        error_message = obj.get("message")
        if isinstance(error_message, str) and error_message:
            message = error_message
            reserved.add("message")
    elif message_key not in obj and "message" in obj:
        # `message` stands in for the message key only when the latter is absent.
        message = _as_str(obj.get("message"))
        reserved.add("message")

    extras = {k: v for k, v in obj.items() if k not in reserved}

    return LogRecord(
        time=obj.get("time"),
        level=obj.get(level_key),
        pid=pid,
        hostname=hostname,
        name=name,
        message=message,
        is_error=is_error,
        stack=extract_stack(obj) if is_error else [],
        extras=extras,
        raw=obj,
    )
