"""Render decoded log lines as human-readable text.

Three strategies, picked once from the config:

* custom: the caller's function gets the raw record dict and owns the output.
* time-only: the record stays JSON, only `time` becomes an ISO-8601 string.
* layout: `[time] LEVEL (name/pid on hostname): message` plus one indented
  line per extra field, or the stack trace for error records.

Lines that are not JSON objects always pass through untouched.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from .config import PrettyConfig
from .levels import LevelTable
from .records import LogRecord, to_record
from .stream_parser import DecodedValue, ParsedObject, ParsedScalar, ParseFailed
from .styles import Decorator, get_decorator

PROPERTY_INDENT = "    "
COMPACT_SEPARATORS = (",", ":")


def _iso(dt: datetime) -> str:
    text = dt.isoformat(timespec="milliseconds")
    if text.endswith("+00:00"):
        return text[:-6] + "Z"
    return text


def format_time(value: Any, *, local: bool = False) -> str | None:
    """Epoch milliseconds or ISO strings to ISO-8601; None when there is nothing to show."""

    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        try:
            dt = datetime.fromtimestamp(value / 1000, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        if not value:
            return None
        try:
            dt = datetime.fromisoformat(value)
        except ValueError:
            return value
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
    else:
        return None

    return _iso(dt.astimezone() if local else dt.astimezone(UTC))


def format_identity(rec: LogRecord) -> str:
    ident = rec.name or ""
    if rec.pid:
        ident = f"{ident}/{rec.pid}" if ident else rec.pid
    if rec.hostname:
        ident = f"{ident} on {rec.hostname}" if ident else rec.hostname
    return ident


def format_property(key: str, value: Any) -> str:
    return f"{PROPERTY_INDENT}{key}: {json.dumps(value, ensure_ascii=False, separators=COMPACT_SEPARATORS)}"


class Formatter:
    def __init__(self, config: PrettyConfig | None = None, *, decorator: Decorator | None = None):
        self._cfg = config or PrettyConfig()
        self._levels = LevelTable(self._cfg.custom_levels)
        self._decorator = decorator or get_decorator(self._cfg.color)
        self._render: Callable[[ParsedObject], str] = self._select_strategy()

    def _select_strategy(self) -> Callable[[ParsedObject], str]:
        if self._cfg.formatter is not None:
            return self._render_custom
        if self._cfg.time_transform_only:
            return self._render_time_only
        return self._render_layout

    def format(self, decoded: DecodedValue) -> str:
        match decoded:
            case ParseFailed(line=line) | ParsedScalar(line=line):
                return line
            case ParsedObject():
                return self._render(decoded)
            case _:
                raise TypeError(f"Unexpected decoded value: {decoded!r}")

    def _to_record(self, decoded: ParsedObject) -> LogRecord:
        return to_record(decoded.fields, message_key=self._cfg.message_key, level_key=self._cfg.level_key)

    def _render_custom(self, decoded: ParsedObject) -> str:
        assert self._cfg.formatter is not None
        # Errors raised by the caller's function are theirs to see.
        return str(self._cfg.formatter(decoded.fields))

    def _render_time_only(self, decoded: ParsedObject) -> str:
        if not self._to_record(decoded).is_log_record:
            return decoded.line

        fields = dict(decoded.fields)
        when = format_time(fields.get("time"), local=self._cfg.local_time)
        if when is not None:
            fields["time"] = when
        return json.dumps(fields, ensure_ascii=False, separators=COMPACT_SEPARATORS)

    def _render_layout(self, decoded: ParsedObject) -> str:
        rec = self._to_record(decoded)
        if not rec.is_log_record:
            return decoded.line

        lines = [self.header(rec)]
        if rec.is_error:
            lines.extend(rec.stack)
        lines.extend(format_property(k, v) for k, v in rec.extras.items())
        return "\n".join(lines)

    def header(self, rec: LogRecord) -> str:
        when = format_time(rec.time, local=self._cfg.local_time)
        time_seg = f"[{when}]" if when is not None else ""

        level_seg = ""
        if rec.level is not None:
            label = self._levels.label(rec.level)
            level_seg = self._decorator.level(label, label)

        segments = (level_seg, time_seg) if self._cfg.level_first else (time_seg, level_seg)
        header = " ".join(s for s in segments if s)

        identity = format_identity(rec)
        if identity:
            header = f"{header} ({identity})" if header else f"({identity})"

        if rec.message is not None:
            message = self._decorator.message(rec.message)
            header = f"{header}: {message}" if header else message
        return header
