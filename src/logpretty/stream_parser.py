from __future__ import annotations

import codecs
import json
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ParsedObject:
    line: str
    fields: dict[str, Any]


@dataclass(frozen=True)
class ParsedScalar:
    line: str
    value: Any
    text: str


@dataclass(frozen=True)
class ParseFailed:
    line: str
    error: str


DecodedValue = ParsedObject | ParsedScalar | ParseFailed


def _reject_constant(name: str) -> Any:
    # json.loads accepts NaN/Infinity; strict JSON does not.
    raise ValueError(f"invalid JSON constant: {name}")


def decode_line(line: str) -> DecodedValue:
    """Parse one line as JSON and classify the outcome. Never raises."""

    try:
        obj = json.loads(line, parse_constant=_reject_constant)
        if isinstance(obj, dict):
            return ParsedObject(line=line, fields=obj)
        return ParsedScalar(line=line, value=obj, text=json.dumps(obj, ensure_ascii=False, separators=(",", ":")))
    except (ValueError, RecursionError) as e:
        # JSONDecodeError is a ValueError subclass.
        return ParseFailed(line=line, error=f"json_decode_error: {e}")


class LineAssembler:
    """Reassemble newline-terminated lines from arbitrarily split chunks."""

    def __init__(self) -> None:
        self._pending = ""
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    @property
    def pending(self) -> str:
        return self._pending

    def feed(self, chunk: str | bytes) -> list[str]:
        if isinstance(chunk, (bytes, bytearray)):
            chunk = self._decoder.decode(bytes(chunk))
        if not chunk:
            return []

        pieces = (self._pending + chunk).split("\n")
        self._pending = pieces.pop()
        return [_strip_cr(p) for p in pieces]

    def flush(self) -> str | None:
        tail = self._pending + self._decoder.decode(b"", final=True)
        self._pending = ""
        if not tail:
            return None
        return _strip_cr(tail)


def _strip_cr(line: str) -> str:
    return line[:-1] if line.endswith("\r") else line
