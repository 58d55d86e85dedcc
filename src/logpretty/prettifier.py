from __future__ import annotations

from collections.abc import Iterable
from typing import IO

import structlog

from .config import PrettyConfig
from .formatter import Formatter
from .stream_parser import LineAssembler, decode_line
from .styles import Decorator

logger = structlog.get_logger(__name__)


def _printable(block: str) -> str:
    # JSON may decode to lone surrogates (`"\ud800"`), which no sink can encode.
    return block.encode("utf-8", "backslashreplace").decode("utf-8")


class Prettifier:
    """Chunks in, formatted blocks out, one block per input line and in order."""

    def __init__(self, config: PrettyConfig | None = None, *, decorator: Decorator | None = None):
        self._assembler = LineAssembler()
        self._formatter = Formatter(config, decorator=decorator)
        self._lines_seen = 0

    @property
    def lines_seen(self) -> int:
        return self._lines_seen

    def format_line(self, line: str) -> str:
        self._lines_seen += 1
        return self._formatter.format(decode_line(line))

    def write(self, chunk: str | bytes) -> list[str]:
        return [self.format_line(line) for line in self._assembler.feed(chunk)]

    def end(self) -> list[str]:
        tail = self._assembler.flush()
        if tail is None:
            return []
        return [self.format_line(tail)]


def prettify_stream(
    source: Iterable[str] | Iterable[bytes],
    sink: IO[str],
    config: PrettyConfig | None = None,
    *,
    decorator: Decorator | None = None,
) -> int:
    """Pump `source` through a Prettifier into `sink`; returns the number of lines handled."""

    prettifier = Prettifier(config, decorator=decorator)
    for chunk in source:
        for block in prettifier.write(chunk):
            sink.write(_printable(block))
            sink.write("\n")
        # Keep interactive tails (`tail -f | logpretty`) responsive.
        sink.flush()

    for block in prettifier.end():
        sink.write(_printable(block))
        sink.write("\n")
    sink.flush()

    logger.debug("input drained", lines=prettifier.lines_seen)
    return prettifier.lines_seen
