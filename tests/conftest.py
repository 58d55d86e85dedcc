from __future__ import annotations

import json
import os
import socket
import sys
from pathlib import Path

import pytest


def pytest_configure() -> None:
    # Ensure `import logpretty` works when running tests without installing the package.
    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    if src_dir.exists() and str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


@pytest.fixture
def make_line():
    """Build one NDJSON record the way a pino-style producer writes it."""

    def _make(msg: str | None = "hello world", *, level: int = 30, **fields) -> str:
        record = {
            "level": level,
            "time": 1488362400000,
            "pid": os.getpid(),
            "hostname": socket.gethostname(),
        }
        if msg is not None:
            record["msg"] = msg
        record.update(fields)
        record["v"] = 1
        return json.dumps(record)

    return _make
