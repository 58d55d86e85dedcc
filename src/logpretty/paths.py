from __future__ import annotations

from pathlib import Path

CONFIG_FILENAMES = (".logpretty.yaml", ".logpretty.yml")


def find_config_file(start: Path | None = None) -> Path | None:
    """Find the nearest .logpretty.yaml by walking up from `start` (default: cwd).

    This lets a project pin its level labels and layout once for every shell in it.
    """

    cur = (start or Path.cwd()).resolve()
    for p in [cur, *cur.parents]:
        for name in CONFIG_FILENAMES:
            candidate = p / name
            if candidate.is_file():
                return candidate
    return None
