from __future__ import annotations

import dataclasses
import importlib
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

RecordFormatter = Callable[[dict[str, Any]], str]


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class PrettyConfig:
    # Put the level label before the timestamp.
    level_first: bool = False

    # Rewrite only `time` and keep the record as JSON.
    time_transform_only: bool = False

    # Full override of record rendering; wins over every other layout option.
    formatter: RecordFormatter | None = None

    # Merged over the built-in level table.
    custom_levels: dict[int, str] = field(default_factory=dict)

    message_key: str = "msg"
    level_key: str = "level"

    local_time: bool = False

    # None leaves the choice to the caller (the CLI checks for a TTY).
    color: bool | None = None


def _as_bool(v: Any) -> bool | None:
    return v if isinstance(v, bool) else None


def _as_str(v: Any) -> str | None:
    return v if isinstance(v, str) and v else None


def parse_custom_levels(v: Any) -> dict[int, str]:
    """Accept {35: "USERLVL"} mappings or ["35=USERLVL"] lists."""

    if v is None:
        return {}

    items: Iterable[tuple[Any, Any]]
    if isinstance(v, Mapping):
        items = v.items()
    elif isinstance(v, (list, tuple)):
        pairs = []
        for entry in v:
            if not isinstance(entry, str) or "=" not in entry:
                raise ConfigError(f"Custom level must look like NUMBER=LABEL, got {entry!r}")
            num, label = entry.split("=", 1)
            pairs.append((num.strip(), label.strip()))
        items = pairs
    else:
        raise ConfigError(f"custom_levels must be a mapping or a list, got {type(v).__name__}")

    out: dict[int, str] = {}
    for num, label in items:
        try:
            level = int(num)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Custom level number is not an integer: {num!r}") from e
        if not isinstance(label, str) or not label:
            raise ConfigError(f"Custom level {level} needs a non-empty label")
        out[level] = label
    return out


def load_formatter(target: str) -> RecordFormatter:
    """Resolve a `package.module:function` reference to a callable."""

    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigError(f"Formatter must look like module:function, got {target!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigError(f"Cannot import formatter module {module_name!r}: {e}") from e
    fn = getattr(module, attr, None)
    if not callable(fn):
        raise ConfigError(f"Formatter {target!r} is not callable")
    return fn


def read_config_file(path: Path) -> dict[str, Any]:
    try:
        loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return loaded


def load_pretty_config(path: Path | None = None) -> PrettyConfig:
    """Load a .logpretty.yaml file if given; otherwise return defaults."""

    data: dict[str, Any] = {}
    if path is not None:
        data = read_config_file(path)
        logger.debug("loaded config file", path=str(path), keys=sorted(data))

    cfg = PrettyConfig()
    formatter = _as_str(data.get("formatter"))

    return dataclasses.replace(
        cfg,
        level_first=_as_bool(data.get("level_first")) or cfg.level_first,
        time_transform_only=_as_bool(data.get("time_transform_only")) or cfg.time_transform_only,
        formatter=load_formatter(formatter) if formatter else None,
        custom_levels=parse_custom_levels(data.get("custom_levels")),
        message_key=_as_str(data.get("message_key")) or cfg.message_key,
        level_key=_as_str(data.get("level_key")) or cfg.level_key,
        local_time=_as_bool(data.get("local_time")) or cfg.local_time,
        color=_as_bool(data.get("color")),
    )


def apply_overrides(cfg: PrettyConfig, **overrides: Any) -> PrettyConfig:
    """Replace fields with every override that is not None. Custom levels merge."""

    changes = {k: v for k, v in overrides.items() if v is not None}
    if "custom_levels" in changes:
        changes["custom_levels"] = {**cfg.custom_levels, **changes["custom_levels"]}
    return dataclasses.replace(cfg, **changes)
