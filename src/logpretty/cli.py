from __future__ import annotations

import sys
from pathlib import Path

import structlog
import typer

from .config import ConfigError, PrettyConfig, apply_overrides, load_formatter, load_pretty_config, parse_custom_levels
from .logging import configure_logging
from .paths import find_config_file
from .prettifier import prettify_stream

logger = structlog.get_logger(__name__)

app = typer.Typer(add_completion=False, help="logpretty: turn newline-delimited JSON logs into readable text")


def resolve_config(
    *,
    config_path: Path | None,
    level_first: bool,
    time_only: bool,
    message_key: str | None,
    level_key: str | None,
    custom_levels: list[str] | None,
    formatter: str | None,
    local_time: bool,
    color: bool | None,
) -> PrettyConfig:
    path = config_path if config_path is not None else find_config_file()
    cfg = load_pretty_config(path)

    return apply_overrides(
        cfg,
        # Flags only ever switch a file setting on.
        level_first=True if level_first else None,
        time_transform_only=True if time_only else None,
        local_time=True if local_time else None,
        message_key=message_key,
        level_key=level_key,
        custom_levels=parse_custom_levels(custom_levels) if custom_levels else None,
        formatter=load_formatter(formatter) if formatter else None,
        color=color,
    )


def _stdout_is_tty() -> bool:
    return sys.stdout.isatty()


@app.command()
def pretty(
    files: list[Path] | None = typer.Argument(
        None,
        exists=True,
        dir_okay=False,
        readable=True,
        help="Log files to prettify, in order (defaults to stdin)",
    ),
    level_first: bool = typer.Option(False, "--level-first", help="Print the level label before the timestamp"),
    time_only: bool = typer.Option(
        False,
        "--time-only",
        help="Only rewrite `time` as an ISO string and keep each record as JSON",
    ),
    message_key: str | None = typer.Option(None, "--message-key", help="Field holding the message (default: msg)"),
    level_key: str | None = typer.Option(None, "--level-key", help="Field holding the numeric level (default: level)"),
    custom_level: list[str] | None = typer.Option(
        None,
        "--custom-level",
        "-l",
        help="Extra level label as NUMBER=LABEL (repeatable)",
    ),
    formatter: str | None = typer.Option(
        None,
        "--formatter",
        help="module:function taking the record dict and returning the line to print",
    ),
    local_time: bool = typer.Option(False, "--local-time", help="Show times in the local timezone instead of UTC"),
    color: bool | None = typer.Option(None, "--color/--no-color", help="Colorize output (default: when stdout is a TTY)"),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        exists=True,
        dir_okay=False,
        help="Config file (defaults to the nearest .logpretty.yaml)",
    ),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Diagnostics on stderr (-vv for debug)"),
) -> None:
    configure_logging(verbosity=verbose)

    try:
        cfg = resolve_config(
            config_path=config,
            level_first=level_first,
            time_only=time_only,
            message_key=message_key,
            level_key=level_key,
            custom_levels=custom_level,
            formatter=formatter,
            local_time=local_time,
            color=color,
        )
    except ConfigError as e:
        typer.secho(f"Invalid configuration: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2) from e

    if cfg.color is None:
        cfg = apply_overrides(cfg, color=_stdout_is_tty())

    sink = sys.stdout
    try:
        if not files:
            prettify_stream(typer.get_binary_stream("stdin"), sink, cfg)
            return
        for path in files:
            logger.info("prettifying file", path=str(path))
            with path.open("rb") as f:
                prettify_stream(f, sink, cfg)
    except (BrokenPipeError, KeyboardInterrupt):
        # Downstream pager closed or the user hit Ctrl-C.
        raise typer.Exit(code=0) from None


def main() -> None:
    # Entry point for console script.
    app()


if __name__ == "__main__":
    main()
