from __future__ import annotations

from typing import Protocol

import typer

LEVEL_STYLES: dict[str, dict[str, object]] = {
    "TRACE": {"fg": typer.colors.BRIGHT_BLACK},
    "DEBUG": {"fg": typer.colors.BLUE},
    "INFO": {"fg": typer.colors.GREEN},
    "WARN": {"fg": typer.colors.YELLOW},
    "ERROR": {"fg": typer.colors.RED},
    "FATAL": {"fg": typer.colors.WHITE, "bg": typer.colors.RED},
}
DEFAULT_LEVEL_STYLE: dict[str, object] = {"fg": typer.colors.WHITE}


class Decorator(Protocol):
    def level(self, text: str, label: str) -> str: ...

    def message(self, text: str) -> str: ...


class PlainDecorator:
    def level(self, text: str, label: str) -> str:
        return text

    def message(self, text: str) -> str:
        return text


class AnsiDecorator:
    """ANSI styling via typer (click) styles."""

    def level(self, text: str, label: str) -> str:
        return typer.style(text, **LEVEL_STYLES.get(label, DEFAULT_LEVEL_STYLE))

    def message(self, text: str) -> str:
        return typer.style(text, fg=typer.colors.CYAN)


def get_decorator(color: bool | None) -> Decorator:
    return AnsiDecorator() if color else PlainDecorator()
