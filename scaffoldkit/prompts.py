"""Interactive prompts.

Thin wrappers around :mod:`rich.prompt` that return plain values.  Pressing
Ctrl-C or closing stdin at any prompt raises :class:`UserCancelled`, which
the orchestrator turns into a clean exit via :func:`cancel_and_exit`.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import NoReturn

from rich.prompt import Prompt

from .utils import console


class UserCancelled(Exception):
    """Raised when the user cancels an interactive prompt."""


@dataclass
class Option:
    value: str
    label: str


def cancel_and_exit() -> NoReturn:
    console.print("[red]Operation cancelled.[/red]")
    raise SystemExit(0)


def _ask(message: str, **kwargs) -> str:
    try:
        return Prompt.ask(message, console=console, **kwargs)
    except (KeyboardInterrupt, EOFError) as exc:
        raise UserCancelled() from exc


def text(
    message: str,
    default: str | None = None,
    validate: Callable[[str], str | None] | None = None,
) -> str:
    """Ask for free text; *validate* returns an error message or ``None``."""
    while True:
        if default is None:
            value = _ask(message)
        else:
            value = _ask(message, default=default)
        error = validate(value) if validate else None
        if error is None:
            return value
        console.print(f"[red]{error}[/red]")


def _print_options(options: list[Option]) -> None:
    for index, option in enumerate(options, start=1):
        console.print(f"  [cyan]{index}[/cyan]. {option.label}")


def select(message: str, options: list[Option]) -> str:
    """Ask the user to pick exactly one option; returns its value."""
    console.print(message)
    _print_options(options)
    choices = [str(i) for i in range(1, len(options) + 1)]
    answer = _ask("Choose", choices=choices, default="1")
    return options[int(answer) - 1].value


def multiselect(message: str, options: list[Option]) -> list[str]:
    """Ask for any number of options as comma-separated numbers."""
    console.print(message)
    _print_options(options)
    while True:
        answer = _ask("Choose (comma-separated, empty for none)", default="")
        picked = [part.strip() for part in answer.split(",") if part.strip()]
        if all(p.isdigit() and 1 <= int(p) <= len(options) for p in picked):
            return [options[int(p) - 1].value for p in picked]
        console.print("[red]Please enter numbers from the list.[/red]")
