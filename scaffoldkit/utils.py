"""Shared utility functions for Scaffoldkit.

Provides project-name normalization, package-manager detection, JSON I/O,
directory checks, async shell execution and the Rich console helpers used
to report progress to the user.
"""

from __future__ import annotations

import asyncio
import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.panel import Panel

from .config import DEFAULT_PACKAGE_MANAGER, PackageManager, ProjectName

console = Console()

USER_AGENT_ENV = "npm_config_user_agent"

# ---------------------------------------------------------------------------
# Project name helpers
# ---------------------------------------------------------------------------


def format_project_name(raw: str) -> ProjectName:
    """Derive the target directory and package name from a project path.

    Examples::

        format_project_name("foo")               -> foo, "foo"
        format_project_name("foo/bar/")          -> foo/bar, "bar"
        format_project_name("@scope/foo")        -> @scope/foo, "@scope/foo"
        format_project_name("/root/path/to/foo") -> /root/path/to/foo, "foo"
    """
    formatted = raw.strip().rstrip("/")
    if formatted.startswith("@"):
        package_name = formatted
    else:
        package_name = formatted.rsplit("/", 1)[-1]
    return ProjectName(target_dir=formatted, package_name=package_name)


def package_manager_from_user_agent(user_agent: str | None) -> PackageManager | None:
    """Parse ``pnpm/10.7.0 npm/? node/v22.0.0`` into a ``PackageManager``."""
    if not user_agent:
        return None
    spec = user_agent.split(" ")[0]
    name, _, version = spec.partition("/")
    return PackageManager(name=name, version=version or None)


def detect_package_manager(env: Mapping[str, str] | None = None) -> PackageManager:
    """Return the invoking package manager, defaulting to npm."""
    if env is None:
        env = os.environ
    detected = package_manager_from_user_agent(env.get(USER_AGENT_ENV))
    return detected or PackageManager(name=DEFAULT_PACKAGE_MANAGER)


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


def load_json(path: str | Path) -> dict[str, Any]:
    """Load and parse a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
    """
    return json.loads(Path(path).read_text(encoding="utf-8"))


def dump_json(data: Any) -> str:
    """Serialise *data* with 2-space indentation and a trailing newline."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def save_json(data: Any, path: str | Path) -> None:
    Path(path).write_text(dump_json(data), encoding="utf-8")


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def is_empty_dir(path: str | Path) -> bool:
    """Return ``True`` if *path* holds nothing but (optionally) a ``.git`` dir."""
    entries = [entry.name for entry in Path(path).iterdir()]
    return not entries or entries == [".git"]


# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(cmd: str, cwd: str | Path | None = None) -> int:
    """Run a shell command with inherited standard streams.

    Waits until the child exits and returns its exit status.
    """
    process = await asyncio.create_subprocess_shell(
        cmd,
        cwd=str(cwd) if cwd else None,
    )
    await process.wait()
    return process.returncode or 0


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def upper_first(value: str) -> str:
    return value[:1].upper() + value[1:]


def print_greeting(name: str) -> None:
    """Print the banner shown at the start of every run."""
    console.print()
    console.print(f"[bold cyan]◆  Create {upper_first(name)} Project[/bold cyan]")


def print_note(message: str, title: str) -> None:
    """Print *message* inside a titled panel."""
    console.print(Panel(message, title=title, title_align="left", expand=False))


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")

