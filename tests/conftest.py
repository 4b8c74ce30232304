"""Shared pytest fixtures for the Scaffoldkit test suite.

Provides reusable fixtures for:
- The on-disk template fixtures under ``tests/fixtures/``
- Temporary overlay trees built on the fly
- A deterministic package-manager environment
- A helper that runs ``create`` without touching the real argv/cwd/env
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from scaffoldkit.creator import create


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def agents_fixtures() -> Path:
    """Template root with ``template-common``, ``template-vanilla`` and ``template-react-ts``."""
    root = FIXTURES_DIR / "agents-md"
    assert root.is_dir(), f"Fixture root not found at {root}"
    return root


@pytest.fixture
def dist_dir(tmp_path: Path) -> Path:
    """Destination for generated projects (not created yet)."""
    return tmp_path / "output" / "my-app"


@pytest.fixture
def write_tree():
    """Write a ``{relative path: content}`` mapping under a root directory.

    Dict values are serialised as JSON.
    """

    def _write(root: Path, files: dict[str, Any]) -> Path:
        for rel, content in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, dict):
                content = json.dumps(content, indent=2) + "\n"
            path.write_text(content, encoding="utf-8")
        return root

    return _write


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------

@pytest.fixture
def pnpm_env() -> dict[str, str]:
    return {"npm_config_user_agent": "pnpm/10.7.0 npm/? node/v22.14.0 linux x64"}


@pytest.fixture
def run_create(agents_fixtures: Path, dist_dir: Path, tmp_path: Path):
    """Run ``create`` against the fixture templates with explicit argv/cwd/env."""

    async def _run(*extra_argv: str, **kwargs: Any) -> Path | None:
        options: dict[str, Any] = {
            "name": "test",
            "root": agents_fixtures,
            "templates": ["vanilla", "react-ts"],
            "get_template_name": lambda argv: argv.template or "vanilla",
            "argv": ["--dir", str(dist_dir), "--template", "vanilla", *extra_argv],
            "cwd": tmp_path,
            "env": {},
        }
        options.update(kwargs)
        return await create(**options)

    return _run
