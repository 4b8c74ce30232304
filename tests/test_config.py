"""Unit tests for the Pydantic models in scaffoldkit.config.

Tests cover:
- Argv tools normalization (repeated flags, comma-packed values)
- ExtraTool validation
- PackageManager legacy-yarn detection
- CreateConfig derived paths and placeholders
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from scaffoldkit.config import Argv, CreateConfig, ExtraTool, PackageManager


# ---------------------------------------------------------------------------
# Argv
# ---------------------------------------------------------------------------


class TestArgv:
    @pytest.mark.unit
    def test_defaults(self):
        argv = Argv()
        assert argv.help is False
        assert argv.dir is None
        assert argv.template is None
        assert argv.override is False
        assert argv.tools is None

    @pytest.mark.unit
    def test_comma_packed_tools_are_split(self):
        assert Argv(tools=["eslint,prettier"]).tools == ["eslint", "prettier"]

    @pytest.mark.unit
    def test_comma_packed_equals_repeated(self):
        assert Argv(tools=["eslint,prettier"]).tools == Argv(tools=["eslint", "prettier"]).tools

    @pytest.mark.unit
    def test_single_string_tool(self):
        assert Argv(tools="biome").tools == ["biome"]

    @pytest.mark.unit
    def test_blank_entries_dropped(self):
        assert Argv(tools=["eslint,, ", " prettier "]).tools == ["eslint", "prettier"]

    @pytest.mark.unit
    def test_empty_tools_value(self):
        assert Argv(tools=[""]).tools == []


# ---------------------------------------------------------------------------
# ExtraTool
# ---------------------------------------------------------------------------


class TestExtraTool:
    @pytest.mark.unit
    def test_minimal(self):
        tool = ExtraTool(value="custom", label="Custom")
        assert tool.order is None
        assert tool.action is None
        assert tool.command is None

    @pytest.mark.unit
    def test_action_is_kept(self):
        def action(**kwargs):
            return None

        tool = ExtraTool(value="custom", label="Custom", action=action, order="pre")
        assert tool.action is action
        assert tool.order == "pre"

    @pytest.mark.unit
    def test_invalid_order_rejected(self):
        with pytest.raises(ValidationError):
            ExtraTool(value="custom", label="Custom", order="middle")

    @pytest.mark.unit
    def test_empty_value_rejected(self):
        with pytest.raises(ValidationError):
            ExtraTool(value="", label="Custom")


# ---------------------------------------------------------------------------
# PackageManager
# ---------------------------------------------------------------------------


class TestPackageManager:
    @pytest.mark.unit
    def test_default_is_npm(self):
        assert PackageManager().name == "npm"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "name,version,expected",
        [
            ("yarn", "1.22.22", True),
            ("yarn", "4.1.0", False),
            ("pnpm", "1.0.0", False),
            ("yarn", None, False),
        ],
    )
    def test_is_legacy_yarn(self, name, version, expected):
        assert PackageManager(name=name, version=version).is_legacy_yarn is expected


# ---------------------------------------------------------------------------
# CreateConfig
# ---------------------------------------------------------------------------


class TestCreateConfig:
    def _config(self, tmp_path: Path, target_dir: str) -> CreateConfig:
        return CreateConfig(
            root=tmp_path / "root",
            cwd=tmp_path / "cwd",
            target_dir=target_dir,
            template_name="vanilla",
            package_manager=PackageManager(name="pnpm"),
        )

    @pytest.mark.unit
    def test_relative_dist_folder(self, tmp_path: Path):
        config = self._config(tmp_path, "foo/bar")
        assert config.dist_folder == tmp_path / "cwd" / "foo" / "bar"

    @pytest.mark.unit
    def test_absolute_dist_folder(self, tmp_path: Path):
        target = tmp_path / "elsewhere" / "app"
        config = self._config(tmp_path, str(target))
        assert config.dist_folder == target

    @pytest.mark.unit
    def test_overlay_folders(self, tmp_path: Path):
        config = self._config(tmp_path, "app")
        assert config.template_folder == tmp_path / "root" / "template-vanilla"
        assert config.common_folder == tmp_path / "root" / "template-common"

    @pytest.mark.unit
    def test_placeholders(self, tmp_path: Path):
        assert self._config(tmp_path, "app").placeholders == {"packageManager": "pnpm"}

    @pytest.mark.unit
    def test_empty_target_dir_rejected(self, tmp_path: Path):
        with pytest.raises(ValidationError):
            self._config(tmp_path, "")
