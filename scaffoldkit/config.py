"""Scaffoldkit configuration.

Typed models for everything the composition engine consumes: the parsed
command-line options, externally supplied tools, the detected package
manager, and the fully resolved configuration of a single ``create`` run.
All models use Pydantic v2 so inputs are validated at construction time.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator


BUILTIN_TOOLS: tuple[str, ...] = ("biome", "eslint", "prettier")

ESLINT_TEMPLATES: tuple[str, ...] = (
    "vanilla-js",
    "vanilla-ts",
    "react-js",
    "react-ts",
    "vue-js",
    "vue-ts",
    "svelte-js",
    "svelte-ts",
)

DEFAULT_PACKAGE_MANAGER = "npm"


class Argv(BaseModel):
    """Options parsed from the command line."""

    help: bool = False
    dir: str | None = None
    template: str | None = None
    override: bool = False
    tools: list[str] | None = None

    @field_validator("tools", mode="before")
    @classmethod
    def _split_tools(cls, value: Any) -> list[str] | None:
        if value is None:
            return None
        if isinstance(value, str):
            value = [value]
        tools: list[str] = []
        for item in value:
            tools.extend(part.strip() for part in str(item).split(",") if part.strip())
        return tools


class ExtraTool(BaseModel):
    """A tool contributed by the caller in addition to the built-in ones.

    ``action`` is called with ``template_name``, ``dist_folder`` and
    ``add_agents_md_search_dirs`` keyword arguments and may be a coroutine
    function.  ``command`` is a shell command run inside the new project.
    """

    value: str = Field(..., min_length=1, description="Unique tool identifier")
    label: str = Field(..., description="Display text in interactive listings")
    order: Literal["pre", "post"] | None = Field(
        default=None, description="Placement relative to the built-in tools"
    )
    action: Callable[..., Any] | None = None
    command: str | None = None


class PackageManager(BaseModel):
    """The package manager that invoked the tool (``name/version``)."""

    name: str = DEFAULT_PACKAGE_MANAGER
    version: str | None = None

    @property
    def is_legacy_yarn(self) -> bool:
        return self.name == "yarn" and (self.version or "").startswith("1.")


class ProjectName(BaseModel):
    """Target directory and package name derived from a raw project path."""

    target_dir: str
    package_name: str


class CreateConfig(BaseModel):
    """Resolved configuration for one ``create`` invocation."""

    root: Path
    cwd: Path
    target_dir: str = Field(..., min_length=1)
    package_name: str | None = None
    template_name: str
    tools: list[str] = Field(default_factory=list)
    version: str | dict[str, str] | None = None
    override: bool = False
    skip_files: list[str] = Field(default_factory=list)
    package_manager: PackageManager = Field(default_factory=PackageManager)

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def dist_folder(self) -> Path:
        """Absolute destination directory of the new project."""
        target = Path(self.target_dir)
        return target if target.is_absolute() else self.cwd / target

    @property
    def template_folder(self) -> Path:
        """Overlay directory of the selected template."""
        return self.root / f"template-{self.template_name}"

    @property
    def common_folder(self) -> Path:
        """Overlay directory shared by every template."""
        return self.root / "template-common"

    @property
    def placeholders(self) -> dict[str, str]:
        """Values substituted into ``{{ key }}`` tokens of Markdown files."""
        return {"packageManager": self.package_manager.name}
