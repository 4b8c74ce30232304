"""Scaffoldkit project creation orchestrator.

Drives a single ``create`` run:

1. RESOLVE   -- parse options, ask for anything missing, validate inputs.
2. GUARD     -- confirm before writing into a non-empty directory.
3. BASE      -- copy ``template-common``.
4. TEMPLATE  -- copy ``template-<name>`` and set the package name.
5. TOOLS     -- apply each selected tool (built-in overlay, action or command).
6. AGENTS    -- merge every ``AGENTS.md`` fragment into the new project.
7. REPORT    -- print the next steps.

Downstream ``create-*`` packages call :func:`run` from their console script::

    def main() -> None:
        sys.exit(run(
            name="rsbuild",
            root=Path(__file__).parent,
            templates=["vanilla", "react"],
            get_template_name=lambda argv: argv.template or "vanilla",
        ))
"""

from __future__ import annotations

import argparse
import asyncio
import inspect
import re
import sys
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from . import prompts
from .config import (
    BUILTIN_TOOLS,
    ESLINT_TEMPLATES,
    Argv,
    CreateConfig,
    ExtraTool,
    PackageManager,
)
from .scaffolder.agents import write_agents_md
from .scaffolder.package_json import PACKAGE_JSON
from .scaffolder.templates import TemplateRenderer
from .scaffolder.tree import copy_folder
from .utils import (
    console,
    detect_package_manager,
    format_project_name,
    is_empty_dir,
    load_json,
    print_error,
    print_greeting,
    print_note,
    print_success,
    run_command,
    save_json,
)

OVERLAYS_DIR = Path(__file__).parent / "overlays"

DEFAULT_BIOME_VERSION = "1.9.4"

BUILTIN_TOOL_LABELS: dict[str, str] = {
    "biome": "Add Biome for code linting and formatting",
    "eslint": "Add ESLint for code linting",
    "prettier": "Add Prettier for code formatting",
}

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigurationError(Exception):
    """Raised when the resolved inputs cannot produce a project."""


class TemplateNotFoundError(ConfigurationError):
    def __init__(self, template_name: str) -> None:
        self.template_name = template_name
        super().__init__(f'Invalid input: template "{template_name}" not found.')


class UnknownToolError(ConfigurationError):
    def __init__(self, tool: str) -> None:
        self.tool = tool
        super().__init__(f'Invalid input: tool "{tool}" not found.')


class InvalidProjectNameError(ConfigurationError):
    def __init__(self, project_name: str) -> None:
        self.project_name = project_name
        super().__init__(f'Invalid input: project name "{project_name}" is empty.')


# ---------------------------------------------------------------------------
# Option parsing
# ---------------------------------------------------------------------------


def parse_argv(argv: list[str]) -> Argv:
    """Parse command-line options; unknown options are ignored."""
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument("-h", "--help", action="store_true")
    parser.add_argument("-d", "--dir")
    parser.add_argument("-t", "--template")
    parser.add_argument("--tools", action="append")
    parser.add_argument("--override", action="store_true")
    args, _unknown = parser.parse_known_args(argv)
    return Argv(**vars(args))


def sort_tool_options(extra_tools: list[ExtraTool]) -> list[prompts.Option]:
    """Extra tools ordered ``pre`` first, then built-ins, then the rest."""
    pre = [t for t in extra_tools if t.order == "pre"]
    post = [t for t in extra_tools if t.order != "pre"]
    return [
        *(prompts.Option(t.value, t.label) for t in pre),
        *(prompts.Option(name, BUILTIN_TOOL_LABELS[name]) for name in BUILTIN_TOOLS),
        *(prompts.Option(t.value, t.label) for t in post),
    ]


def default_eslint_template(template_name: str) -> str | None:
    """Pick the ESLint config variant that best matches *template_name*."""
    if template_name in ESLINT_TEMPLATES:
        return template_name
    language = "ts" if template_name.endswith("-ts") else "js"
    framework = template_name.split("-")[0]
    candidate = f"{framework}-{language}"
    if candidate in ESLINT_TEMPLATES:
        return candidate
    return f"vanilla-{language}"


# ---------------------------------------------------------------------------
# Package-manager aware tool commands
# ---------------------------------------------------------------------------

_NPM_CREATE = "npm create "
_ARG_SEPARATOR_RE = re.compile(r"\s--(?=\s|$)")


def build_tool_command(command: str, package_manager: PackageManager) -> str:
    """Rewrite ``npm create <x>`` for the package manager in use."""
    if not command.startswith(_NPM_CREATE) or package_manager.name == "npm":
        return command

    rest = _ARG_SEPARATOR_RE.sub("", command[len(_NPM_CREATE):], count=1)

    if package_manager.name == "pnpm":
        return f"pnpm create {rest}"
    if package_manager.name == "yarn":
        if package_manager.is_legacy_yarn:
            rest = rest.replace("@latest", "")
        return f"yarn create {rest}"
    if package_manager.name == "bun":
        return f"bun create {rest}"
    if package_manager.name == "deno":
        return f"deno run -A npm:create-{rest}"
    return command


# ---------------------------------------------------------------------------
# Creator
# ---------------------------------------------------------------------------


class Creator:
    """Applies the overlays of one resolved configuration.

    Attributes:
        config: Resolved configuration of the run.
        extra_tools: Caller-supplied tools keyed by identifier.
        agents_md_search_dirs: Directories whose ``AGENTS.md`` is merged, in
            the order they were touched.
    """

    def __init__(
        self,
        config: CreateConfig,
        *,
        extra_tools: list[ExtraTool] | None = None,
        map_eslint_template: Callable[[str], str | None] | None = None,
        overlays_dir: Path = OVERLAYS_DIR,
    ) -> None:
        self.config = config
        self.extra_tools = {tool.value: tool for tool in extra_tools or []}
        self.map_eslint_template = map_eslint_template or default_eslint_template
        self.overlays_dir = overlays_dir
        self.agents_md_search_dirs: list[Path] = []

    def add_agents_md_search_dirs(self, *dirs: str | Path) -> None:
        self.agents_md_search_dirs.extend(Path(d) for d in dirs)

    def _copy(self, source: Path, **kwargs: Any) -> None:
        copy_folder(
            source,
            self.config.dist_folder,
            version=self.config.version,
            skip_files=self.config.skip_files,
            placeholders=self.config.placeholders,
            **kwargs,
        )

    async def run(self) -> Path | None:
        """Write the project; returns the ``AGENTS.md`` path if one was written."""
        config = self.config

        self._copy(config.common_folder)
        self._copy(config.template_folder, package_name=config.package_name)
        self.add_agents_md_search_dirs(config.common_folder, config.template_folder)

        for tool in config.tools:
            if tool in self.extra_tools:
                await self._run_extra_tool(self.extra_tools[tool])
            else:
                self._apply_builtin_tool(tool)

        return write_agents_md(
            config.dist_folder, self.agents_md_search_dirs, config.placeholders
        )

    async def _run_extra_tool(self, tool: ExtraTool) -> None:
        if tool.action is not None:
            result = tool.action(
                template_name=self.config.template_name,
                dist_folder=self.config.dist_folder,
                add_agents_md_search_dirs=self.add_agents_md_search_dirs,
            )
            if inspect.isawaitable(result):
                await result

        if tool.command:
            command = build_tool_command(tool.command, self.config.package_manager)
            # Exit status is not checked.
            await run_command(command, cwd=self.config.dist_folder)

    def _apply_builtin_tool(self, tool: str) -> None:
        tool_folder = self.overlays_dir / f"template-{tool}"

        if tool == "eslint":
            variant = self.map_eslint_template(self.config.template_name)
            if not variant:
                return
            sub_folder = tool_folder / variant
            self._copy(sub_folder, is_merge_package_json=True)
            self.add_agents_md_search_dirs(tool_folder, sub_folder)
            return

        self._copy(tool_folder, is_merge_package_json=True)
        self.add_agents_md_search_dirs(tool_folder)

        if tool == "biome":
            finalize_biome_config(self.config.dist_folder)


def finalize_biome_config(dist_folder: Path) -> None:
    """Rename ``biome.json.template`` and pin the schema to the installed version."""
    template = dist_folder / "biome.json.template"
    biome_json = dist_folder / "biome.json"
    if template.exists():
        template.replace(biome_json)
    if not biome_json.exists():
        return

    package_json = dist_folder / PACKAGE_JSON
    pkg = load_json(package_json) if package_json.exists() else {}
    biome_version = (
        pkg.get("devDependencies", {}).get("@biomejs/biome", DEFAULT_BIOME_VERSION)
    ).replace("^", "", 1)

    data = load_json(biome_json)
    if isinstance(data.get("$schema"), str):
        data["$schema"] = data["$schema"].replace("{version}", biome_version)
        save_json(data, biome_json)


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def _validate_project_name(value: str) -> str | None:
    if not format_project_name(value).target_dir:
        return "Project name is required"
    return None


def _resolve_tools(argv: Argv,extra_tools: list[ExtraTool]) -> list[str]:
    if argv.tools is not None:
        return argv.tools
    # Tool selection is skipped when the run is fully driven by options.
    if argv.dir and argv.template:
        return []
    return prompts.multiselect(
        "Select additional tools",
        sort_tool_options(extra_tools),
    )


async def create(
    *,
    name: str,
    root: str | Path,
    templates: list[str],
    get_template_name: Callable[[Argv], Any],
    map_eslint_template: Callable[[str], str | None] | None = None,
    version: str | dict[str, str] | None = None,
    skip_files: list[str] | None = None,
    extra_tools: list[ExtraTool] | None = None,
    next_steps: list[str] | None = None,
    argv: list[str] | None = None,
    cwd: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> Path | None:
    """Create a new project from the overlays under *root*.

    Args:
        name: Short product name used in the greeting and help text.
        root: Directory holding ``template-common`` and ``template-<name>``.
        templates: Template names listed in the help text.
        get_template_name: Returns (or resolves to) the template name.
        map_eslint_template: Maps a template name to an ESLint variant, or
            ``None`` to skip ESLint.
        version: Version directive for copied ``package.json`` files.
            Defaults to the ``version`` of ``<root>/package.json``.
        skip_files: Extra entry names never copied.
        extra_tools: Tools contributed in addition to the built-in ones.
        next_steps: Replaces the default "next steps" list.
        argv: Command-line options (defaults to ``sys.argv[1:]``).
        cwd: Base for relative project paths (defaults to the process cwd).
        env: Environment used for package-manager detection.

    Returns:
        The project directory, or ``None`` when only help was printed.

    Raises:
        TemplateNotFoundError: If ``template-<name>`` does not exist.
        UnknownToolError: If a selected tool is neither built-in nor extra.
    """
    root = Path(root)
    extra_tools = extra_tools or []
    renderer = TemplateRenderer()
    options = parse_argv(sys.argv[1:] if argv is None else argv)

    print_greeting(name)

    if options.help:
        tool_names = [option.value for option in sort_tool_options(extra_tools)]
        console.print(
            renderer.render_help(name, templates, tool_names),
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
        return None

    package_manager = detect_package_manager(env)
    if version is None:
        version = load_json(root / PACKAGE_JSON).get("version")

    try:
        project_name = options.dir or prompts.text(
            "Project name or path",
            default=f"{name}-project",
            validate=_validate_project_name,
        )
        template_name = await _maybe_await(get_template_name(options))
        tools = _resolve_tools(options, extra_tools)

        project = format_project_name(project_name)
        if not project.target_dir:
            raise InvalidProjectNameError(project_name)
        config = CreateConfig(
            root=root,
            cwd=Path.cwd() if cwd is None else Path(cwd),
            target_dir=project.target_dir,
            package_name=project.package_name,
            template_name=template_name,
            tools=tools,
            version=version,
            override=options.override,
            skip_files=skip_files or [],
            package_manager=package_manager,
        )

        if not config.template_folder.exists():
            raise TemplateNotFoundError(template_name)
        known_tools = {*BUILTIN_TOOLS, *(tool.value for tool in extra_tools)}
        for tool in config.tools:
            if tool not in known_tools:
                raise UnknownToolError(tool)

        dist_folder = config.dist_folder
        if not config.override and dist_folder.exists() and not is_empty_dir(dist_folder):
            choice = prompts.select(
                f'"{config.target_dir}" is not empty, please choose:',
                [
                    prompts.Option("yes", "Continue and override files"),
                    prompts.Option("no", "Cancel operation"),
                ],
            )
            if choice == "no":
                prompts.cancel_and_exit()
    except prompts.UserCancelled:
        prompts.cancel_and_exit()

    creator = Creator(
        config,
        extra_tools=extra_tools,
        map_eslint_template=map_eslint_template,
    )
    await creator.run()

    steps = next_steps or [
        f"[cyan]cd {config.target_dir}[/cyan]",
        "[cyan]git init[/cyan] [dim](optional)[/dim]",
        f"[cyan]{package_manager.name} install[/cyan]",
        f"[cyan]{package_manager.name} run dev[/cyan]",
    ]
    print_note(renderer.render_next_steps(steps), "Next steps")
    print_success("All set, happy coding!")

    return dist_folder


def run(**kwargs: Any) -> int:
    """Synchronous wrapper around :func:`create` for console scripts.

    Returns the process exit status: ``0`` on success, ``1`` on a
    configuration error.  Cancellation exits with status ``0``.
    """
    try:
        asyncio.run(create(**kwargs))
    except ConfigurationError as exc:
        print_error(str(exc))
        return 1
    return 0
