"""Jinja2 rendering of the messages printed by the CLI.

Message templates (``*.j2``) live in ``scaffoldkit/scaffolder/templates/``.
Overlay files are never rendered through Jinja2; they only receive literal
``{{ key }}`` substitution (see :mod:`scaffoldkit.scaffolder.tree`).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders the Jinja2 message templates used for console output."""

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"help.txt.j2"``).
            context: Dictionary of variables available inside the template.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    def render_help(self, name: str, templates: list[str], tools: list[str]) -> str:
        return self.render(
            "help.txt.j2", {"name": name, "templates": templates, "tools": tools}
        )

    def render_next_steps(self, steps: list[str]) -> str:
        return self.render("next_steps.txt.j2", {"steps": steps}).strip("\n")

