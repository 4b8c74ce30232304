"""AGENTS.md fragment merging.

Every overlay root may contribute an ``AGENTS.md`` fragment.  Fragments are
split into sections at level-1 and level-2 headings (deeper headings stay
inside the body) and merged section by section: sections appear in the
order they are first seen, and each distinct body is kept once, in the
order the fragments were discovered.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from .tree import replace_placeholders

AGENTS_MD = "AGENTS.md"

_HEADING_RE = re.compile(r"^(#{1,2})\s+(.+)$")
_FENCE_RE = re.compile(r"^\s{0,3}(```|~~~)")


@dataclass
class Section:
    """A heading-delimited unit of an AGENTS.md fragment."""

    title: str
    level: int
    content: str = ""


@dataclass
class MergedSection:
    """A section of the merged document with every distinct body collected."""

    title: str
    level: int
    contents: list[str] = field(default_factory=list)

    def render(self) -> str:
        lines = [f"{'#' * self.level} {self.title}", ""]
        for content in self.contents:
            lines.append(content)
            lines.append("")
        return "\n".join(lines)


def section_key(level: int, title: str) -> str:
    return f"{level}-{title.lower()}"


def parse_agents_md(text: str) -> dict[str, Section]:
    """Split *text* into sections keyed by ``<level>-<lowercased title>``.

    Text before the first heading is ignored, and so are heading-like lines
    inside fenced code blocks.  A heading repeated within the same fragment
    replaces the earlier section.
    """
    sections: dict[str, Section] = {}
    current: Section | None = None
    body: list[str] = []

    def flush() -> None:
        if current is not None:
            current.content = "\n".join(body).strip()
            sections[section_key(current.level, current.title)] = current

    fence: str | None = None

    for line in text.splitlines():
        fence_match = _FENCE_RE.match(line)
        if fence_match:
            if fence is None:
                fence = fence_match.group(1)
            elif fence_match.group(1) == fence:
                fence = None
        match = None if fence is not None else _HEADING_RE.match(line)
        if match:
            flush()
            current = Section(title=match.group(2).strip(), level=len(match.group(1)))
            body = []
        elif current is not None:
            body.append(line)

    flush()
    return sections


def merge_agents_md(fragments: Iterable[str | None]) -> str:
    """Merge AGENTS.md *fragments* into one document.

    ``None`` entries (no fragment found) are skipped.
    """
    merged: dict[str, MergedSection] = {}

    for fragment in fragments:
        if fragment is None:
            continue
        for key, section in parse_agents_md(fragment).items():
            if key not in merged:
                merged[key] = MergedSection(title=section.title, level=section.level)
            target = merged[key]
            if section.content and section.content not in target.contents:
                target.contents.append(section.content)

    return "\n".join(section.render() for section in merged.values()).strip()


def read_agents_files(dirs: Iterable[str | Path]) -> list[str | None]:
    """Read ``AGENTS.md`` from each directory, ``None`` where it is missing."""
    fragments: list[str | None] = []
    for directory in dirs:
        path = Path(directory) / AGENTS_MD
        fragments.append(path.read_text(encoding="utf-8") if path.is_file() else None)
    return fragments


def write_agents_md(
    dist_folder: str | Path,
    dirs: Iterable[str | Path],
    placeholders: dict[str, str] | None = None,
) -> Path | None:
    """Merge the fragments found in *dirs* into ``<dist_folder>/AGENTS.md``.

    Returns the written path, or ``None`` when no fragment was found.
    """
    fragments = read_agents_files(dirs)
    if all(fragment is None for fragment in fragments):
        return None

    content = merge_agents_md(fragments)
    if placeholders:
        content = replace_placeholders(content, placeholders)

    output = Path(dist_folder) / AGENTS_MD
    output.write_text(f"{content}\n", encoding="utf-8")
    return output
