"""Overlay copying.

:func:`copy_folder` layers one source tree onto a destination tree.  Files
stored under a visible name (``gitignore``) are renamed to their dotted
form, dependency caches and build output are never copied, ``package.json``
files are merged or patched, and ``{{ key }}`` placeholders are filled in
Markdown files.
"""

from __future__ import annotations

import shutil
from pathlib import Path

from .package_json import PACKAGE_JSON, merge_package_json, update_package_json

RENAME_FILES: dict[str, str] = {
    "gitignore": ".gitignore",
}

ALWAYS_SKIPPED: tuple[str, ...] = ("node_modules", "dist")

PLACEHOLDER_SUFFIXES: tuple[str, ...] = (".md", ".mdx")


def replace_placeholders(content: str, placeholders: dict[str, str]) -> str:
    """Replace every ``{{ key }}`` token in *content* with its mapped value."""
    for key, value in placeholders.items():
        content = content.replace(f"{{{{ {key} }}}}", value)
    return content


def copy_folder(
    source: str | Path,
    dest: str | Path,
    *,
    version: str | dict[str, str] | None = None,
    package_name: str | None = None,
    is_merge_package_json: bool = False,
    skip_files: list[str] | None = None,
    placeholders: dict[str, str] | None = None,
) -> None:
    """Copy the overlay at *source* onto *dest*.

    Args:
        source: Overlay root.  Must exist.
        dest: Destination directory, created if missing.
        version: Version directive applied to copied ``package.json`` files.
        package_name: Package name written to copied ``package.json`` files.
        is_merge_package_json: Merge into an existing destination
            ``package.json`` instead of overwriting it.
        skip_files: Extra entry names to skip besides ``node_modules``/``dist``.
        placeholders: ``{{ key }}`` substitutions for ``.md``/``.mdx`` files.

    Raises:
        FileNotFoundError: If *source* does not exist.
    """
    source = Path(source)
    dest = Path(dest)
    skip_files = skip_files or []
    all_skip_files = {*ALWAYS_SKIPPED, *skip_files}

    dest.mkdir(parents=True, exist_ok=True)

    for entry in sorted(source.iterdir(), key=lambda p: p.name):
        if entry.name in all_skip_files:
            continue

        dist_file = dest / RENAME_FILES.get(entry.name, entry.name)

        if entry.is_dir():
            copy_folder(
                entry,
                dist_file,
                version=version,
                package_name=package_name,
                is_merge_package_json=is_merge_package_json,
                skip_files=skip_files,
                placeholders=placeholders,
            )
        elif entry.name == PACKAGE_JSON:
            target_package = dest / PACKAGE_JSON
            if is_merge_package_json and target_package.exists():
                merge_package_json(target_package, entry)
                update_package_json(target_package, version, package_name)
            else:
                shutil.copyfile(entry, dist_file)
                update_package_json(dist_file, version, package_name)
        else:
            shutil.copyfile(entry, dist_file)
            if placeholders and dist_file.suffix in PLACEHOLDER_SUFFIXES:
                content = dist_file.read_text(encoding="utf-8")
                dist_file.write_text(
                    replace_placeholders(content, placeholders), encoding="utf-8"
                )
