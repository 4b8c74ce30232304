"""Scaffoldkit composition engine -- layers overlay trees into a new project.

The engine copies the common overlay, the template overlay and the tool
overlays onto a destination directory, merging ``package.json`` files and
finally merging every ``AGENTS.md`` fragment into one document.

Quick usage::

    from scaffoldkit.scaffolder import copy_folder, write_agents_md

    copy_folder("templates/template-common", "/tmp/app", version="1.2.3")
    copy_folder("templates/template-react", "/tmp/app", package_name="app")
    write_agents_md("/tmp/app", ["templates/template-common", "templates/template-react"])
"""

from scaffoldkit.scaffolder.agents import (
    merge_agents_md,
    parse_agents_md,
    read_agents_files,
    write_agents_md,
)
from scaffoldkit.scaffolder.package_json import (
    is_stable_version,
    merge_package_json,
    update_package_json,
)
from scaffoldkit.scaffolder.templates import TemplateRenderer
from scaffoldkit.scaffolder.tree import copy_folder, replace_placeholders

__all__ = [
    "TemplateRenderer",
    "copy_folder",
    "is_stable_version",
    "merge_agents_md",
    "merge_package_json",
    "parse_agents_md",
    "read_agents_files",
    "replace_placeholders",
    "update_package_json",
    "write_agents_md",
]
