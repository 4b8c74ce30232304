"""``package.json`` merging and patching.

Two operations are exposed:

* :func:`merge_package_json` deep-merges a tool's descriptor into the one
  already present in the destination, keeping the original ``name`` and
  sorting ``scripts``/``dependencies``/``devDependencies`` by key.
* :func:`update_package_json` rewrites the workspace version sentinel (or
  explicit per-dependency versions) and the package name of a copied
  descriptor.
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

from ..utils import dump_json, load_json

PACKAGE_JSON = "package.json"

WORKSPACE_SENTINEL = "workspace:*"

SORTED_FIELDS: tuple[str, ...] = ("scripts", "dependencies", "devDependencies")

PRERELEASE_TAGS: tuple[str, ...] = ("alpha", "beta", "rc", "canary", "nightly")


def is_stable_version(version: str) -> bool:
    """Return ``True`` if *version* carries no pre-release/channel marker."""
    return not any(tag in version for tag in PRERELEASE_TAGS)


def resolve_version_range(version: str) -> str:
    """``1.2.3`` -> ``^1.2.3``; pre-release versions are kept exact."""
    return f"^{version}" if is_stable_version(version) else version


def sort_object_keys(obj: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of *obj* with keys in ascending order."""
    return {key: obj[key] for key in sorted(obj)}


def deep_merge(target: Any, extra: Any) -> Any:
    """Recursively merge *extra* into a copy of *target*.

    Mappings merge key-wise, lists are concatenated and any other value in
    *extra* replaces the one in *target*.
    """
    if isinstance(target, dict) and isinstance(extra, dict):
        merged = copy.deepcopy(target)
        for key, value in extra.items():
            if key in merged:
                merged[key] = deep_merge(merged[key], value)
            else:
                merged[key] = copy.deepcopy(value)
        return merged
    if isinstance(target, list) and isinstance(extra, list):
        return copy.deepcopy(target) + copy.deepcopy(extra)
    return copy.deepcopy(extra)


def merge_package_data(target: dict[str, Any], extra: dict[str, Any]) -> dict[str, Any]:
    """Merge two parsed descriptors without touching the filesystem."""
    merged: dict[str, Any] = deep_merge(target, extra)
    name = target.get("name") or extra.get("name")
    if name:
        merged["name"] = name
    else:
        merged.pop("name", None)

    for key in SORTED_FIELDS:
        if key in merged and isinstance(merged[key], dict):
            merged[key] = sort_object_keys(merged[key])

    return merged


def merge_package_json(target_package: str | Path, extra_package: str | Path) -> None:
    """Merge *extra_package* into *target_package* in place.

    Does nothing when *target_package* does not exist.
    """
    target_path = Path(target_package)
    if not target_path.exists():
        return

    merged = merge_package_data(load_json(target_path), load_json(extra_package))
    target_path.write_text(dump_json(merged), encoding="utf-8")


def apply_package_update(
    content: str,
    version: str | dict[str, str] | None = None,
    name: str | None = None,
    *,
    package_dir: str | Path | None = None,
) -> dict[str, Any]:
    """Apply a version directive and package name to raw descriptor text.

    A string *version* replaces every ``workspace:*`` occurrence textually,
    before parsing.  A mapping only overwrites dependencies that are already
    declared.  A *name* of ``"."`` stands for the basename of *package_dir*.
    """
    if isinstance(version, str):
        content = content.replace(WORKSPACE_SENTINEL, resolve_version_range(version))

    pkg: dict[str, Any] = json.loads(content)

    if isinstance(version, dict):
        for dep_name, dep_version in version.items():
            for field in ("dependencies", "devDependencies"):
                deps = pkg.get(field)
                if isinstance(deps, dict) and dep_name in deps:
                    deps[dep_name] = dep_version

    if name == ".":
        if package_dir is not None:
            derived = Path(package_dir).resolve().name
            if derived:
                pkg["name"] = derived
    elif name:
        pkg["name"] = name

    return pkg


def update_package_json(
    pkg_json_path: str | Path,
    version: str | dict[str, str] | None = None,
    name: str | None = None,
) -> None:
    """Rewrite the descriptor at *pkg_json_path* with *version* and *name*."""
    path = Path(pkg_json_path)
    pkg = apply_package_update(
        path.read_text(encoding="utf-8"),
        version,
        name,
        package_dir=path.parent,
    )
    path.write_text(dump_json(pkg), encoding="utf-8")
