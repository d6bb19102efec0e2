from __future__ import annotations

"""
Tree Renderer.

Converts a ProjectHierarchy into the visual tree printed by 'view'.
Handles depth limiting, files-only elision and connector selection based on
the siblings that are actually shown.
"""

import re
from typing import List, Optional, Tuple

from vsprojm.core.analysis.hierarchy import ProjectHierarchy
from vsprojm.domain.constants import (
    BLANK_PREFIX,
    BRANCH,
    EMPTY_PROJECT_MARKER,
    FILE_ICON,
    FOLDER_ICON,
    LAST_BRANCH,
    PIPE_PREFIX,
)

_FOLDER = "folder"
_FILE = "file"

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render_hierarchy(
        hierarchy: ProjectHierarchy,
        title: str,
        files_only: bool = False,
        max_depth: Optional[int] = None,
) -> List[str]:
    """
    Render the hierarchy as a list of lines.

    Depth is the number of name segments; top-level filters have depth 1.
    With max_depth=0 only top-level filters are listed and no files. With
    max_depth=N a filter is listed when its depth is at most N and its files
    when depth + 1 is at most N, so root files need N >= 1.

    Args:
        hierarchy: Reconstructed filter tree.
        title: Project file name shown on the first line.
        files_only: Hide filters that end up showing no file at all.
        max_depth: Optional depth limit (None renders everything).

    Returns:
        List[str]: Output lines without terminators.
    """
    lines = [f"{FOLDER_ICON} {title}"]
    if hierarchy.is_empty:
        lines.append(EMPTY_PROJECT_MARKER)
        return lines

    _render_level(hierarchy, "", lines, "", files_only, max_depth)
    return lines

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _render_level(
        hierarchy: ProjectHierarchy,
        name: str,
        lines: List[str],
        prefix: str,
        files_only: bool,
        max_depth: Optional[int],
) -> None:
    entries = _visible_entries(hierarchy, name, files_only, max_depth)
    total = len(entries)

    for i, (kind, value) in enumerate(entries):
        is_last = (i == total - 1)
        connector = LAST_BRANCH if is_last else BRANCH

        if kind == _FOLDER:
            lines.append(f"{prefix}{connector}{FOLDER_ICON} {hierarchy.nodes[value].label}")
            new_prefix = prefix + (BLANK_PREFIX if is_last else PIPE_PREFIX)
            _render_level(hierarchy, value, lines, new_prefix, files_only, max_depth)
            continue

        lines.append(f"{prefix}{connector}{FILE_ICON} {_base_name(value)}")


def _visible_entries(
        hierarchy: ProjectHierarchy,
        name: str,
        files_only: bool,
        max_depth: Optional[int],
) -> List[Tuple[str, str]]:
    """Entries shown under a node: root files before folders, elsewhere folders first."""
    node = hierarchy.nodes[name]

    folders = [
        (_FOLDER, child.name)
        for child in hierarchy.children_of(name)
        if _folder_visible(child.depth, max_depth)
        and (not files_only or _shows_any_file(hierarchy, child.name, max_depth))
    ]
    files = []
    if _files_visible(node.depth, max_depth):
        files = [(_FILE, path) for path in hierarchy.files_of(name)]

    if node.is_root:
        return files + folders
    return folders + files


def _folder_visible(depth: int, max_depth: Optional[int]) -> bool:
    if max_depth is None:
        return True
    if max_depth == 0:
        return depth <= 1
    return depth <= max_depth


def _files_visible(depth: int, max_depth: Optional[int]) -> bool:
    if max_depth is None:
        return True
    return max_depth > 0 and depth + 1 <= max_depth


def _shows_any_file(hierarchy: ProjectHierarchy, name: str, max_depth: Optional[int]) -> bool:
    """True if the subtree of a visible folder renders at least one file."""
    node = hierarchy.nodes[name]
    if node.files and _files_visible(node.depth, max_depth):
        return True
    return any(
        _folder_visible(child.depth, max_depth) and _shows_any_file(hierarchy, child.name, max_depth)
        for child in hierarchy.children_of(name)
    )


def _base_name(path: str) -> str:
    return re.split(r"[\\/]", path)[-1]
