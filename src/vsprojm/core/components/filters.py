from __future__ import annotations

"""
Entry Selection and Pattern Filtering Engine.

Implements the matching rules shared by the project and filters documents
(extension, folder, file and bare filter-name selectors), the optional regex
refinement with negation, and source-extension classification.
"""

import re
from typing import Iterable, Optional

from vsprojm.domain.constants import SEGMENT_DELIMITER
from vsprojm.domain.errors import InvalidInputError, MalformedPatternError

# -----------------------------------------------------------------------------
# PATTERN COMPILATION AND MATCHING
# -----------------------------------------------------------------------------

def compile_pattern(pattern: Optional[str]) -> Optional[re.Pattern]:
    """
    Compile an optional refinement pattern.

    Args:
        pattern: Raw regex text, or None/empty for "no refinement".

    Returns:
        Optional[re.Pattern]: Compiled pattern or None.

    Raises:
        MalformedPatternError: If the pattern is not a valid regex.
    """
    if not pattern:
        return None
    try:
        return re.compile(pattern)
    except re.error as e:
        raise MalformedPatternError(pattern, str(e)) from e


def passes_refinement(path: str, pattern: Optional[re.Pattern], negate: bool = False) -> bool:
    """
    Apply the optional regex refinement to a path.

    Without a pattern every path passes and 'negate' has no effect.
    """
    if pattern is None:
        return True
    return bool(pattern.search(path)) != negate

# -----------------------------------------------------------------------------
# SELECTOR VALIDATION
# -----------------------------------------------------------------------------

def require_single_selector(target: Optional[str], extension: Optional[str]) -> None:
    """Raise InvalidInputError unless exactly one of target/extension is given."""
    if not target and not extension:
        raise InvalidInputError("Either a target or an extension must be specified")
    if target and extension:
        raise InvalidInputError("A target and an extension cannot be combined")


def is_folder_target(target: str) -> bool:
    return target.endswith("/") or target.endswith("\\")


def is_node_target(target: Optional[str], extension: Optional[str]) -> bool:
    """
    Decide whether a delete target has the shape of a filter name.

    A bare name has no path separator and no dot ("Header Files"), and no
    extension selector is supplied. Callers still check that such a filter
    exists before treating the target as one.
    """
    if extension or not target:
        return False
    return "." not in target and "/" not in target and "\\" not in target


def entry_line_matches(line: str, target: Optional[str], extension: Optional[str]) -> bool:
    """
    Textual matching rule for compile entry lines.

    - extension: the line contains '.<extension>'
    - folder (target ends with a separator): the line contains the folder in
      either separator style
    - file: the line contains the target literally
    """
    if extension:
        return f".{extension.lstrip('.')}" in line
    if not target:
        return False
    if is_folder_target(target):
        return target.replace("/", "\\") in line or target.replace("\\", "/") in line
    return target in line

# -----------------------------------------------------------------------------
# PATH CLASSIFICATION
# -----------------------------------------------------------------------------

def to_include_path(path: str) -> str:
    """Convert a relative path to the backslash form stored in Include attributes."""
    return path.replace("/", SEGMENT_DELIMITER)


def extension_of(path: str) -> str:
    """Return the lowercase extension of a path without the dot ('' if none)."""
    name = re.split(r"[\\/]", path)[-1]
    if "." not in name.lstrip("."):
        return ""
    return name.rsplit(".", 1)[-1].lower()


def has_source_extension(path: str, extensions: Iterable[str]) -> bool:
    """True if the path's extension is one of the recognized source extensions."""
    allowed = {e.lower().lstrip(".") for e in extensions}
    return extension_of(path) in allowed
