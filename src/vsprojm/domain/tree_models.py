from __future__ import annotations

"""
Filter Hierarchy Data Models.

Provides the node type of the explicit tree rebuilt from the flat,
backslash-delimited filter names.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from vsprojm.domain.constants import SEGMENT_DELIMITER

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

@dataclass
class HierarchyNode:
    """
    A filter (folder) in the reconstructed hierarchy.

    Attributes:
        name: Fully qualified name; the empty string is the root.
        parent: Qualified name of the parent, None for the root.
        children: Qualified names of child filters.
        files: Include paths displayed directly under this filter.
        declared: True if the filters document declares this name; False for
            ancestors synthesized from a descendant's name.
    """
    name: str
    parent: Optional[str] = None
    children: List[str] = field(default_factory=list)
    files: List[str] = field(default_factory=list)
    declared: bool = False

    @property
    def is_root(self) -> bool:
        return self.name == ""

    @property
    def depth(self) -> int:
        return len(self.name.split(SEGMENT_DELIMITER)) if self.name else 0

    @property
    def label(self) -> str:
        return self.name.rsplit(SEGMENT_DELIMITER, 1)[-1]


def parent_name(name: str) -> str:
    """Return the qualified name of a filter's parent ('' for top-level filters)."""
    if SEGMENT_DELIMITER not in name:
        return ""
    return name.rsplit(SEGMENT_DELIMITER, 1)[0]


def ancestor_names(name: str) -> List[str]:
    """List every proper ancestor of a qualified name, outermost first."""
    parts = name.split(SEGMENT_DELIMITER)
    return [SEGMENT_DELIMITER.join(parts[:i]) for i in range(1, len(parts))]


def is_descendant(name: str, ancestor: str) -> bool:
    """True if 'name' lies strictly below 'ancestor'."""
    return name.startswith(ancestor + SEGMENT_DELIMITER)
