from __future__ import annotations

"""
Project Domain Data Models.

Defines the Data Transfer Objects returned by document mutators and the
project services. Every result is immutable so a preview can be shown to the
user and later compared with what the commit pass actually changed.
"""

from dataclasses import dataclass, field
from typing import List, Optional

# -----------------------------------------------------------------------------
# DISCOVERY MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class CandidateFile:
    """
    A discovered source file with its two path projections.

    Attributes:
        project_path: Path relative to the project file directory; this is
            what gets recorded in the Include attribute.
        hierarchy_path: Path relative to the scanned directory; its parent
            decides the filter the file is displayed under.
    """
    project_path: str
    hierarchy_path: str


@dataclass(frozen=True)
class ProjectFile:
    """
    A compile entry joined with its filter assignment.

    Attributes:
        path: Include path as recorded in the project file.
        filter: Qualified filter name, or None for root-level files.
    """
    path: str
    filter: Optional[str] = None

# -----------------------------------------------------------------------------
# MUTATION RESULTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class FilterAddResult:
    """Files written to the filters document and filters declared on the way."""
    files: List[str] = field(default_factory=list)
    created_nodes: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class FilterDeleteResult:
    """Files and filter declarations removed from the filters document."""
    files: List[str] = field(default_factory=list)
    nodes: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class RenameResult:
    """
    Outcome of a filter rename.

    Attributes:
        target_exists: True when the destination already existed; nothing was
            changed and the caller has to merge instead.
        files: Files now (or, when target_exists, currently) under the filter.
    """
    target_exists: bool
    files: List[str] = field(default_factory=list)

# -----------------------------------------------------------------------------
# SERVICE-LEVEL PLANS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class AddPlan:
    """
    Files discovered for an add operation and what was written.

    Attributes:
        candidates: Discovered files in scan order.
        project_files: Include paths added to the project file.
        created_nodes: Filters declared in the filters document.
        filters_created: True if the filters document did not exist.
        committed: False for dry runs and empty scans.
    """
    candidates: List[CandidateFile] = field(default_factory=list)
    project_files: List[str] = field(default_factory=list)
    created_nodes: List[str] = field(default_factory=list)
    filters_created: bool = False
    committed: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.candidates


@dataclass(frozen=True)
class DeletePlan:
    """
    Items selected by a delete specification.

    Attributes:
        files: Include paths removed from the project file.
        filter_files: Include paths removed from the filters document.
        nodes: Filter declarations removed.
        filters_present: Whether a filters document takes part.
        committed: True once both documents were written.
    """
    files: List[str] = field(default_factory=list)
    filter_files: List[str] = field(default_factory=list)
    nodes: List[str] = field(default_factory=list)
    filters_present: bool = False
    committed: bool = False

    @property
    def is_empty(self) -> bool:
        return not (self.files or self.filter_files or self.nodes)


@dataclass(frozen=True)
class RenamePlan:
    """Preview or outcome of a rename, possibly escalated into a merge."""
    source: str
    target: str
    target_exists: bool
    files: List[str] = field(default_factory=list)
    merged: bool = False
    committed: bool = False


@dataclass(frozen=True)
class PropertyUpdate:
    """Configurations touched by a property injection."""
    section: str
    prop: str
    value: str
    configurations: List[str] = field(default_factory=list)
