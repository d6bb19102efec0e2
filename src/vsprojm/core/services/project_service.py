from __future__ import annotations

"""
Project Orchestration Service.

Coordinates the two coupled documents of a project for every user-level
operation:
1. Loads the project file and, when present, its filters companion.
2. Runs the mutation on disposable copies for previews.
3. Applies the same mutation to the loaded documents on commit.
4. Persists the project file first, then the filters file.

Operations that select nothing never write.
"""

import logging
import os
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from vsprojm.core.analysis.hierarchy import ProjectHierarchy
from vsprojm.core.analysis.tree_renderer import render_hierarchy
from vsprojm.core.components.filters import compile_pattern, is_node_target, require_single_selector
from vsprojm.core.documents.filter_document import FilterDocument
from vsprojm.core.documents.project_document import ProjectDocument
from vsprojm.core.services.identifiers import IdentifierFactory, new_unique_identifier
from vsprojm.core.services.scanner import discover_candidates
from vsprojm.domain.errors import DocumentIOError, InconsistentCommitError, NotFoundError
from vsprojm.domain.project_models import (
    AddPlan,
    DeletePlan,
    FilterDeleteResult,
    PropertyUpdate,
    RenamePlan,
)
from vsprojm.infra.fs import filters_path_for

logger = logging.getLogger(__name__)


@dataclass
class ProjectSession:
    """
    Both documents of one project, loaded for a single command.

    Attributes:
        project: The compile-unit list.
        filters: The filters document, or None when the file does not exist.
        filters_path: Where the filters document lives (or would be created).
    """
    project: ProjectDocument
    filters: Optional[FilterDocument]
    filters_path: str

    @property
    def project_path(self) -> str:
        return self.project.path

# -----------------------------------------------------------------------------
# LOADING AND PERSISTENCE
# -----------------------------------------------------------------------------

def open_project(
        project_path: str,
        source_extensions: Optional[Sequence[str]] = None,
        id_factory: IdentifierFactory = new_unique_identifier,
) -> ProjectSession:
    """
    Load a project file and its filters companion.

    Raises:
        NotFoundError: If the project file does not exist.
        DocumentIOError: If a document cannot be read.
    """
    if not os.path.isfile(project_path):
        raise NotFoundError(f"Project file not found: {project_path}")

    project = ProjectDocument.load(project_path, source_extensions=source_extensions)
    filters_path = filters_path_for(project_path)
    filters = None
    if os.path.isfile(filters_path):
        filters = FilterDocument.load(
            filters_path, source_extensions=source_extensions, id_factory=id_factory
        )
    else:
        logger.debug(f"No filters file next to '{project_path}'")
    return ProjectSession(project=project, filters=filters, filters_path=filters_path)


def commit_documents(project: Optional[ProjectDocument], filters: Optional[FilterDocument]) -> None:
    """
    Persist the project file, then the filters file.

    Raises:
        DocumentIOError: If the first write fails (nothing was changed).
        InconsistentCommitError: If the project file was written but the
            filters file was not.
    """
    if project is None:
        if filters is not None:
            filters.save()
        return

    project.save()
    if filters is None:
        return
    try:
        filters.save()
    except DocumentIOError as e:
        logger.error(f"Filters write failed after the project file was saved: {e}")
        raise InconsistentCommitError(project.path, filters.path, e) from e

# -----------------------------------------------------------------------------
# ADD
# -----------------------------------------------------------------------------

def add_files(
        session: ProjectSession,
        extension: str,
        scan_dir: Optional[str] = None,
        recursive: bool = True,
        pattern: Optional[str] = None,
        negate: bool = False,
        dry_run: bool = False,
) -> AddPlan:
    """
    Discover source files and register them in both documents.

    The scan directory defaults to the project directory. A missing filters
    file is created from an empty template.

    Raises:
        MalformedPatternError: If 'pattern' is not a valid regex.
        NotFoundError: If the scan directory does not exist.
    """
    compiled = compile_pattern(pattern)
    project_dir = os.path.dirname(os.path.abspath(session.project_path))
    candidates = discover_candidates(
        scan_dir or project_dir, project_dir, extension,
        recursive=recursive, pattern=compiled, negate=negate,
    )
    if not candidates:
        logger.info("No candidate files found; nothing to add.")
        return AddPlan()

    filters_created = session.filters is None
    filters = session.filters
    if filters is None:
        filters = FilterDocument.new(
            session.filters_path,
            source_extensions=session.project.source_extensions,
        )

    project = session.project.copy() if dry_run else session.project
    if dry_run:
        filters = filters.copy()

    added = project.add([c.project_path for c in candidates])
    if not added:
        logger.info(f"None of the {len(candidates)} files has a recognized source extension.")
        return AddPlan(candidates=candidates, filters_created=filters_created)

    result = filters.add(
        [c.project_path for c in candidates],
        [c.hierarchy_path for c in candidates],
    )

    if dry_run:
        return AddPlan(
            candidates=candidates,
            project_files=added,
            created_nodes=result.created_nodes,
            filters_created=filters_created,
        )

    session.filters = filters
    commit_documents(project, filters)
    logger.info(f"Added {len(added)} files to '{session.project_path}'")
    return AddPlan(
        candidates=candidates,
        project_files=added,
        created_nodes=result.created_nodes,
        filters_created=filters_created,
        committed=True,
    )

# -----------------------------------------------------------------------------
# DELETE
# -----------------------------------------------------------------------------

def preview_delete(
        session: ProjectSession,
        target: Optional[str] = None,
        extension: Optional[str] = None,
        pattern: Optional[str] = None,
        negate: bool = False,
) -> DeletePlan:
    """Compute what a delete would remove, on copies of both documents."""
    project = session.project.copy()
    filters = session.filters.copy() if session.filters is not None else None
    return _apply_delete(project, filters, target, extension, pattern, negate)


def commit_delete(
        session: ProjectSession,
        target: Optional[str] = None,
        extension: Optional[str] = None,
        pattern: Optional[str] = None,
        negate: bool = False,
) -> DeletePlan:
    """
    Remove the selected files from both documents and persist them.

    Raises:
        InvalidInputError: Unless exactly one of target/extension is given.
        MalformedPatternError: If 'pattern' is not a valid regex.
        InconsistentCommitError: If only the project file could be written.
    """
    plan = _apply_delete(session.project, session.filters, target, extension, pattern, negate)
    if plan.is_empty:
        logger.info("Delete matched nothing; no files written.")
        return plan

    commit_documents(session.project, session.filters)
    logger.info(f"Deleted {len(plan.files)} files and {len(plan.nodes)} filters")
    return DeletePlan(
        files=plan.files,
        filter_files=plan.filter_files,
        nodes=plan.nodes,
        filters_present=plan.filters_present,
        committed=True,
    )


def _apply_delete(
        project: ProjectDocument,
        filters: Optional[FilterDocument],
        target: Optional[str],
        extension: Optional[str],
        pattern: Optional[str],
        negate: bool,
) -> DeletePlan:
    require_single_selector(target, extension)
    compiled = compile_pattern(pattern)

    # a bare name only selects a filter that exists; otherwise it is a path substring
    node_mode = (
        filters is not None
        and is_node_target(target, extension)
        and filters.has_node(target)
    )

    filter_result = FilterDeleteResult()
    if filters is not None:
        filter_result = filters.delete(target=target, extension=extension, pattern=compiled, negate=negate)

    if node_mode:
        files = project.remove_entries(filter_result.files)
    else:
        files = project.delete(target=target, extension=extension, pattern=compiled, negate=negate)

    return DeletePlan(
        files=files,
        filter_files=filter_result.files,
        nodes=filter_result.nodes,
        filters_present=filters is not None,
    )

# -----------------------------------------------------------------------------
# RENAME AND MERGE
# -----------------------------------------------------------------------------

def preview_rename(session: ProjectSession, source: str, target: str) -> RenamePlan:
    """
    Report what renaming a filter would do, without touching the documents.

    Raises:
        NotFoundError: If there is no filters file or 'source' does not exist.
        InvalidInputError: If the names are empty or equal.
    """
    filters = _require_filters(session).copy()
    result = filters.rename(source, target)
    return RenamePlan(source=source, target=target, target_exists=result.target_exists, files=result.files)


def commit_rename(session: ProjectSession, source: str, target: str) -> RenamePlan:
    """
    Rename a filter and persist the filters file.

    When the target exists nothing is written; the returned plan has
    target_exists=True and the caller decides whether to merge.
    """
    filters = _require_filters(session)
    result = filters.rename(source, target)
    if result.target_exists:
        return RenamePlan(source=source, target=target, target_exists=True, files=result.files)

    commit_documents(None, filters)
    return RenamePlan(source=source, target=target, target_exists=False, files=result.files, committed=True)


def commit_merge(session: ProjectSession, source: str, target: str) -> RenamePlan:
    """Move every file of 'source' into 'target' and persist the filters file."""
    filters = _require_filters(session)
    moved = filters.merge(source, target)
    commit_documents(None, filters)
    return RenamePlan(
        source=source, target=target, target_exists=True, files=moved, merged=True, committed=True
    )


def _require_filters(session: ProjectSession) -> FilterDocument:
    if session.filters is None:
        raise NotFoundError(f"Filters file not found: {session.filters_path}")
    return session.filters

# -----------------------------------------------------------------------------
# CONFIGURATION PROPERTIES
# -----------------------------------------------------------------------------

def add_configuration_property(
        session: ProjectSession,
        section: str,
        prop: str,
        value: str,
        dry_run: bool = False,
) -> PropertyUpdate:
    """
    Add a value to a build property of every configuration and persist it.

    Raises:
        InvalidInputError: On unknown selectors or an empty value.
    """
    project = session.project.copy() if dry_run else session.project
    touched = project.inject_configuration_property(section, prop, value)
    if touched and not dry_run:
        commit_documents(project, None)
    return PropertyUpdate(section=section, prop=prop, value=value, configurations=touched)

# -----------------------------------------------------------------------------
# VIEW
# -----------------------------------------------------------------------------

def load_hierarchy(session: ProjectSession) -> ProjectHierarchy:
    return ProjectHierarchy.from_documents(session.project, session.filters)


def render_project_view(
        session: ProjectSession,
        files_only: bool = False,
        max_depth: Optional[int] = None,
) -> Tuple[List[str], ProjectHierarchy]:
    """Render the project tree; returns the lines and the hierarchy for summaries."""
    hierarchy = load_hierarchy(session)
    title = os.path.basename(session.project_path)
    lines = render_hierarchy(hierarchy, title, files_only=files_only, max_depth=max_depth)
    return lines, hierarchy
