from __future__ import annotations

"""
Filter Document (.vcxproj.filters).

Owns the display hierarchy: filter declarations ('<Filter Include=...>')
and per-item assignments ('<Filter>name</Filter>'). Compile entries are
the files this tool manages; other items (headers, resources) are never
added or removed, but their assignments follow renames and merges and keep
their filters declared.

Mutators keep declarations and assignments consistent: new files declare
their filters, deletes cascade into filter cleanup, renames rewrite every
assignment and merges never duplicate a declaration.
"""

import logging
import re
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from vsprojm.core.components.filters import (
    entry_line_matches,
    has_source_extension,
    is_node_target,
    passes_refinement,
    require_single_selector,
    to_include_path,
)
from vsprojm.core.services.identifiers import IdentifierFactory, new_unique_identifier
from vsprojm.core.text.anchors import (
    extract_attribute,
    extract_inner_text,
    find_element_end,
    find_enclosing_block,
    find_line,
    indentation_of,
    replace_attribute,
    replace_inner_text,
    rfind_line,
    starts_with,
)
from vsprojm.core.text.buffer import TextDocument
from vsprojm.domain.constants import (
    COMPILE_ENTRY_OPEN,
    COMPILE_TAG,
    DEFAULT_SOURCE_EXTENSIONS,
    FILTER_ASSIGN_OPEN,
    FILTER_DECL_OPEN,
    FILTER_TAG,
    FILTERS_TEMPLATE_LINES,
    INCLUDE_ATTR,
    ITEM_GROUP_CLOSE,
    ITEM_GROUP_OPEN,
    ROOT_CLOSE,
    SEGMENT_DELIMITER,
    UNIQUE_ID_TAG,
)
from vsprojm.domain.errors import InvalidInputError, NotFoundError
from vsprojm.domain.project_models import FilterAddResult, FilterDeleteResult, RenameResult
from vsprojm.domain.tree_models import ancestor_names, is_descendant

logger = logging.getLogger(__name__)

INDENT_UNIT = "  "

# -----------------------------------------------------------------------------
# SCAN RECORDS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class _Entry:
    start: int
    end: int
    include: str
    node: Optional[str] = None
    node_line: Optional[int] = None


@dataclass(frozen=True)
class _Declaration:
    start: int
    end: int
    name: str

# -----------------------------------------------------------------------------
# DOCUMENT
# -----------------------------------------------------------------------------

class FilterDocument(TextDocument):
    """
    The filters companion of a Visual C++ project.

    Args:
        text: Raw document text.
        path: Location on disk.
        has_bom: Whether the file carries a UTF-8 BOM.
        source_extensions: Extensions accepted by add().
        id_factory: Generator of fresh unique identifiers for new filters.
    """

    kind = "filters file"

    def __init__(
            self,
            text: str,
            path: str = "",
            has_bom: bool = False,
            source_extensions: Optional[Sequence[str]] = None,
            id_factory: IdentifierFactory = new_unique_identifier,
    ):
        super().__init__(text, path=path, has_bom=has_bom)
        self.source_extensions = list(source_extensions or DEFAULT_SOURCE_EXTENSIONS)
        self.id_factory = id_factory

    @classmethod
    def new(cls, path: str = "", **kwargs) -> "FilterDocument":
        """Create an empty filters document in the layout Visual Studio writes (CRLF, BOM)."""
        text = "\r\n".join(FILTERS_TEMPLATE_LINES) + "\r\n"
        return cls(text, path=path, has_bom=True, **kwargs)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def declared_nodes(self) -> List[str]:
        """Declared filter names in document order, without duplicates."""
        seen: Dict[str, None] = {}
        for decl in self._declarations():
            seen.setdefault(decl.name, None)
        return list(seen)

    def has_node(self, name: str) -> bool:
        """True if the filter is declared or at least one item is assigned to it."""
        if name in self.declared_nodes():
            return True
        return any(node == name for _, node in self._assignments())

    def file_to_node_map(self) -> Dict[str, str]:
        """Map include path -> assigned filter, for assigned files only."""
        return {e.include: e.node for e in self._entries() if e.node}

    def node_to_files_map(self) -> Dict[str, List[str]]:
        """
        Map filter -> assigned include paths.

        Declared filters without files are present with an empty list; filters
        only referenced by assignments are present too.
        """
        mapping: Dict[str, List[str]] = {name: [] for name in self.declared_nodes()}
        for e in self._entries():
            if e.node:
                mapping.setdefault(e.node, []).append(e.include)
        return mapping

    # -------------------------------------------------------------------------
    # Add
    # -------------------------------------------------------------------------

    def add(
            self,
            project_relative_paths: Iterable[str],
            hierarchy_relative_paths: Iterable[str],
    ) -> FilterAddResult:
        """
        Register files and declare the filters they are displayed under.

        The two sequences are parallel projections of the same files: the
        project-relative path is what gets recorded, the hierarchy-relative
        path decides the filter (its parent directory).

        Returns:
            FilterAddResult: Added include paths and newly declared filters.

        Raises:
            InvalidInputError: If the sequences differ in length.
        """
        project_paths = list(project_relative_paths)
        hierarchy_paths = list(hierarchy_relative_paths)
        if len(project_paths) != len(hierarchy_paths):
            raise InvalidInputError(
                f"Path projections differ in length ({len(project_paths)} vs {len(hierarchy_paths)})"
            )

        known: Set[str] = set(self.declared_nodes())
        created: List[str] = []
        files: List[str] = []
        entries: List[Tuple[str, str]] = []

        for project_path, hierarchy_path in zip(project_paths, hierarchy_paths):
            if not has_source_extension(project_path, self.source_extensions):
                continue
            include = to_include_path(project_path)
            node = _hierarchy_parent(hierarchy_path)
            if node:
                for name in ancestor_names(node) + [node]:
                    if name not in known:
                        known.add(name)
                        created.append(name)
            files.append(include)
            entries.append((include, node))

        if created:
            self._insert_declarations(created)
        if entries:
            self._insert_entries(entries)

        logger.info(f"Filters: {len(files)} files assigned, {len(created)} filters declared")
        return FilterAddResult(files=files, created_nodes=created)

    # -------------------------------------------------------------------------
    # Delete
    # -------------------------------------------------------------------------

    def delete(
            self,
            target: Optional[str] = None,
            extension: Optional[str] = None,
            pattern: Optional[re.Pattern] = None,
            negate: bool = False,
    ) -> FilterDeleteResult:
        """
        Remove files by extension, path/folder, or a whole filter by bare name.

        A target without separators or dots (and no extension) that names an
        existing filter selects every file assigned to it or to one of its
        descendants, then the filter subtree itself once it holds nothing.
        Any other target is matched as a path substring. In every mode,
        filters left without files and without children are deleted;
        filters that were already empty, or still referenced by a non-compile
        item, are left alone.

        Returns:
            FilterDeleteResult: Removed include paths and filter names.

        Raises:
            InvalidInputError: Unless exactly one of target/extension is given.
        """
        require_single_selector(target, extension)
        node_mode = is_node_target(target, extension) and self.has_node(target)

        entries = self._entries()
        declarations = self._declarations()
        before = _subtree_counts(entries)

        doomed: List[_Entry] = []
        for entry in entries:
            if node_mode:
                hit = entry.node is not None and (
                    entry.node == target or is_descendant(entry.node, target)
                )
            else:
                hit = entry_line_matches(self.lines[entry.start], target, extension)
            if hit and passes_refinement(entry.include, pattern, negate):
                doomed.append(entry)

        doomed_starts = {e.start for e in doomed}
        after = _subtree_counts([e for e in entries if e.start not in doomed_starts])
        after = _combined(after, self._foreign_counts(entries))

        targeted: Set[str] = set()
        if node_mode:
            targeted = {
                d.name for d in declarations
                if d.name == target or is_descendant(d.name, target)
            }
        removed_nodes = _emptied_nodes(declarations, before, after, targeted)

        spans = [(e.start, e.end) for e in doomed]
        spans += [(d.start, d.end) for d in declarations if d.name in removed_nodes]
        self._drop_spans(spans)

        nodes = _ordered_names(declarations, removed_nodes)
        files = [e.include for e in doomed]
        if files or nodes:
            logger.debug(f"Filters: removed {len(files)} files and {len(nodes)} filters")
        return FilterDeleteResult(files=files, nodes=nodes)

    # -------------------------------------------------------------------------
    # Rename and Merge
    # -------------------------------------------------------------------------

    def rename(self, source: str, target: str) -> RenameResult:
        """
        Rename a filter and rewrite every assignment pointing at it.

        When 'target' already exists nothing is changed; the result carries
        target_exists=True and the files currently under 'source' so the
        caller can offer a merge.

        Raises:
            NotFoundError: If 'source' is neither declared nor assigned.
            InvalidInputError: If a name is empty or both names are equal.
        """
        _require_distinct(source, target)
        if not self.has_node(source):
            raise NotFoundError(f"Filter '{source}' not found in project")

        entries = self._entries()
        if self.has_node(target):
            files = [e.include for e in entries if e.node == source]
            logger.debug(f"Rename target '{target}' exists; {len(files)} files would need a merge.")
            return RenameResult(target_exists=True, files=files)

        before = _subtree_counts(entries)
        for decl in self._declarations():
            if decl.name == source:
                self.replace_line(decl.start, replace_attribute(self.lines[decl.start], INCLUDE_ATTR, target))

        files = self._reassign(entries, source, target)
        self._prune_emptied(before)
        logger.info(f"Renamed filter '{source}' to '{target}' ({len(files)} files)")
        return RenameResult(target_exists=False, files=files)

    def merge(self, source: str, target: str) -> List[str]:
        """
        Move every file from 'source' to 'target' and drop the 'source' declaration.

        Works on assignments alone, so it is safe when 'source' is no longer
        declared. If 'target' has no declaration, the first 'source'
        declaration is renamed into it instead of being dropped.

        Returns:
            List[str]: Include paths that were moved.
        """
        _require_distinct(source, target)

        entries = self._entries()
        before = _subtree_counts(entries)
        moved = self._reassign(entries, source, target)

        declarations = self._declarations()
        source_decls = [d for d in declarations if d.name == source]
        target_declared = any(d.name == target for d in declarations)

        doomed = source_decls
        if source_decls and not target_declared:
            keep = source_decls[0]
            self.replace_line(keep.start, replace_attribute(self.lines[keep.start], INCLUDE_ATTR, target))
            doomed = source_decls[1:]
        self._drop_spans([(d.start, d.end) for d in doomed])

        self._prune_emptied(before)
        logger.info(f"Merged filter '{source}' into '{target}' ({len(moved)} files)")
        return moved

    # -------------------------------------------------------------------------
    # Scanning
    # -------------------------------------------------------------------------

    def _entries(self) -> List[_Entry]:
        found: List[_Entry] = []
        i = 0
        while i < len(self.lines):
            line = self.lines[i]
            if not starts_with(line, COMPILE_ENTRY_OPEN):
                i += 1
                continue
            end = find_element_end(self.lines, i, COMPILE_TAG)
            include = extract_attribute(line, INCLUDE_ATTR)
            node, node_line = None, None
            for j in range(i + 1, end + 1):
                if starts_with(self.lines[j], FILTER_ASSIGN_OPEN):
                    node = extract_inner_text(self.lines[j], FILTER_TAG)
                    node_line = j
                    break
            if include is not None:
                found.append(_Entry(i, end, include, node or None, node_line))
            i = end + 1
        return found

    def _assignments(self) -> List[Tuple[int, str]]:
        """(line, filter) of every '<Filter>' assignment, whatever item holds it."""
        found: List[Tuple[int, str]] = []
        for i, line in enumerate(self.lines):
            if starts_with(line, FILTER_ASSIGN_OPEN):
                node = extract_inner_text(line, FILTER_TAG)
                if node:
                    found.append((i, node))
        return found

    def _foreign_counts(self, entries: List[_Entry]) -> Dict[str, int]:
        """Subtree counts of assignments held by items other than compile entries."""
        compile_lines = {e.node_line for e in entries if e.node_line is not None}
        counts: Counter = Counter()
        for index, node in self._assignments():
            if index in compile_lines:
                continue
            for name in ancestor_names(node) + [node]:
                counts[name] += 1
        return dict(counts)

    def _declarations(self) -> List[_Declaration]:
        found: List[_Declaration] = []
        i = 0
        while i < len(self.lines):
            line = self.lines[i]
            if not starts_with(line, FILTER_DECL_OPEN):
                i += 1
                continue
            end = find_element_end(self.lines, i, FILTER_TAG)
            name = extract_attribute(line, INCLUDE_ATTR)
            if name is not None:
                found.append(_Declaration(i, end, name))
            i = end + 1
        return found

    # -------------------------------------------------------------------------
    # Editing helpers
    # -------------------------------------------------------------------------

    def _reassign(self, entries: List[_Entry], source: str, target: str) -> List[str]:
        """Point every item assigned to 'source' at 'target'; returns the moved compile entries."""
        for index, node in self._assignments():
            if node == source:
                self.replace_line(index, replace_inner_text(self.lines[index], FILTER_TAG, target))
        return [e.include for e in entries if e.node == source]

    def _prune_emptied(self, before: Dict[str, int]) -> List[str]:
        declarations = self._declarations()
        entries = self._entries()
        after = _combined(_subtree_counts(entries), self._foreign_counts(entries))
        removed = _emptied_nodes(declarations, before, after, set())
        self._drop_spans([(d.start, d.end) for d in declarations if d.name in removed])
        names = _ordered_names(declarations, removed)
        if names:
            logger.debug(f"Removed emptied filters: {', '.join(names)}")
        return names

    def _drop_spans(self, spans: List[Tuple[int, int]]) -> None:
        for start, end in sorted(spans, reverse=True):
            self.remove_lines(start, end)

    def _insert_declarations(self, names: List[str]) -> None:
        anchor = find_line(self.lines, FILTER_DECL_OPEN)
        indent = indentation_of(self.lines[anchor]) if anchor != -1 else INDENT_UNIT * 2
        block_lines: List[str] = []
        for name in names:
            block_lines += [
                f'{indent}<{FILTER_TAG} {INCLUDE_ATTR}="{name}">',
                f"{indent}{INDENT_UNIT}<{UNIQUE_ID_TAG}>{self.id_factory()}</{UNIQUE_ID_TAG}>",
                f"{indent}</{FILTER_TAG}>",
            ]
        self._append_to_group(anchor, block_lines)

    def _insert_entries(self, entries: List[Tuple[str, str]]) -> None:
        anchor = find_line(self.lines, COMPILE_ENTRY_OPEN)
        indent = indentation_of(self.lines[anchor]) if anchor != -1 else INDENT_UNIT * 2
        block_lines: List[str] = []
        for include, node in entries:
            if node:
                block_lines += [
                    f'{indent}<{COMPILE_TAG} {INCLUDE_ATTR}="{include}">',
                    f"{indent}{INDENT_UNIT}<{FILTER_TAG}>{node}</{FILTER_TAG}>",
                    f"{indent}</{COMPILE_TAG}>",
                ]
            else:
                block_lines.append(f'{indent}<{COMPILE_TAG} {INCLUDE_ATTR}="{include}" />')
        self._append_to_group(anchor, block_lines)

    def _append_to_group(self, anchor: int, block_lines: List[str]) -> None:
        """Append lines to the item group containing 'anchor', or to a new group."""
        block = None
        if anchor != -1:
            block = find_enclosing_block(self.lines, anchor, ITEM_GROUP_OPEN, ITEM_GROUP_CLOSE)
        if block is not None:
            self.insert_lines(block[1], block_lines)
            return

        root_close = rfind_line(self.lines, ROOT_CLOSE)
        position = root_close if root_close != -1 else len(self.lines)
        group = [f"{INDENT_UNIT}<ItemGroup>"] + block_lines + [f"{INDENT_UNIT}{ITEM_GROUP_CLOSE}"]
        self.insert_lines(position, group)

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _require_distinct(source: str, target: str) -> None:
    if not source or not target:
        raise InvalidInputError("Both a source and a target filter name are required")
    if source == target:
        raise InvalidInputError(f"Source and target filter are the same: '{source}'")


def _hierarchy_parent(path: str) -> str:
    """Parent filter of a hierarchy-relative file path ('' for top-level files)."""
    segments = [s for s in to_include_path(path).split(SEGMENT_DELIMITER) if s and s != "."]
    return SEGMENT_DELIMITER.join(segments[:-1])


def _subtree_counts(entries: Iterable[_Entry]) -> Dict[str, int]:
    """Count files per filter including every descendant's files."""
    counts: Counter = Counter()
    for entry in entries:
        if not entry.node:
            continue
        counts[entry.node] += 1
        for ancestor in ancestor_names(entry.node):
            counts[ancestor] += 1
    return dict(counts)


def _combined(first: Dict[str, int], second: Dict[str, int]) -> Dict[str, int]:
    merged = dict(first)
    for name, count in second.items():
        merged[name] = merged.get(name, 0) + count
    return merged


def _emptied_nodes(
        declarations: List[_Declaration],
        before: Dict[str, int],
        after: Dict[str, int],
        targeted: Set[str],
) -> Set[str]:
    """
    Select declared filters to drop after a mutation.

    Candidates are filters whose subtree held files before and holds none
    now, plus explicitly targeted ones. A candidate is dropped, deepest
    first, only when no declared descendant survives.
    """
    names = {d.name for d in declarations}
    candidates = {n for n in names if before.get(n, 0) > 0 and after.get(n, 0) == 0}
    candidates |= targeted & names

    removed: Set[str] = set()
    for name in sorted(candidates, key=lambda n: n.count(SEGMENT_DELIMITER), reverse=True):
        if after.get(name, 0):
            continue
        if any(is_descendant(other, name) and other not in removed for other in names):
            continue
        removed.add(name)
    return removed


def _ordered_names(declarations: List[_Declaration], selected: Set[str]) -> List[str]:
    ordered: Dict[str, None] = {}
    for decl in declarations:
        if decl.name in selected:
            ordered.setdefault(decl.name, None)
    return list(ordered)
