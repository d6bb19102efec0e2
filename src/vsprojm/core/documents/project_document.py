from __future__ import annotations

"""
Compile-Unit Document (.vcxproj).

Owns the project file text: registers and removes compile entries and
injects per-configuration build properties, always through minimal line
edits so every untouched region keeps its original formatting.
"""

import logging
import re
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from vsprojm.core.components.filters import (
    entry_line_matches,
    has_source_extension,
    passes_refinement,
    require_single_selector,
    to_include_path,
)
from vsprojm.core.text.anchors import (
    extract_attribute,
    extract_inner_text,
    find_element_end,
    find_enclosing_block,
    find_line,
    indentation_of,
    rfind_line,
    starts_with,
)
from vsprojm.core.text.buffer import TextDocument
from vsprojm.domain.constants import (
    COMPILE_ENTRY_OPEN,
    COMPILE_TAG,
    CONDITION_ATTR,
    CONFIG_BLOCK_CLOSE,
    CONFIG_BLOCK_OPEN,
    DEFAULT_SOURCE_EXTENSIONS,
    INCLUDE_ATTR,
    ITEM_GROUP_CLOSE,
    ITEM_GROUP_OPEN,
    PROPERTY_NAMES,
    PROPERTY_SECTIONS,
    ROOT_CLOSE,
    inheritance_token,
)
from vsprojm.domain.errors import InvalidInputError

logger = logging.getLogger(__name__)

INDENT_UNIT = "  "


class ProjectDocument(TextDocument):
    """
    The compile-unit list of a Visual C++ project.

    Args:
        text: Raw document text.
        path: Location on disk.
        has_bom: Whether the file carries a UTF-8 BOM.
        source_extensions: Extensions accepted by add().
    """

    kind = "project file"

    def __init__(
            self,
            text: str,
            path: str = "",
            has_bom: bool = False,
            source_extensions: Optional[Sequence[str]] = None,
    ):
        super().__init__(text, path=path, has_bom=has_bom)
        self.source_extensions = list(source_extensions or DEFAULT_SOURCE_EXTENSIONS)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def project_files(self) -> List[str]:
        """Include paths of all compile entries, in document order."""
        return [include for _, _, include in self._iter_entries()]

    def configurations(self) -> List[str]:
        """Condition strings of all configuration blocks, in document order."""
        found = []
        for line in self.lines:
            if starts_with(line, CONFIG_BLOCK_OPEN):
                condition = extract_attribute(line, CONDITION_ATTR)
                if condition is not None:
                    found.append(condition)
        return found

    # -------------------------------------------------------------------------
    # Compile Entries
    # -------------------------------------------------------------------------

    def add(self, entries: Iterable[str]) -> List[str]:
        """
        Register source files as compile entries.

        Only paths with a recognized source extension are added. Existing
        entries are not checked, so adding a registered path twice yields a
        duplicate entry.

        Args:
            entries: Project-relative paths in either separator style.

        Returns:
            List[str]: Include paths that were added.
        """
        added = [
            to_include_path(p) for p in entries
            if has_source_extension(p, self.source_extensions)
        ]
        if not added:
            return []

        anchor = find_line(self.lines, COMPILE_ENTRY_OPEN)
        block = None
        if anchor != -1:
            block = find_enclosing_block(self.lines, anchor, ITEM_GROUP_OPEN, ITEM_GROUP_CLOSE)

        if block is not None:
            entry_indent = indentation_of(self.lines[anchor])
            new_lines = [f'{entry_indent}<{COMPILE_TAG} {INCLUDE_ATTR}="{p}" />' for p in added]
            self.insert_lines(block[1], new_lines)
        else:
            logger.debug("No compile item group found; creating one before the root closing tag.")
            new_lines = [f'{INDENT_UNIT * 2}<{COMPILE_TAG} {INCLUDE_ATTR}="{p}" />' for p in added]
            self._insert_item_group(new_lines)

        logger.info(f"Registered {len(added)} compile entries in {self.path or 'project file'}")
        return added

    def delete(
            self,
            target: Optional[str] = None,
            extension: Optional[str] = None,
            pattern: Optional[re.Pattern] = None,
            negate: bool = False,
    ) -> List[str]:
        """
        Remove compile entries selected by path, folder or extension.

        Args:
            target: File path (substring match) or folder path ending in a
                separator.
            extension: Extension without the dot.
            pattern: Optional regex refining the selection by include path.
            negate: Keep entries matching 'pattern' instead of removing them.

        Returns:
            List[str]: Removed include paths, in document order.

        Raises:
            InvalidInputError: Unless exactly one of target/extension is given.
        """
        require_single_selector(target, extension)

        doomed: List[Tuple[int, int, str]] = []
        for start, end, include in self._iter_entries():
            if not entry_line_matches(self.lines[start], target, extension):
                continue
            if not passes_refinement(include, pattern, negate):
                continue
            doomed.append((start, end, include))

        return self._drop_entries(doomed)

    def remove_entries(self, include_paths: Iterable[str]) -> List[str]:
        """Remove the compile entries whose include path is listed exactly."""
        wanted = set(include_paths)
        doomed = [span for span in self._iter_entries() if span[2] in wanted]
        return self._drop_entries(doomed)

    # -------------------------------------------------------------------------
    # Configuration Properties
    # -------------------------------------------------------------------------

    def inject_configuration_property(self, section: str, prop: str, value: str) -> List[str]:
        """
        Add a value to a build property in every configuration block.

        Missing sections and properties are created, the latter with the
        inheritance token. The value goes ahead of the inheritance token, or
        ahead of the existing content when there is no token. Calling twice
        with the same value adds it twice.

        Args:
            section: 'compile' or 'link'.
            prop: 'include-dirs', 'lib-dirs' or 'lib-deps'.
            value: Directory or library to add.

        Returns:
            List[str]: Configuration identifiers whose property was changed.

        Raises:
            InvalidInputError: On an unknown section or property selector.
        """
        if section not in PROPERTY_SECTIONS:
            raise InvalidInputError(f"Unknown property section '{section}'")
        if prop not in PROPERTY_NAMES:
            raise InvalidInputError(f"Unknown property '{prop}'")
        if not value:
            raise InvalidInputError("A property value must not be empty")

        section_tag = PROPERTY_SECTIONS[section]
        prop_tag = PROPERTY_NAMES[prop]
        touched: List[str] = []

        i = 0
        while i < len(self.lines):
            if starts_with(self.lines[i], CONFIG_BLOCK_OPEN):
                condition = extract_attribute(self.lines[i], CONDITION_ATTR) or ""
                if self._inject_into_block(i, section_tag, prop_tag, value):
                    touched.append(condition)
            i += 1

        if touched:
            logger.info(f"Added '{value}' to {prop_tag} in {len(touched)} configurations")
        else:
            logger.debug("No configuration block was changed.")
        return touched

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    def _iter_entries(self) -> Iterator[Tuple[int, int, str]]:
        """Yield (first line, last line, include path) for each compile entry."""
        i = 0
        while i < len(self.lines):
            line = self.lines[i]
            if starts_with(line, COMPILE_ENTRY_OPEN):
                end = find_element_end(self.lines, i, COMPILE_TAG)
                include = extract_attribute(line, INCLUDE_ATTR)
                if include is not None:
                    yield i, end, include
                i = end + 1
            else:
                i += 1

    def _drop_entries(self, spans: List[Tuple[int, int, str]]) -> List[str]:
        for start, end, _ in reversed(spans):
            self.remove_lines(start, end)
        removed = [include for _, _, include in spans]
        if removed:
            logger.debug(f"Removed {len(removed)} compile entries from {self.path or 'project file'}")
        return removed

    def _insert_item_group(self, entry_lines: List[str]) -> None:
        """Create a new <ItemGroup> holding 'entry_lines' before the root closing tag."""
        root_close = rfind_line(self.lines, ROOT_CLOSE)
        position = root_close if root_close != -1 else len(self.lines)
        group = [f"{INDENT_UNIT}<ItemGroup>"] + entry_lines + [f"{INDENT_UNIT}{ITEM_GROUP_CLOSE}"]
        self.insert_lines(position, group)

    def _inject_into_block(self, block_start: int, section_tag: str, prop_tag: str, value: str) -> bool:
        """Add 'value' to one configuration block; False when the property was left unchanged."""
        block_end = find_line(self.lines, CONFIG_BLOCK_CLOSE, block_start + 1)
        if block_end == -1:
            block_end = len(self.lines)

        block_indent = indentation_of(self.lines[block_start])
        section_open = f"<{section_tag}>"
        section_start = find_line(self.lines, section_open, block_start + 1, block_end)
        token = inheritance_token(prop_tag)
        fresh = f"<{prop_tag}>{value};{token}</{prop_tag}>"

        if section_start == -1:
            section_indent = block_indent + INDENT_UNIT
            self.insert_lines(block_start + 1, [
                f"{section_indent}{section_open}",
                f"{section_indent}{INDENT_UNIT}{fresh}",
                f"{section_indent}</{section_tag}>",
            ])
            return True

        section_end = find_line(self.lines, f"</{section_tag}>", section_start + 1, block_end)
        if section_end == -1:
            section_end = block_end

        prop_line = find_line(self.lines, f"<{prop_tag}", section_start + 1, section_end)
        if prop_line == -1:
            prop_indent = indentation_of(self.lines[section_start]) + INDENT_UNIT
            self.insert_lines(section_start + 1, [f"{prop_indent}{fresh}"])
            return True

        line = self.lines[prop_line]
        current = extract_inner_text(line, prop_tag)
        if current is None:
            if line.rstrip().endswith("/>"):
                self.replace_line(prop_line, f"{indentation_of(line)}{fresh}")
                return True
            logger.warning(f"{prop_tag} at line {prop_line + 1} is not a single-line value; left unchanged.")
            return False

        if token in current:
            updated = current.replace(token, f"{value};{token}", 1)
        elif current.strip():
            updated = f"{value};{current}"
        else:
            updated = value
        edited = line.replace(f"<{prop_tag}>{current}</{prop_tag}>", f"<{prop_tag}>{updated}</{prop_tag}>", 1)
        if edited == line:
            logger.warning(f"{prop_tag} at line {prop_line + 1} could not be rewritten; left unchanged.")
            return False
        self.replace_line(prop_line, edited)
        return True
