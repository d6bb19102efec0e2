from __future__ import annotations

"""
Line Buffer Document.

A minimal structural editor: the document is an ordered list of raw lines,
each keeping its own terminator. Edits insert, replace or drop whole lines;
every untouched line is written back byte for byte, so a load/save cycle
without mutations reproduces the original file exactly.
"""

import copy
import logging
from typing import Any, List, Optional, Type, TypeVar

from vsprojm.core.text.anchors import detect_newline
from vsprojm.infra.fs import load_document_text, save_document_text

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="TextDocument")

# -----------------------------------------------------------------------------
# DOCUMENT BASE
# -----------------------------------------------------------------------------

class TextDocument:
    """
    Mutable in-memory document backed by raw lines.

    Attributes:
        path: Location the document was loaded from (and is saved to).
        lines: Raw lines including their terminators.
        newline: Terminator used for lines created by edits.
        has_bom: Whether the persisted file starts with a UTF-8 BOM.
    """

    kind = "document"

    def __init__(self, text: str, path: str = "", has_bom: bool = False):
        self.path = path
        self.has_bom = has_bom
        self.newline = detect_newline(text)
        self.lines: List[str] = _split_keepends(text)

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    @classmethod
    def load(cls: Type[T], path: str, **kwargs: Any) -> T:
        """Read a document from disk; raises DocumentIOError on failure."""
        text, has_bom = load_document_text(path)
        logger.debug(f"Loaded {cls.kind} '{path}' ({len(text)} chars, bom={has_bom})")
        return cls(text, path=path, has_bom=has_bom, **kwargs)

    def save(self, path: Optional[str] = None) -> None:
        """Write the document back; raises DocumentIOError on failure."""
        target = path or self.path
        save_document_text(target, self.text, self.has_bom)
        logger.debug(f"Saved {self.kind} '{target}'")

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    @property
    def text(self) -> str:
        return "".join(self.lines)

    def copy(self: T) -> T:
        """Return an independent copy; mutations on it never reach this document."""
        clone = copy.copy(self)
        clone.lines = list(self.lines)
        return clone

    # -------------------------------------------------------------------------
    # Line Edits
    # -------------------------------------------------------------------------

    def insert_lines(self, index: int, contents: List[str]) -> None:
        """
        Insert new lines before line 'index'.

        Args:
            index: Position of the new first line (len(lines) appends).
            contents: Line contents without terminators.
        """
        if not contents:
            return
        if index > 0 and index == len(self.lines) and not self.lines[-1].endswith("\n"):
            self.lines[-1] += self.newline
        self.lines[index:index] = [c + self.newline for c in contents]

    def remove_lines(self, start: int, end: int) -> None:
        """Remove lines start..end inclusive."""
        del self.lines[start:end + 1]

    def replace_line(self, index: int, content: str) -> None:
        """Replace a line, keeping its original terminator."""
        old = self.lines[index]
        ending = old[len(old.rstrip("\r\n")):]
        self.lines[index] = content.rstrip("\r\n") + ending

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _split_keepends(text: str) -> List[str]:
    """Split on '\\n' only, keeping terminators (and any '\\r') on each line."""
    parts = text.split("\n")
    lines = [p + "\n" for p in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines
