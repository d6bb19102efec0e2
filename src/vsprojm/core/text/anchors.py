from __future__ import annotations

"""
Text Anchor Utilities.

Locates structural regions inside a line-oriented markup document by scanning
for literal opening/closing markers. Lines are expected to carry their
original line endings. Every lookup reports "not found" through None or -1;
callers decide whether that means "create a new block" or "no match".
"""

from typing import List, Optional, Tuple

# -----------------------------------------------------------------------------
# LINE LEVEL HELPERS
# -----------------------------------------------------------------------------

def detect_newline(text: str) -> str:
    """Return the dominant line terminator of a document ('\\r\\n' or '\\n')."""
    return "\r\n" if "\r\n" in text else "\n"


def indentation_of(line: str) -> str:
    """Return the leading whitespace of a line."""
    return line[: len(line) - len(line.lstrip())]


def starts_with(line: str, marker: str) -> bool:
    """True if the line, ignoring indentation, begins with the marker."""
    return line.lstrip().startswith(marker)


def find_line(lines: List[str], marker: str, start: int = 0, stop: Optional[int] = None) -> int:
    """
    Find the first line in [start, stop) whose content begins with the marker.

    Returns:
        int: Line index, or -1 when absent.
    """
    end = len(lines) if stop is None else min(stop, len(lines))
    for i in range(max(start, 0), end):
        if starts_with(lines[i], marker):
            return i
    return -1


def rfind_line(lines: List[str], marker: str, stop: Optional[int] = None) -> int:
    """
    Find the last line before 'stop' that contains the marker anywhere.

    Returns:
        int: Line index, or -1 when absent.
    """
    end = len(lines) if stop is None else min(stop, len(lines))
    for i in range(end - 1, -1, -1):
        if marker in lines[i]:
            return i
    return -1

# -----------------------------------------------------------------------------
# BLOCK LOCATION
# -----------------------------------------------------------------------------

def find_enclosing_block(
        lines: List[str],
        index: int,
        open_marker: str,
        close_marker: str,
) -> Optional[Tuple[int, int]]:
    """
    Locate the block that encloses a given line.

    Scans backward from 'index' for the nearest line opening with
    'open_marker', then forward for the first line containing
    'close_marker'. Only one level of nesting is supported, which is all the
    project documents ever use for item groups.

    Args:
        lines: Document lines.
        index: A line known to be inside the block.
        open_marker: Literal that starts the opening line (e.g. '<ItemGroup').
        close_marker: Literal contained in the closing line.

    Returns:
        Optional[Tuple[int, int]]: (opening line, closing line) or None.
    """
    start = -1
    for i in range(min(index, len(lines) - 1), -1, -1):
        if _opens_block(lines[i], open_marker):
            start = i
            break
    if start == -1:
        return None

    for j in range(max(start, index), len(lines)):
        if close_marker in lines[j]:
            return start, j
    return None


def find_element_end(lines: List[str], start: int, tag: str) -> int:
    """
    Find the last line of the element whose opening tag is on line 'start'.

    Self-closing and single-line elements end on their own line. A missing
    closing tag also yields 'start', so callers touch only that line.
    """
    first = lines[start].rstrip()
    closing = f"</{tag}>"
    if first.endswith("/>") or closing in first:
        return start
    for j in range(start + 1, len(lines)):
        if closing in lines[j]:
            return j
    return start

# -----------------------------------------------------------------------------
# VALUE EXTRACTION
# -----------------------------------------------------------------------------

def extract_attribute(line: str, name: str) -> Optional[str]:
    """Return the value of attribute 'name' on a tag line, or None."""
    anchor = f'{name}="'
    begin = line.find(anchor)
    if begin == -1:
        return None
    begin += len(anchor)
    end = line.find('"', begin)
    if end == -1:
        return None
    return line[begin:end]


def replace_attribute(line: str, name: str, value: str) -> str:
    """Return the line with attribute 'name' set to 'value' (unchanged if absent)."""
    anchor = f'{name}="'
    begin = line.find(anchor)
    if begin == -1:
        return line
    begin += len(anchor)
    end = line.find('"', begin)
    if end == -1:
        return line
    return line[:begin] + value + line[end:]


def extract_inner_text(line: str, tag: str) -> Optional[str]:
    """Return the text between '<tag>' and '</tag>' on a single line, or None."""
    opening = f"<{tag}>"
    closing = f"</{tag}>"
    begin = line.find(opening)
    if begin == -1:
        return None
    begin += len(opening)
    end = line.find(closing, begin)
    if end == -1:
        return None
    return line[begin:end]


def replace_inner_text(line: str, tag: str, text: str) -> str:
    """Return the line with the inner text of 'tag' replaced (unchanged if absent)."""
    opening = f"<{tag}>"
    closing = f"</{tag}>"
    begin = line.find(opening)
    if begin == -1:
        return line
    begin += len(opening)
    end = line.find(closing, begin)
    if end == -1:
        return line
    return line[:begin] + text + line[end:]

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _opens_block(line: str, open_marker: str) -> bool:
    """Match '<ItemGroup>' and '<ItemGroup Label=...>' but not '<ItemGroupX>'."""
    content = line.lstrip()
    if not content.startswith(open_marker):
        return False
    rest = content[len(open_marker):]
    return not rest or rest[0] in " \t>/\r\n"
