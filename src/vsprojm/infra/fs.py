from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides the persistence collaborator of the document layer (byte-exact
load/save of project documents), cross-platform path helpers, and the
OS-specific application data directory.
"""

import codecs
import os
from typing import Optional, Tuple

from vsprojm.domain.constants import FILTERS_SUFFIX
from vsprojm.domain.errors import DocumentIOError

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "vsprojm"
UNIX_APP_DIR_NAME = ".vsprojm"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Standards:
    - Windows: %LOCALAPPDATA%/vsprojm
    - Linux/Mac: ~/.vsprojm

    The directory is not created here; writers create it on demand.

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    if not path:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    return os.path.abspath(path)


def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def filters_path_for(project_path: str) -> str:
    """Return the companion filters document path ('app.vcxproj' -> 'app.vcxproj.filters')."""
    return f"{project_path}{FILTERS_SUFFIX}"


def project_relative_path(file_path: str, project_dir: str) -> str:
    """
    Express a file path relative to the project directory.

    Falls back to the absolute path when no relative form exists (e.g. a
    different drive on Windows).
    """
    try:
        return os.path.relpath(file_path, project_dir)
    except ValueError:
        return os.path.abspath(file_path)

# -----------------------------------------------------------------------------
# DOCUMENT PERSISTENCE API
# -----------------------------------------------------------------------------

def load_document_text(path: str) -> Tuple[str, bool]:
    """
    Read a document as text without any newline translation.

    Args:
        path: Document location.

    Returns:
        Tuple[str, bool]: (Decoded text, whether a UTF-8 BOM was present).

    Raises:
        DocumentIOError: If the file cannot be read or decoded.
    """
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise DocumentIOError(path, "read", e.strerror or str(e)) from e

    has_bom = data.startswith(codecs.BOM_UTF8)
    if has_bom:
        data = data[len(codecs.BOM_UTF8):]

    try:
        return data.decode("utf-8"), has_bom
    except UnicodeDecodeError as e:
        raise DocumentIOError(path, "decode", str(e)) from e


def save_document_text(path: str, text: str, has_bom: bool = False) -> None:
    """
    Write a document back exactly as given.

    Args:
        path: Document location.
        text: Full document text, line endings included.
        has_bom: Prefix the output with a UTF-8 BOM.

    Raises:
        DocumentIOError: If the file cannot be written.
    """
    payload = text.encode("utf-8")
    if has_bom:
        payload = codecs.BOM_UTF8 + payload

    try:
        with open(path, "wb") as f:
            f.write(payload)
    except OSError as e:
        raise DocumentIOError(path, "write", e.strerror or str(e)) from e
