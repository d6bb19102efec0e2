from __future__ import annotations

"""
Domain Error Hierarchy.

Every failure surfaced by the document layer and the project services is an
instance of 'VsprojmError', so the interface layer can map error kinds to
exit codes without inspecting messages.
"""

from typing import Optional

# -----------------------------------------------------------------------------
# BASE ERROR
# -----------------------------------------------------------------------------

class VsprojmError(Exception):
    """Root of all errors raised by vsprojm operations."""


# -----------------------------------------------------------------------------
# ERROR KINDS
# -----------------------------------------------------------------------------

class NotFoundError(VsprojmError):
    """A referenced filter, file or document does not exist."""


class InvalidInputError(VsprojmError):
    """Mutually exclusive selectors were both supplied, or none was."""


class MalformedPatternError(VsprojmError):
    """
    A refinement regular expression failed to compile.

    Attributes:
        pattern: The raw pattern text supplied by the caller.
    """

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"Invalid regex pattern '{pattern}': {reason}")
        self.pattern = pattern


class DocumentIOError(VsprojmError):
    """
    Loading or saving a document failed.

    Attributes:
        path: Filesystem path of the document involved.
    """

    def __init__(self, path: str, action: str, reason: str):
        super().__init__(f"Failed to {action} '{path}': {reason}")
        self.path = path
        self.action = action


class InconsistentCommitError(VsprojmError):
    """
    The project file was written but the filters file could not be.

    The two documents are out of sync and need manual reconciliation.

    Attributes:
        written_path: Document that was successfully persisted.
        failed_path: Document whose write failed.
    """

    def __init__(self, written_path: str, failed_path: str, cause: Optional[BaseException] = None):
        detail = f": {cause}" if cause else ""
        super().__init__(
            f"'{written_path}' was updated but '{failed_path}' could not be written{detail}. "
            f"The project and filters files are now out of sync."
        )
        self.written_path = written_path
        self.failed_path = failed_path
