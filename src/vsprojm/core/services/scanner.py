from __future__ import annotations

"""
Candidate File Discovery Service.

Walks a directory for source files of a given extension and projects each
hit twice: relative to the project file (what gets recorded) and relative
to the scanned directory (what decides the filter).
"""

import logging
import os
import re
from typing import List, Optional

from vsprojm.core.components.filters import extension_of, passes_refinement
from vsprojm.domain.errors import NotFoundError
from vsprojm.domain.project_models import CandidateFile
from vsprojm.infra.fs import project_relative_path

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def discover_candidates(
        scan_dir: str,
        project_dir: str,
        extension: str,
        recursive: bool = True,
        pattern: Optional[re.Pattern] = None,
        negate: bool = False,
) -> List[CandidateFile]:
    """
    Find source files to register in a project.

    Directories and files are visited in sorted order so repeated runs
    produce identical documents.

    Args:
        scan_dir: Directory to scan.
        project_dir: Directory holding the project file.
        extension: Extension to collect, compared case-insensitively.
        recursive: Descend into subdirectories.
        pattern: Optional regex matched against the scan-relative path.
        negate: Keep files NOT matching 'pattern'.

    Returns:
        List[CandidateFile]: Candidates in walk order.

    Raises:
        NotFoundError: If 'scan_dir' is not a directory.
    """
    scan_abs = os.path.abspath(scan_dir)
    if not os.path.isdir(scan_abs):
        raise NotFoundError(f"Directory to scan does not exist: {scan_dir}")

    wanted = extension.lower().lstrip(".")
    project_abs = os.path.abspath(project_dir)
    found: List[CandidateFile] = []

    for root, dirs, files in os.walk(scan_abs):
        dirs.sort()
        files.sort()
        if not recursive:
            dirs[:] = []

        for file_name in files:
            if extension_of(file_name) != wanted:
                continue

            file_path = os.path.join(root, file_name)
            rel_scan = os.path.relpath(file_path, scan_abs)
            if not passes_refinement(rel_scan, pattern, negate):
                continue

            found.append(CandidateFile(
                project_path=project_relative_path(file_path, project_abs),
                hierarchy_path=rel_scan,
            ))

    logger.debug(f"Scan of '{scan_abs}' found {len(found)} *.{wanted} files")
    return found
