from __future__ import annotations

"""
Unit tests for the Candidate File Discovery Service.

Verifies:
1. Sorted, case-insensitive extension discovery with both path projections.
2. Recursion control and regex refinement on the scan-relative path.
3. A missing scan directory is reported as NotFoundError.
"""

import os
import re
from pathlib import Path

import pytest

from vsprojm.core.services.scanner import discover_candidates
from vsprojm.domain.errors import NotFoundError


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """
    Structure:
        proj/
            app.vcxproj
            main.cpp
            src/
                b.CPP
                a.cpp
                notes.txt
                test/
                    a_test.cpp
    """
    root = tmp_path / "proj"
    (root / "src" / "test").mkdir(parents=True)
    (root / "app.vcxproj").write_text("<Project />", encoding="utf-8")
    (root / "main.cpp").write_text("", encoding="utf-8")
    (root / "src" / "b.CPP").write_text("", encoding="utf-8")
    (root / "src" / "a.cpp").write_text("", encoding="utf-8")
    (root / "src" / "notes.txt").write_text("", encoding="utf-8")
    (root / "src" / "test" / "a_test.cpp").write_text("", encoding="utf-8")
    return root


def test_discovers_sorted_with_both_projections(source_tree: Path):
    found = discover_candidates(str(source_tree / "src"), str(source_tree), "cpp")

    assert [c.hierarchy_path for c in found] == [
        "a.cpp",
        "b.CPP",
        os.path.join("test", "a_test.cpp"),
    ]
    assert [c.project_path for c in found] == [
        os.path.join("src", "a.cpp"),
        os.path.join("src", "b.CPP"),
        os.path.join("src", "test", "a_test.cpp"),
    ]


def test_non_recursive_scan_stays_in_directory(source_tree: Path):
    found = discover_candidates(str(source_tree), str(source_tree), ".cpp", recursive=False)
    assert [c.project_path for c in found] == ["main.cpp"]


def test_regex_refinement_and_negation(source_tree: Path):
    rx = re.compile(r"test")
    kept = discover_candidates(str(source_tree), str(source_tree), "cpp", pattern=rx)
    dropped = discover_candidates(str(source_tree), str(source_tree), "cpp", pattern=rx, negate=True)

    assert [c.hierarchy_path for c in kept] == [os.path.join("src", "test", "a_test.cpp")]
    assert os.path.join("src", "test", "a_test.cpp") not in [c.hierarchy_path for c in dropped]
    assert len(kept) + len(dropped) == 4


def test_scan_outside_project_dir_uses_relative_escape(tmp_path: Path, source_tree: Path):
    other = tmp_path / "shared"
    other.mkdir()
    (other / "x.c").write_text("", encoding="utf-8")

    found = discover_candidates(str(other), str(source_tree), "c")

    assert found[0].project_path == os.path.join("..", "shared", "x.c")
    assert found[0].hierarchy_path == "x.c"


def test_missing_directory_raises(tmp_path: Path):
    with pytest.raises(NotFoundError):
        discover_candidates(str(tmp_path / "missing"), str(tmp_path), "cpp")
