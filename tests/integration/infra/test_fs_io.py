from __future__ import annotations

"""
Integration tests for the FileSystem Infrastructure Layer.

Verifies byte-exact document persistence (BOM, line endings), error
reporting and the path helpers.
"""

import os
from pathlib import Path

import pytest

from vsprojm.domain.errors import DocumentIOError
from vsprojm.infra.fs import (
    filters_path_for,
    get_user_data_dir,
    load_document_text,
    normalize_path,
    project_relative_path,
    save_document_text,
)


def test_load_strips_and_reports_bom(tmp_path: Path) -> None:
    """TC-01: The BOM is detected and removed; CRLF is untouched."""
    path = tmp_path / "a.vcxproj"
    path.write_bytes(b"\xef\xbb\xbf<Project>\r\n</Project>\r\n")

    text, has_bom = load_document_text(str(path))

    assert has_bom is True
    assert text == "<Project>\r\n</Project>\r\n"


def test_save_round_trips_bytes(tmp_path: Path) -> None:
    """TC-02: Saving the loaded text reproduces the file exactly."""
    original = b"\xef\xbb\xbf<Project>\r\n  <ItemGroup />\n</Project>"
    path = tmp_path / "a.vcxproj"
    path.write_bytes(original)

    text, has_bom = load_document_text(str(path))
    save_document_text(str(path), text, has_bom)

    assert path.read_bytes() == original


def test_save_without_bom(tmp_path: Path) -> None:
    path = tmp_path / "plain.filters"
    save_document_text(str(path), "<Project />\n")
    assert path.read_bytes() == b"<Project />\n"


def test_missing_file_raises_document_error(tmp_path: Path) -> None:
    """TC-03: Read failures name the path and the action."""
    missing = tmp_path / "none.vcxproj"
    with pytest.raises(DocumentIOError) as exc:
        load_document_text(str(missing))
    assert "none.vcxproj" in str(exc.value)


def test_undecodable_file_raises_document_error(tmp_path: Path) -> None:
    path = tmp_path / "bad.vcxproj"
    path.write_bytes(b"\xff\xfe\x00<")
    with pytest.raises(DocumentIOError):
        load_document_text(str(path))


def test_write_into_missing_directory_raises(tmp_path: Path) -> None:
    with pytest.raises(DocumentIOError):
        save_document_text(str(tmp_path / "no" / "such" / "dir.vcxproj"), "x")


def test_path_helpers(tmp_path: Path) -> None:
    """TC-04: Companion path, project-relative paths and normalization."""
    assert filters_path_for("app.vcxproj") == "app.vcxproj.filters"
    assert project_relative_path(str(tmp_path / "src" / "a.cpp"), str(tmp_path)) == os.path.join("src", "a.cpp")
    assert normalize_path("", str(tmp_path)) == str(tmp_path)
    assert os.path.isabs(get_user_data_dir())
