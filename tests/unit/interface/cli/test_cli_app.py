from __future__ import annotations

"""
Unit tests for the CLI Application Controller.

Verifies:
1. Command dispatch and user-facing output for every sub-command.
2. Confirmation prompts (--yes, declined, EOF) and dry runs.
3. Mapping of failures to exit codes.
"""

import json
from pathlib import Path
from typing import List

import pytest

from vsprojm.core.text import buffer as buffer_module
from vsprojm.domain.errors import DocumentIOError
from vsprojm.interface.cli.app import (
    EXIT_ERROR,
    EXIT_INCONSISTENT,
    EXIT_INTERRUPTED,
    EXIT_OK,
    EXIT_USAGE,
    main,
)

# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """An isolated preference file so the user's real config is never read."""
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"log_level": "ERROR"}), encoding="utf-8")
    return path


def _run(config_file: Path, *argv: str, answers: List[str] = None) -> int:
    replies = iter(answers or [])

    def fake_input(prompt: str) -> str:
        try:
            return next(replies)
        except StopIteration:
            raise EOFError from None

    return main(["--config", str(config_file), *argv], input_func=fake_input)


def _read(path: Path) -> bytes:
    return path.read_bytes()

# -----------------------------------------------------------------------------
# View
# -----------------------------------------------------------------------------

def test_view_prints_tree_and_summary(project_on_disk, config_file, capsys):
    project, _ = project_on_disk

    code = _run(config_file, "view", "-p", str(project))

    out = capsys.readouterr().out
    assert code == EXIT_OK
    assert out.splitlines()[0] == "📁 app.vcxproj"
    assert "📄 main.cpp" in out
    assert "📁 Header Files" in out
    assert "4 files, 4 filters" in out


def test_view_missing_project_is_an_error(tmp_path, config_file, capsys):
    code = _run(config_file, "v", "-p", str(tmp_path / "none.vcxproj"))

    assert code == EXIT_ERROR
    assert "ERROR: Project file not found" in capsys.readouterr().err

# -----------------------------------------------------------------------------
# Delete
# -----------------------------------------------------------------------------

def test_delete_with_both_selectors_is_invalid_input(project_on_disk, config_file, capsys):
    project, _ = project_on_disk
    before = _read(project)

    code = _run(config_file, "delete", "-p", str(project), "-t", "main.cpp", "-e", "cpp", "-y")

    assert code == EXIT_USAGE
    assert "cannot be combined" in capsys.readouterr().err
    assert _read(project) == before


def test_delete_malformed_regex_is_an_error(project_on_disk, config_file):
    project, _ = project_on_disk
    assert _run(config_file, "delete", "-p", str(project), "-e", "cpp", "-x", "(", "-y") == EXIT_ERROR


def test_delete_nothing_matched_writes_nothing(project_on_disk, config_file, capsys):
    project, filters = project_on_disk
    before = (_read(project), _read(filters))

    code = _run(config_file, "delete", "-p", str(project), "-t", "missing.cpp", "-y")

    assert code == EXIT_OK
    assert "Nothing matched" in capsys.readouterr().out
    assert (_read(project), _read(filters)) == before


def test_delete_declined_prompt_cancels(project_on_disk, config_file, capsys):
    project, filters = project_on_disk
    before = (_read(project), _read(filters))

    code = _run(config_file, "delete", "-p", str(project), "-t", "legacy.c", answers=["n"])

    out = capsys.readouterr().out
    assert code == EXIT_OK
    assert "src\\util\\legacy.c" in out
    assert "Cancelled." in out
    assert (_read(project), _read(filters)) == before


def test_delete_eof_at_prompt_cancels(project_on_disk, config_file):
    project, _ = project_on_disk
    before = _read(project)

    assert _run(config_file, "delete", "-p", str(project), "-t", "legacy.c") == EXIT_OK
    assert _read(project) == before


def test_delete_confirmed_updates_both_documents(project_on_disk, config_file, capsys):
    project, filters = project_on_disk

    code = _run(config_file, "delete", "-p", str(project), "-t", "legacy.c", answers=["yes"])

    assert code == EXIT_OK
    assert "Deleted 1 files and 0 filters." in capsys.readouterr().out
    assert b"legacy.c" not in _read(project)
    assert b"legacy.c" not in _read(filters)
    assert _read(project).startswith(b"\xef\xbb\xbf")


def test_delete_dry_run_leaves_files(project_on_disk, config_file, capsys):
    project, filters = project_on_disk
    before = (_read(project), _read(filters))

    code = _run(config_file, "delete", "-p", str(project), "-t", "src\\util", "--dryrun")

    out = capsys.readouterr().out
    assert code == EXIT_OK
    assert "DRY RUN" in out
    assert (_read(project), _read(filters)) == before


def test_assume_yes_from_config(project_on_disk, tmp_path, capsys):
    project, _ = project_on_disk
    cfg = tmp_path / "yes.json"
    cfg.write_text(json.dumps({"assume_yes": True}), encoding="utf-8")

    code = main(["--config", str(cfg), "delete", "-p", str(project), "-t", "legacy.c"],
                input_func=lambda _: pytest.fail("prompted despite assume_yes"))

    assert code == EXIT_OK
    assert b"legacy.c" not in _read(project)


def test_filters_write_failure_is_inconsistent(project_on_disk, config_file, monkeypatch, capsys):
    project, filters = project_on_disk
    real_save = buffer_module.save_document_text

    def failing_save(path, text, has_bom=False):
        if str(path).endswith(".filters"):
            raise DocumentIOError(str(path), "write", "disk full")
        real_save(path, text, has_bom)

    monkeypatch.setattr(buffer_module, "save_document_text", failing_save)
    before_filters = _read(filters)

    code = _run(config_file, "delete", "-p", str(project), "-t", "legacy.c", "-y")

    assert code == EXIT_INCONSISTENT
    assert b"legacy.c" not in _read(project)
    assert _read(filters) == before_filters
    assert "app.vcxproj.filters" in capsys.readouterr().err


def test_interrupt_maps_to_130(project_on_disk, config_file):
    project, _ = project_on_disk

    def interrupt(prompt: str) -> str:
        raise KeyboardInterrupt

    code = main(["--config", str(config_file), "delete", "-p", str(project), "-t", "legacy.c"],
                input_func=interrupt)
    assert code == EXIT_INTERRUPTED

# -----------------------------------------------------------------------------
# Rename
# -----------------------------------------------------------------------------

def test_rename_confirmed(project_on_disk, config_file, capsys):
    project, filters = project_on_disk

    code = _run(config_file, "rename", "-p", str(project), "-f", "Docs", "-t", "Documentation", "-y")

    assert code == EXIT_OK
    assert "Renamed 'Docs' to 'Documentation'." in capsys.readouterr().out
    assert b'<Filter Include="Documentation">' in _read(filters)


def test_rename_onto_existing_offers_merge(project_on_disk, config_file, capsys):
    project, filters = project_on_disk

    code = _run(config_file, "ren", "-p", str(project), "-f", "src\\util", "-t", "src", answers=["y"])

    out = capsys.readouterr().out
    assert code == EXIT_OK
    assert "Filter 'src' already exists." in out
    assert "Merged 2 files" in out
    assert b"<Filter>src\\util</Filter>" not in _read(filters)


def test_rename_unknown_source_is_an_error(project_on_disk, config_file):
    project, _ = project_on_disk
    assert _run(config_file, "rename", "-p", str(project), "-f", "Nope", "-t", "Other", "-y") == EXIT_ERROR


def test_rename_to_same_name_is_invalid(project_on_disk, config_file):
    project, _ = project_on_disk
    assert _run(config_file, "rename", "-p", str(project), "-f", "Docs", "-t", "Docs", "-y") == EXIT_USAGE

# -----------------------------------------------------------------------------
# Add and properties
# -----------------------------------------------------------------------------

def test_add_registers_new_sources(project_on_disk, config_file, capsys):
    project, filters = project_on_disk
    (project.parent / "net").mkdir()
    (project.parent / "net" / "socket.cpp").write_text("", encoding="utf-8")

    code = _run(config_file, "add", "-p", str(project), "-d", str(project.parent / "net"))

    out = capsys.readouterr().out
    assert code == EXIT_OK
    assert "Found 1 files to add:" in out
    assert b'Include="net\\socket.cpp"' in _read(project)
    assert b'Include="net\\socket.cpp" />' in _read(filters)


def test_add_nothing_found(project_on_disk, config_file, capsys):
    project, _ = project_on_disk
    code = _run(config_file, "add", "-p", str(project), "-e", "cxx")
    assert code == EXIT_OK
    assert "No *.cxx files found" in capsys.readouterr().out


def test_add_incdir_updates_every_configuration(project_on_disk, config_file, capsys):
    project, _ = project_on_disk

    code = _run(config_file, "incdir", "-p", str(project), "--path", "third_party")

    out = capsys.readouterr().out
    assert code == EXIT_OK
    assert "in 2 configurations" in out
    assert _read(project).count(b"third_party;") == 2


def test_add_lib_dry_run(project_on_disk, config_file, capsys):
    project, _ = project_on_disk
    before = _read(project)

    code = _run(config_file, "lib", "-p", str(project), "-n", "ws2_32.lib", "--dryrun")

    assert code == EXIT_OK
    assert "would be added" in capsys.readouterr().out
    assert _read(project) == before


def test_log_file_path_expands_variables(project_on_disk, config_file, tmp_path, monkeypatch):
    project, _ = project_on_disk
    monkeypatch.setenv("VSPROJM_TEST_LOGS", str(tmp_path / "logs"))

    code = _run(config_file, "--debug", "--log-file", "$VSPROJM_TEST_LOGS/run.log", "view", "-p", str(project))

    assert code == EXIT_OK
    assert "Running 'view'" in (tmp_path / "logs" / "run.log").read_text(encoding="utf-8")
