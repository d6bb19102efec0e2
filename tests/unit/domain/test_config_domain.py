from __future__ import annotations

"""
Unit tests for Configuration Domain Management.

Verifies:
1. Path resolution order (explicit, environment, user data dir).
2. Loading merges stored values over defaults and tolerates broken files.
3. Saving and reloading preserves values.
"""

import json
from pathlib import Path

from vsprojm.domain import config as config_module
from vsprojm.domain.config import (
    CONFIG_ENV_VAR,
    get_default_config,
    load_config,
    resolve_config_path,
    save_config,
)


def test_resolve_prefers_explicit_then_env(tmp_path: Path, monkeypatch):
    env_file = tmp_path / "env.json"
    monkeypatch.setenv(CONFIG_ENV_VAR, str(env_file))

    assert resolve_config_path(str(tmp_path / "x.json")) == str(tmp_path / "x.json")
    assert resolve_config_path() == str(env_file)


def test_resolve_defaults_to_user_data_dir(tmp_path: Path, monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.setattr(config_module, "get_user_data_dir", lambda: str(tmp_path))
    assert resolve_config_path() == str(tmp_path / "config.json")


def test_missing_file_returns_defaults(tmp_path: Path):
    assert load_config(str(tmp_path / "none.json")) == get_default_config()


def test_stored_values_override_defaults(tmp_path: Path):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"default_extension": "c", "assume_yes": True}), encoding="utf-8")

    cfg = load_config(str(path))

    assert cfg["default_extension"] == "c"
    assert cfg["assume_yes"] is True
    assert cfg["recursive"] is True


def test_corrupt_file_returns_defaults(tmp_path: Path):
    path = tmp_path / "cfg.json"
    path.write_text("{ not json", encoding="utf-8")
    assert load_config(str(path)) == get_default_config()


def test_non_object_file_returns_defaults(tmp_path: Path):
    path = tmp_path / "cfg.json"
    path.write_text("[1, 2]", encoding="utf-8")
    assert load_config(str(path)) == get_default_config()


def test_save_then_load(tmp_path: Path):
    path = tmp_path / "nested" / "cfg.json"
    cfg = get_default_config()
    cfg["source_extensions"] = ["c"]

    written = save_config(cfg, str(path))

    assert written == str(path)
    assert load_config(str(path))["source_extensions"] == ["c"]


def test_resolve_expands_variables_and_ignores_blank_env(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("VSPROJM_TEST_HOME", str(tmp_path))
    assert resolve_config_path("$VSPROJM_TEST_HOME/c.json") == str(tmp_path / "c.json")

    monkeypatch.setenv(CONFIG_ENV_VAR, "   ")
    monkeypatch.setattr(config_module, "get_user_data_dir", lambda: str(tmp_path))
    assert resolve_config_path() == str(tmp_path / "config.json")
