from __future__ import annotations

"""
Unit tests for the i18n catalog.

Verifies:
1. The bundled English catalog loads.
2. Dot-notation lookup with interpolation and key fallback.
"""

from vsprojm.utils.i18n import I18n, i18n


def test_singleton_loads_english_catalog():
    assert i18n.is_loaded is True
    assert i18n.locale == "en"


def test_lookup_with_interpolation():
    assert i18n.t("cli.view.summary", files=3, filters=2) == "3 files, 2 filters"


def test_unknown_key_falls_back_to_key():
    assert i18n.t("cli.nope.missing") == "cli.nope.missing"
    assert i18n.t("cli.view") == "cli.view"


def test_missing_placeholder_returns_template():
    assert i18n.t("cli.view.summary", files=1) == "{files} files, {filters} filters"


def test_missing_locale_degrades_to_keys():
    catalog = I18n("xx")
    assert catalog.is_loaded is False
    assert catalog.t("cli.view.summary") == "cli.view.summary"
