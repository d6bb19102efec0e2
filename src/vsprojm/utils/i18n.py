from __future__ import annotations

"""
Internationalization (i18n) Utility.

Singleton catalog of user-facing CLI strings. Keys use dot-notation into
nested JSON locale files; unknown keys resolve to themselves so a missing
entry degrades to a readable identifier instead of a crash.
"""

import json
import logging
import os
from typing import Any, Dict

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"
LOCALES_REL_PATH = os.path.join("..", "interface", "locales")

# -----------------------------------------------------------------------------
# I18N MANAGER SERVICE
# -----------------------------------------------------------------------------

class I18n:
    """Resource manager for locale-specific strings."""

    def __init__(self, locale: str = DEFAULT_LOCALE):
        self._locale = locale
        self._translations: Dict[str, Any] = {}
        self.is_loaded = False

        base_dir = os.path.dirname(os.path.abspath(__file__))
        self._locales_path = os.path.abspath(os.path.join(base_dir, LOCALES_REL_PATH))

        self.load_locale(locale)

    @property
    def locale(self) -> str:
        return self._locale

    def load_locale(self, locale: str) -> None:
        """
        Load a translation dictionary from the locales directory.

        A missing or unreadable file leaves an empty catalog; lookups then
        fall back to the key.
        """
        file_path = os.path.join(self._locales_path, f"{locale}.json")

        if not os.path.exists(file_path):
            logger.warning(f"I18n: locale file missing at '{file_path}'")
            self._translations = {}
            self.is_loaded = False
            return

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                self._translations = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"I18n: unreadable locale file {file_path}: {e}")
            self._translations = {}
            self.is_loaded = False
            return

        self._locale = locale
        self.is_loaded = True
        logger.debug(f"I18n: loaded locale '{locale}'")

    def t(self, key: str, **kwargs: Any) -> str:
        """
        Resolve and format a string by dot-notation key.

        Args:
            key: Path such as 'cli.delete.confirm'.
            **kwargs: Values interpolated with str.format.

        Returns:
            str: The formatted string, or the key itself when unresolved.
        """
        current: Any = self._translations
        for part in key.split("."):
            if not isinstance(current, dict):
                return key
            current = current.get(part)

        if not isinstance(current, str):
            return key

        if not kwargs:
            return current
        try:
            return current.format(**kwargs)
        except (KeyError, IndexError, ValueError) as e:
            logger.debug(f"I18n: formatting failed for '{key}': {e}")
            return current


i18n = I18n(DEFAULT_LOCALE)
