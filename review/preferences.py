"""
User Preferences

The flag workflow's "don't remind me again" switch, behind a small
interface so tests can use an in-memory store.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from config.settings import PREF_SUPPRESS_FLAG_PROMPT, PREFERENCES_FILE


class PreferencesInterface(ABC):
    """Read/write access to the suppress-flag-prompt preference"""

    @abstractmethod
    def get_suppress_flag_prompt(self) -> bool:
        """True if flagged recordings should be saved without asking"""

    @abstractmethod
    def set_suppress_flag_prompt(self, value: bool) -> None:
        """Persist the preference"""


class FilePreferences(PreferencesInterface):
    """
    Preferences stored as a small JSON document.

    A missing or unreadable file means "never suppressed". Writes go to a
    temporary file that is then renamed over the original.
    """

    def __init__(self, path: Optional[Path] = None):
        self.logger = logging.getLogger(__name__)
        self.path = Path(path) if path is not None else PREFERENCES_FILE

    def get_suppress_flag_prompt(self) -> bool:
        return bool(self._read().get(PREF_SUPPRESS_FLAG_PROMPT, False))

    def set_suppress_flag_prompt(self, value: bool) -> None:
        data = self._read()
        data[PREF_SUPPRESS_FLAG_PROMPT] = bool(value)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_file = self.path.with_suffix(".tmp")
        tmp_file.write_text(json.dumps(data, indent=2))
        tmp_file.replace(self.path)

        self.logger.info(f"Preference saved: {PREF_SUPPRESS_FLAG_PROMPT}={bool(value)}")

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}

        try:
            data = json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            self.logger.warning(f"Ignoring unreadable preferences file {self.path}: {e}")
            return {}

        if not isinstance(data, dict):
            self.logger.warning(f"Ignoring malformed preferences file {self.path}")
            return {}
        return data


class MemoryPreferences(PreferencesInterface):
    """In-memory preferences for tests"""

    def __init__(self, suppress_flag_prompt: bool = False):
        self.suppress_flag_prompt = suppress_flag_prompt
        self.write_count = 0

    def get_suppress_flag_prompt(self) -> bool:
        return self.suppress_flag_prompt

    def set_suppress_flag_prompt(self, value: bool) -> None:
        self.suppress_flag_prompt = bool(value)
        self.write_count += 1
