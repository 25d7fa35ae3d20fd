"""Draft persistence for the cover being edited.

The whole CoverDocument is saved as JSON under a versioned key, in an
OS-appropriate data directory, so an interrupted session can be resumed.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .composition import CoverDocument
from .constants import CoverConstants

logger = logging.getLogger(__name__)


class DraftStore:
    """Saves and restores cover drafts.

    Drafts live in one JSON file in the user's data directory, keyed by
    schema name so that a future format can sit next to this one.
    """

    def __init__(self, data_dir: Optional[Path] = None,
                 key: str = CoverConstants.DRAFT_SCHEMA_KEY):
        self._data_dir = Path(data_dir) if data_dir else Path(
            platformdirs.user_data_dir("covermark", "covermark"))
        self._drafts_file = self._data_dir / "drafts.json"
        self._key = key
        self._cache: Optional[Dict[str, Any]] = None

    @property
    def path(self) -> Path:
        return self._drafts_file

    def _ensure_data_dir(self) -> None:
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Could not create data directory {self._data_dir}: {e}")

    def _load_all(self) -> Dict[str, Any]:
        """Load every stored draft.

        Returns:
            Mapping of schema key to saved state. Empty if the file is
            missing or unreadable.
        """
        if self._cache is not None:
            return self._cache

        if not self._drafts_file.exists():
            self._cache = {}
            return self._cache

        try:
            with open(self._drafts_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not load drafts from {self._drafts_file}: {e}")
            self._cache = {}
            return self._cache

        if not isinstance(data, dict):
            logger.warning("Drafts file has invalid format (not a dict), ignoring")
            data = {}
        self._cache = data
        return self._cache

    def _save_all(self, drafts: Dict[str, Any]) -> bool:
        self._ensure_data_dir()
        temp_file = self._drafts_file.with_suffix('.tmp')

        try:
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(drafts, f, indent=2, ensure_ascii=False)
            temp_file.replace(self._drafts_file)
            self._cache = drafts
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Could not save drafts to {self._drafts_file}: {e}")
            try:
                if temp_file.exists():
                    temp_file.unlink()
            except OSError:
                pass
            return False

    def save(self, document: CoverDocument) -> bool:
        """Save the document as the current draft.

        Returns:
            True if the draft was written, False otherwise.
        """
        drafts = dict(self._load_all())
        drafts[self._key] = document.to_dict()
        return self._save_all(drafts)

    def load(self) -> Optional[CoverDocument]:
        """Restore the current draft, or None if there is none."""
        state = self._load_all().get(self._key)
        if state is None:
            return None
        if not isinstance(state, dict):
            logger.warning(f"Draft {self._key} is not a dict, ignoring")
            return None
        return CoverDocument.from_dict(state)

    def clear(self) -> bool:
        drafts = dict(self._load_all())
        if drafts.pop(self._key, None) is None:
            return True
        return self._save_all(drafts)

    def clear_cache(self) -> None:
        """Forget what was read from disk."""
        self._cache = None


# Global instance
_store: Optional[DraftStore] = None


def get_store() -> DraftStore:
    """Get the global draft store instance."""
    global _store
    if _store is None:
        _store = DraftStore()
    return _store
