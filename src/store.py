"""
File-backed storage for bracket documents.

Each bracket is one JSON file under <data_dir>/brackets/. Writers are
serialized through a single FileLock on the data directory.
"""
import json
import logging
import os
import re
from typing import Callable, Dict, List, Optional

from filelock import FileLock

from engine.export import summarize
from engine.models import BracketDocument

logger = logging.getLogger(__name__)

_BRACKET_ID_RE = re.compile(r'^[A-Za-z0-9][A-Za-z0-9-]*$')


class BracketStore:
    def __init__(self, data_dir: str, lock_timeout: float = 10):
        self.data_dir = data_dir
        self.brackets_dir = os.path.join(data_dir, 'brackets')
        os.makedirs(self.brackets_dir, exist_ok=True)
        self._lock = FileLock(os.path.join(data_dir, '.lock'), timeout=lock_timeout)

    def _path(self, bracket_id: str) -> Optional[str]:
        """Return the file path for a bracket id, or None if the id is not a safe file name."""
        if not bracket_id or not _BRACKET_ID_RE.match(bracket_id):
            return None
        return os.path.join(self.brackets_dir, f'{bracket_id}.json')

    def get(self, bracket_id: str) -> Optional[BracketDocument]:
        """Load a bracket. Returns None if it does not exist or cannot be parsed."""
        path = self._path(bracket_id)
        if path is None or not os.path.exists(path):
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return BracketDocument.from_dict(json.load(f))
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error(f'Failed to parse bracket document {path}: {e}')
            return None

    def save(self, bracket: BracketDocument) -> None:
        path = self._path(bracket.id)
        if path is None:
            raise ValueError(f'Invalid bracket id: {bracket.id!r}')
        with self._lock:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(bracket.to_dict(), f, indent=2)

    def update(self, bracket_id: str, change: Callable[[BracketDocument], BracketDocument]) -> Optional[BracketDocument]:
        """
        Load, change and save a bracket while holding the lock.
        Returns the saved bracket, or None if it does not exist.
        """
        with self._lock:
            bracket = self.get(bracket_id)
            if bracket is None:
                return None
            bracket = change(bracket)
            self.save(bracket)
            return bracket

    def delete(self, bracket_id: str) -> bool:
        """Delete a bracket. Returns False if there was nothing to delete."""
        path = self._path(bracket_id)
        with self._lock:
            if path is None or not os.path.exists(path):
                return False
            os.remove(path)
            return True

    def list_summaries(self) -> List[Dict]:
        """Summaries of all readable brackets, most recently updated first."""
        summaries = []
        for filename in sorted(os.listdir(self.brackets_dir)):
            if not filename.endswith('.json'):
                continue
            bracket = self.get(filename[:-len('.json')])
            if bracket is None:
                logger.warning(f'Skipping unreadable bracket file {filename}')
                continue
            summaries.append(summarize(bracket))
        summaries.sort(key=lambda s: s['updatedAt'], reverse=True)
        return summaries
