import json
import logging
import os

from bettrcalendar.core.errors import StorageError

logger = logging.getLogger(__name__)


class JsonFileStorage:
    """Reads and rewrites a whole mapping as one JSON file."""

    def __init__(self, path):
        self.path = path

    def read_all(self):
        """Return the stored mapping, or an empty one if nothing was saved yet."""
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"Could not read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Unexpected data in {self.path}")
        return data

    def write_all(self, mapping):
        """Replace the stored mapping."""
        directory = os.path.dirname(self.path)
        tmp_path = f"{self.path}.tmp"
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(tmp_path, 'w') as f:
                json.dump(mapping, f)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Could not write {self.path}: {e}") from e
        logger.debug("Saved %d entries to %s", len(mapping), self.path)


class MemoryStorage:
    """In-process storage with the same contract as JsonFileStorage."""

    def __init__(self, initial=None):
        self.data = dict(initial or {})
        self.writes = 0

    def read_all(self):
        return dict(self.data)

    def write_all(self, mapping):
        self.data = dict(mapping)
        self.writes += 1
