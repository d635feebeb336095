import logging

from bettrcalendar.core.errors import StorageError

logger = logging.getLogger(__name__)


class CompletionOverlay:
    """Client-side "done" flags keyed by event id.

    Loaded once from storage; every change rewrites the whole mapping. Storage
    failures only cost durability, the in-memory flags keep working.
    """

    def __init__(self, storage):
        self.storage = storage
        self.flags = self._load()

    def _load(self):
        try:
            stored = self.storage.read_all()
        except StorageError as e:
            logger.warning("Ignoring unreadable done flags: %s", e)
            return {}
        if not isinstance(stored, dict):
            return {}
        return {str(event_id): bool(flag) for event_id, flag in stored.items()}

    def is_done(self, event_id):
        return self.flags.get(event_id, False)

    def set_done(self, event_id, done):
        self.flags[event_id] = bool(done)
        self._persist()

    def toggle(self, event_id):
        """Flip the flag for an event and return the new value."""
        done = not self.is_done(event_id)
        self.set_done(event_id, done)
        return done

    def _persist(self):
        try:
            self.storage.write_all(dict(self.flags))
        except StorageError as e:
            logger.warning("Done flags not saved: %s", e)
