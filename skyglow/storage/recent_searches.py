"""Recent searches: newest-first, deduplicated, capped list persisted as JSON."""

import json
import logging

from skyglow.config.defaults import DEFAULT_RECENT_SEARCHES_KEY
from skyglow.errors import MalformedPersistedState
from skyglow.storage.kv_repo import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 5


def decode_searches(payload: str) -> list[str]:
    """Decode a persisted list. Raises MalformedPersistedState on bad input."""
    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, TypeError) as e:
        raise MalformedPersistedState(f"Recent searches are not valid JSON: {e}") from e
    if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
        raise MalformedPersistedState("Recent searches must be a list of strings")
    return data


class RecentSearchStore:
    def __init__(
        self,
        store: KeyValueStore,
        key: str = DEFAULT_RECENT_SEARCHES_KEY,
        capacity: int = DEFAULT_CAPACITY,
    ):
        self.store = store
        self.key = key
        self.capacity = capacity
        self._entries: list[str] = []
        self._loaded = False

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    def load(self) -> list[str]:
        """Return the persisted list; missing or malformed state yields []."""
        self._loaded = True
        payload = self.store.get(self.key)
        if payload is None:
            self._entries = []
            return []
        try:
            entries = decode_searches(payload)
        except MalformedPersistedState as e:
            logger.warning("Discarding persisted recent searches: %s", e)
            entries = []
        self._entries = entries[: self.capacity]
        return self.entries

    def record(self, location: str) -> list[str]:
        """Move ``location`` to the front, drop duplicates, cap and persist.

        The persisted list is read first if ``load`` has not run yet.
        """
        if not self._loaded:
            self.load()
        updated = [location] + [item for item in self._entries if item != location]
        self._entries = updated[: self.capacity]
        self.store.set(self.key, json.dumps(self._entries))
        return self.entries

    def close(self) -> None:
        close = getattr(self.store, "close", None)
        if close is not None:
            close()
