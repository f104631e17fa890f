"""In-memory webhook registry store.

Keyed by canonical topic, so a topic can never hold two entries. No locking:
callers run on a single event loop and the last write for a topic wins.
"""

from __future__ import annotations

import logging

from shopkit.webhooks.models import WebhookEntry
from shopkit.webhooks.queries import canonical_topic

logger = logging.getLogger(__name__)


class WebhookStore:
    """Topic -> WebhookEntry mapping owned by one WebhookRegistry."""

    def __init__(self) -> None:
        self._entries: dict[str, WebhookEntry] = {}

    def upsert(self, entry: WebhookEntry) -> WebhookEntry | None:
        """Insert ``entry``, replacing any entry for the same topic. Returns the replaced one."""
        key = canonical_topic(entry.topic)
        previous = self._entries.get(key)
        self._entries[key] = entry
        if previous is not None:
            logger.debug("Replaced webhook entry for %s (%s -> %s)", key, previous.path, entry.path)
        return previous

    def find_by_topic(self, topic: str) -> WebhookEntry | None:
        return self._entries.get(canonical_topic(topic))

    def find_by_path(self, path: str) -> WebhookEntry | None:
        for entry in self._entries.values():
            if entry.path == path:
                return entry
        return None

    def topics(self) -> list[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, topic: object) -> bool:
        return isinstance(topic, str) and canonical_topic(topic) in self._entries
