"""Who is online, and under which connection.

At most one connection id is recorded per user. A later connection for the
same user replaces the entry (last connect wins) without touching the earlier
socket; it only redirects where future unicasts go.
"""

from __future__ import annotations

import threading


class PresenceTable:
    """In-memory ``user_id -> connection_id`` map owned by the gateway.

    The gateway runs on a single event loop, but sync Django code (the
    presence endpoint, publishers running under ``async_to_sync``) reads the
    table from worker threads, so every access goes through one lock. The lock
    is never held across an ``await``.
    """

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}
        self._lock = threading.Lock()

    def set(self, user_id: str, connection_id: str) -> str | None:
        """Point ``user_id`` at ``connection_id``; return the replaced id."""
        with self._lock:
            previous = self._entries.get(user_id)
            self._entries[user_id] = connection_id
        return previous

    def get(self, user_id: str) -> str | None:
        with self._lock:
            return self._entries.get(user_id)

    def delete_if_matches(self, user_id: str, connection_id: str) -> bool:
        """Remove the entry only if it still points at ``connection_id``.

        A disconnect arriving after the user already reconnected must not
        erase the newer mapping.
        """
        with self._lock:
            if self._entries.get(user_id) != connection_id:
                return False
            del self._entries[user_id]
        return True

    def online_users(self) -> list[str]:
        with self._lock:
            return sorted(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, user_id: object) -> bool:
        with self._lock:
            return user_id in self._entries
