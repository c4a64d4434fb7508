"""Thread-safe record of URLs that have already been seen."""

from __future__ import annotations

import threading
from collections.abc import Iterator


class URLStorage:
    """A set of URL strings safe to share between threads."""

    def __init__(self) -> None:
        self._seen: set[str] = set()
        self._lock = threading.Lock()

    def seen(self, url: str) -> bool:
        """Return True if the URL has already been added."""
        with self._lock:
            return url in self._seen

    def add(self, url: str) -> None:
        """Record a URL as seen."""
        with self._lock:
            self._seen.add(url)

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            snapshot = list(self._seen)
        return iter(snapshot)

    def __contains__(self, url: object) -> bool:
        return isinstance(url, str) and self.seen(url)

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)