"""FIFO queue of crawl requests that tracks requests still being processed."""

from __future__ import annotations

import threading
from collections import deque

from seocrawl.crawler.messages import RequestMessage


class RequestQueue:
    """A thread-safe FIFO queue of request messages.

    The message at the head of the queue is marked active as soon as it
    becomes the head, and stays active until it is acknowledged by URL.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._pending: deque[RequestMessage] = deque()
        self._next: RequestMessage | None = None
        self._active: set[str] = set()
        self._closed = False

    def _promote(self) -> None:
        if self._next is None and self._pending:
            self._next = self._pending.popleft()
            self._active.add(self._next.url)

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("queue is closed")

    def push(self, message: RequestMessage) -> None:
        """Add a message to the end of the queue."""
        with self._cond:
            self._ensure_open()
            self._pending.append(message)
            self._promote()
            self._cond.notify_all()

    def poll(self, timeout: float | None = None) -> RequestMessage | None:
        """Remove and return the first message, waiting for one if needed.

        Returns None if the timeout expires or the queue is closed.
        """
        with self._cond:
            self._cond.wait_for(lambda: self._next is not None or self._closed, timeout)
            if self._closed or self._next is None:
                return None
            message = self._next
            self._next = None
            self._promote()
            self._cond.notify_all()
            return message

    def ack(self, url: str) -> None:
        """Mark the message for this URL as processed."""
        with self._cond:
            self._ensure_open()
            self._active.discard(url)
            self._cond.notify_all()

    def count(self) -> int:
        """Number of messages waiting behind the head of the queue."""
        with self._cond:
            if self._closed:
                return 0
            return len(self._pending)

    def active(self) -> bool:
        """True while messages are queued or not yet acknowledged."""
        with self._cond:
            if self._closed:
                return False
            return bool(self._active or self._pending)

    def close(self) -> None:
        """Stop the queue and wake up any waiting pollers."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()