"""Checks URLs against the robots.txt rules of their host."""

from __future__ import annotations

import threading
from typing import Protocol
from urllib.parse import parse_qsl, urlencode, urlsplit
from urllib.robotparser import RobotFileParser

from seocrawl.crawler.messages import ClientResponse


class Client(Protocol):
    """The HTTP client interface used by the crawler and its checkers."""

    def get(self, url: str) -> ClientResponse: ...

    def head(self, url: str) -> ClientResponse: ...

    def user_agent(self) -> str: ...


def _host(url: str) -> tuple[str, str]:
    parts = urlsplit(url)
    return parts.scheme, parts.netloc.rpartition("@")[2]


def _encode_query(query: str) -> str:
    """Re-encode a query string with its keys in sorted order."""
    pairs = parse_qsl(query, keep_blank_values=True)
    pairs.sort(key=lambda pair: pair[0])
    return urlencode(pairs)


class RobotsChecker:
    """Fetches and caches robots.txt files per host and answers questions about them."""

    def __init__(self, client: Client) -> None:
        self._client = client
        self._robots: dict[str, RobotFileParser | None] = {}
        self._lock = threading.Lock()

    def is_blocked(self, url: str) -> bool:
        """Return True if the URL is disallowed by its host's robots.txt."""
        robots = self._robots_for(url)
        if robots is None:
            return False

        parts = urlsplit(url)
        path = parts.path
        if parts.query:
            path += "?" + _encode_query(parts.query)

        return not robots.can_fetch(self._client.user_agent(), path)

    def exists(self, url: str) -> bool:
        """Return True if the URL's host has a valid robots.txt file."""
        return self._robots_for(url) is not None

    def get_sitemaps(self, url: str) -> list[str]:
        """Return the sitemaps listed in the robots.txt file of the URL's host."""
        robots = self._robots_for(url)
        if robots is None:
            return []
        return list(robots.site_maps() or [])

    def _robots_for(self, url: str) -> RobotFileParser | None:
        scheme, host = _host(url)
        with self._lock:
            if host not in self._robots:
                self._robots[host] = self._fetch(scheme, host)
            return self._robots[host]

    def _fetch(self, scheme: str, host: str) -> RobotFileParser | None:
        try:
            result = self._client.get(f"{scheme}://{host}/robots.txt")
        except Exception:  # any failure means the host has no usable robots.txt
            return None

        response = result.response
        try:
            if response.status_code != 200:
                return None
            text = response.text
        finally:
            response.close()

        parser = RobotFileParser()
        parser.parse(text.splitlines())
        parser.modified()
        return parser