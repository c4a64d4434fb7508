"""Detects sitemaps and reads the URLs they list."""

from __future__ import annotations

import io
import threading
from collections.abc import Callable, Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor

from defusedxml.ElementTree import ParseError, iterparse

from seocrawl.crawler.robots_checker import Client


def _local_name(tag: str) -> str:
    return tag.rpartition("}")[2]


def _locations(content: bytes, entry_tag: str) -> Iterator[str]:
    """Yield the <loc> values of every entry_tag element in a sitemap document."""
    try:
        for _event, element in iterparse(io.BytesIO(content), events=("end",)):
            if _local_name(element.tag) != entry_tag:
                continue
            loc = next(
                (child.text for child in element if _local_name(child.tag) == "loc"),
                None,
            )
            if loc and loc.strip():
                yield loc.strip()
            element.clear()
    except (ParseError, ValueError):
        return


class SitemapChecker:
    """Checks whether sitemaps exist and feeds their URLs to a callback."""

    def __init__(self, client: Client, limit: int) -> None:
        self.limit = limit
        self._client = client

    def sitemap_exists(self, urls: Iterable[str]) -> bool:
        """Return True if any of the sitemap URLs answers with a 2xx status."""
        return any(self._url_exists(url) for url in urls)

    def parse_sitemaps(self, urls: Iterable[str], callback: Callable[[str], None]) -> None:
        """Call callback with every URL found in the sitemaps, up to the limit.

        Sitemap indexes are expanded into the sitemaps they list, and each
        sitemap is read in its own thread.
        """
        count = 0
        lock = threading.Lock()

        def parse_one(sitemap_url: str) -> None:
            nonlocal count
            content = self._fetch(sitemap_url)
            if content is None:
                return
            for location in _locations(content, "url"):
                callback(location)
                with lock:
                    count += 1
                    if count >= self.limit:
                        return

        with ThreadPoolExecutor() as pool:
            futures = [
                pool.submit(parse_one, sitemap)
                for url in urls
                for sitemap in self._check_index(url)
            ]
            for future in futures:
                future.result()

    def _url_exists(self, url: str) -> bool:
        try:
            result = self._client.head(url)
        except Exception:  # an unreachable sitemap simply does not exist
            return False
        return 200 <= result.response.status_code < 300

    def _fetch(self, url: str) -> bytes | None:
        try:
            result = self._client.get(url)
        except Exception:  # unreachable sitemaps are skipped
            return None
        response = result.response
        try:
            return response.content
        finally:
            response.close()

    def _check_index(self, url: str) -> list[str]:
        """Return the sitemaps listed by an index, or [url] if it is not an index."""
        content = self._fetch(url)
        sitemaps = list(_locations(content, "sitemap")) if content is not None else []
        return sitemaps or [url]