"""The crawler: queues URLs of a site and requests them concurrently."""

from __future__ import annotations

import random
import threading
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from queue import Empty, SimpleQueue
from urllib.parse import urlsplit, urlunsplit

from seocrawl.crawler.messages import Method, RequestMessage, ResponseMessage
from seocrawl.crawler.request_queue import RequestQueue
from seocrawl.crawler.robots_checker import Client, RobotsChecker
from seocrawl.crawler.sitemap_checker import SitemapChecker
from seocrawl.crawler.urlstorage import URLStorage

# Upper bound, in seconds, of the random delay before each request.
RANDOM_DELAY = 1.5

# Number of threads that make requests for one crawl.
CONSUMER_THREADS = 2

# Maximum duration of a crawl, in seconds.
CRAWLER_TIMEOUT = 2 * 60 * 60

_POLL_INTERVAL = 0.05

ResponseCallback = Callable[[ResponseMessage], None]


class CrawlerError(Exception):
    """Base class of the errors raised when a request is refused."""


class BlockedByRobotsTxt(CrawlerError):
    """The URL is blocked by robots.txt."""

    def __init__(self) -> None:
        super().__init__("blocked by robots.txt")


class AlreadyVisited(CrawlerError):
    """The URL has already been visited."""

    def __init__(self) -> None:
        super().__init__("URL already visited")


class DomainNotAllowed(CrawlerError):
    """The URL's domain may not be crawled."""

    def __init__(self) -> None:
        super().__init__("domain not allowed")


@dataclass
class CrawlerOptions:
    """Options that control a crawl."""

    crawl_limit: int = 0
    ignore_robots_txt: bool = False
    follow_nofollow: bool = False
    include_noindex: bool = False
    crawl_sitemap: bool = False
    allow_subdomains: bool = False


@dataclass(frozen=True)
class CrawlerStatus:
    """A snapshot of a crawl's progress."""

    crawled: int
    crawling: bool
    discovered: int


def _host(url: str) -> str:
    return urlsplit(url).netloc.rpartition("@")[2]


class Crawler:
    """Crawls a site from a start URL, reporting every response to a callback."""

    def __init__(
        self,
        url: str,
        options: CrawlerOptions,
        client: Client,
        *,
        max_delay: float = RANDOM_DELAY,
        timeout: float = CRAWLER_TIMEOUT,
    ) -> None:
        parts = urlsplit(url)
        self.client = client
        self._url = url
        self._scheme = parts.scheme
        self._host = _host(url)
        self._options = options
        self._max_delay = max_delay
        self._queue = RequestQueue()
        self._storage = URLStorage()
        self._sitemap_storage = URLStorage()
        self._sitemap_checker = SitemapChecker(client, options.crawl_limit)
        self._robots_checker = RobotsChecker(client)
        self._sitemap_exists = False
        self._sitemap_is_blocked = False
        self._sitemaps: list[str] = []
        self._main_domain = self._host.removeprefix("www.")
        self._allowed_domains = {self._main_domain, "www." + self._main_domain}
        self._crawled = 0
        self._callback: ResponseCallback | None = None
        self._cancelled = threading.Event()
        self._deadline = time.monotonic() + timeout

    def on_response(self, callback: ResponseCallback) -> None:
        """Set the function called with every response message."""
        self._callback = callback

    def start(self) -> None:
        """Crawl until no URLs are left, the crawl limit is hit or the crawl is stopped."""
        try:
            self._setup_sitemaps()

            if self._sitemap_exists and self._options.crawl_sitemap:
                self._sitemap_checker.parse_sitemaps(self._sitemaps, self._load_sitemap_url)

            sitemap_loaded = False
            if not self._queue.active() and self._options.crawl_sitemap:
                self._queue_sitemap_urls()
                sitemap_loaded = True

            if not self._queue.active():
                return

            for message in self._crawl():
                self._queue.ack(message.url)

                message.in_sitemap = self._sitemap_storage.seen(message.url)
                message.blocked = self._robots_checker.is_blocked(message.url)
                message.timeout = message.error is not None

                self._crawled += 1

                if self._callback is not None:
                    self._callback(message)

                if not self._queue.active() and self._options.crawl_sitemap and not sitemap_loaded:
                    self._queue_sitemap_urls()
                    sitemap_loaded = True

                if not self._queue.active() or self._crawled >= self._options.crawl_limit:
                    break
        finally:
            self._cancelled.set()
            self._queue.close()

    def add_request(self, request: RequestMessage) -> None:
        """Queue a request, raising a CrawlerError if it may not be crawled."""
        if self._storage.seen(request.url):
            raise AlreadyVisited()

        self._storage.add(request.url)

        if not self._domain_is_allowed(_host(request.url)) and not request.ignore_domain:
            raise DomainNotAllowed()

        if not self._options.ignore_robots_txt and self._robots_checker.is_blocked(request.url):
            raise BlockedByRobotsTxt()

        self._queue.push(request)

    def status(self) -> CrawlerStatus:
        """Return the current progress of the crawl."""
        return CrawlerStatus(
            crawled=self._crawled,
            crawling=not self._done(),
            discovered=self._queue.count(),
        )

    def sitemap_exists(self) -> bool:
        """Return True if a sitemap was found for the site."""
        return self._sitemap_exists

    def robotstxt_exists(self) -> bool:
        """Return True if the site has a robots.txt file."""
        return self._robots_checker.exists(self._url)

    def sitemap_is_blocked(self) -> bool:
        """Return True if any of the site's sitemaps is blocked by robots.txt."""
        return self._sitemap_is_blocked

    def stop(self) -> None:
        """Stop the crawl."""
        self._cancelled.set()

    def _done(self) -> bool:
        return self._cancelled.is_set() or time.monotonic() >= self._deadline

    def _setup_sitemaps(self) -> None:
        sitemaps = self._robots_checker.get_sitemaps(self._url) or [
            f"{self._scheme}://{self._host}/sitemap.xml"
        ]

        allowed = []
        for sitemap in sitemaps:
            if self._robots_checker.is_blocked(sitemap):
                self._sitemap_is_blocked = True
                if not self._options.ignore_robots_txt:
                    continue
            allowed.append(sitemap)

        self._sitemaps = allowed
        self._sitemap_exists = self._sitemap_checker.sitemap_exists(sitemaps)

    def _crawl(self) -> Iterator[ResponseMessage]:
        results: SimpleQueue[ResponseMessage] = SimpleQueue()
        for _ in range(CONSUMER_THREADS):
            threading.Thread(target=self._consume, args=(results,), daemon=True).start()

        while not self._done():
            try:
                yield results.get(timeout=_POLL_INTERVAL)
            except Empty:
                continue

    def _consume(self, results: SimpleQueue[ResponseMessage]) -> None:
        while not self._done():
            request = self._queue.poll(timeout=_POLL_INTERVAL)
            if request is None:
                continue

            # A random pause keeps the crawl from overwhelming the server.
            if self._max_delay > 0 and self._cancelled.wait(random.uniform(0, self._max_delay)):
                return

            message = ResponseMessage(url=request.url, data=request.data)
            fetch = self.client.head if request.method is Method.HEAD else self.client.get
            try:
                result = fetch(request.url)
            except Exception as exc:  # the failure is reported in the message
                message.error = exc
            else:
                message.response = result.response
                message.ttfb = result.ttfb

            results.put(message)

    def _load_sitemap_url(self, url: str) -> None:
        try:
            parts = urlsplit(url)
        except ValueError:
            return
        if not parts.path:
            parts = parts._replace(path="/")
        self._sitemap_storage.add(urlunsplit(parts))

    def _queue_sitemap_urls(self) -> None:
        for url in self._sitemap_storage:
            if not self._storage.seen(url):
                self._storage.add(url)
                self._queue.push(RequestMessage(url=url))

    def _domain_is_allowed(self, domain: str) -> bool:
        if domain in self._allowed_domains:
            return True
        return self._options.allow_subdomains and domain.endswith(self._main_domain)