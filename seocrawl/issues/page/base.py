"""Building blocks of the reporters that check one page at a time."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import SplitResult, urlsplit

from seocrawl.issues.issue_types import ErrorType


@dataclass
class PageReport:
    """The data gathered for one crawled page."""

    url: str = ""
    crawled: bool = False
    media_type: str = ""
    status_code: int = 0
    words: int = 0
    depth: int = 0
    title: str = ""
    description: str = ""
    h1: str = ""
    lang: str = ""
    canonical: str = ""

    @property
    def parsed_url(self) -> SplitResult:
        """The page URL split into its components."""
        return urlsplit(self.url)


# Arguments: the page report, the parsed HTML document (an lxml element, or
# None when there is none) and the response headers.
PageIssueCallback = Callable[[PageReport, Any, Mapping[str, str]], bool]


@dataclass
class PageIssueReporter:
    """Pairs an issue type with the check that detects it on a single page."""

    error_type: ErrorType
    callback: PageIssueCallback

    def __call__(
        self,
        page_report: PageReport,
        html_node: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> bool:
        """Return True if the page has the issue."""
        return self.callback(page_report, html_node, headers if headers is not None else {})