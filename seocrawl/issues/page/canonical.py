"""Reporters for problems with a page's canonical URL."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import urlsplit

from seocrawl.issues.issue_types import ErrorType
from seocrawl.issues.page.base import PageIssueReporter, PageReport

_CANONICAL_HREF = '//head/link[@rel="canonical"]/@href'


def _canonical_hrefs(html_node: Any) -> list[str]:
    if html_node is None:
        return []
    return [str(href) for href in html_node.xpath(_CANONICAL_HREF)]


def _is_checked_html(page_report: PageReport) -> bool:
    return page_report.crawled and page_report.media_type == "text/html"


def _header(headers: Mapping[str, str], name: str) -> str:
    wanted = name.lower()
    return next((str(v) for k, v in headers.items() if str(k).lower() == wanted), "")


def _header_canonical(headers: Mapping[str, str]) -> str:
    """Return the canonical URL announced in the Link header, or ""."""
    canonical = ""
    for element in _header(headers, "Link").split(","):
        attrs = element.split(";")
        if len(attrs) == 2 and 'rel="canonical"' in attrs[1]:
            canonical = attrs[0].strip()[1:-1]
    return canonical


def _multiple_tags(page_report: PageReport, html_node: Any, headers: Mapping[str, str]) -> bool:
    if not _is_checked_html(page_report):
        return False
    return len(_canonical_hrefs(html_node)) > 1


def _relative_url(page_report: PageReport, html_node: Any, headers: Mapping[str, str]) -> bool:
    if not _is_checked_html(page_report):
        return False
    hrefs = _canonical_hrefs(html_node)
    if not hrefs:
        return False
    try:
        parsed = urlsplit(hrefs[0])
    except ValueError:
        return False
    return not parsed.scheme


def _mismatch(page_report: PageReport, html_node: Any, headers: Mapping[str, str]) -> bool:
    if not _is_checked_html(page_report):
        return False
    hrefs = _canonical_hrefs(html_node)
    if not hrefs:
        return False
    header_canonical = _header_canonical(headers)
    if not header_canonical:
        return False
    return hrefs[0] != header_canonical


def new_canonical_multiple_tags_reporter() -> PageIssueReporter:
    """Report HTML pages whose head holds more than one canonical link."""
    return PageIssueReporter(error_type=ErrorType.MULTIPLE_CANONICAL_TAGS, callback=_multiple_tags)


def new_canonical_relative_url_reporter() -> PageIssueReporter:
    """Report HTML pages whose canonical link uses a relative URL."""
    return PageIssueReporter(error_type=ErrorType.RELATIVE_CANONICAL_URL, callback=_relative_url)


def new_canonical_mismatch_reporter() -> PageIssueReporter:
    """Report HTML pages whose canonical link differs from the one in the Link header."""
    return PageIssueReporter(error_type=ErrorType.CANONICAL_MISMATCH, callback=_mismatch)