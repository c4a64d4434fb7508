"""Reporters for problems with a page's headings."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from seocrawl.issues.issue_types import ErrorType
from seocrawl.issues.page.base import PageIssueReporter, PageReport

_HEADINGS = ("h1", "h2", "h3", "h4", "h5", "h6")


def _is_checked_html(page_report: PageReport) -> bool:
    return page_report.crawled and page_report.media_type == "text/html"


def _no_h1(page_report: PageReport, html_node: Any, headers: Mapping[str, str]) -> bool:
    if not _is_checked_html(page_report):
        return False
    return page_report.h1 == ""


def _headings_in_order(body: Any) -> bool:
    """Return True if no heading skips a level relative to the previous one."""
    current = 0
    for element in body.iter():
        if not isinstance(element.tag, str):
            continue
        tag = element.tag.lower()
        if tag not in _HEADINGS:
            continue
        level = _HEADINGS.index(tag)
        if level > current + 1:
            return False
        current = level
    return True


def _invalid_headings_order(
    page_report: PageReport, html_node: Any, headers: Mapping[str, str]
) -> bool:
    if not _is_checked_html(page_report):
        return False
    if html_node is None:
        return False
    bodies = html_node.xpath("//body")
    if not bodies:
        return False
    return not _headings_in_order(bodies[0])


def new_no_h1_reporter() -> PageIssueReporter:
    """Report HTML pages without an H1 heading."""
    return PageIssueReporter(error_type=ErrorType.NO_H1, callback=_no_h1)


def new_valid_headings_order_reporter() -> PageIssueReporter:
    """Report HTML pages whose headings skip levels."""
    return PageIssueReporter(
        error_type=ErrorType.NOT_VALID_HEADINGS, callback=_invalid_headings_order
    )