"""Reporters for problems with a page's meta description."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from seocrawl.issues.issue_types import ErrorType
from seocrawl.issues.page.base import PageIssueReporter, PageReport

# Descriptions shorter than this many bytes are reported as short.
MIN_DESCRIPTION_LENGTH = 80

# Descriptions longer than this many bytes are reported as long.
MAX_DESCRIPTION_LENGTH = 160

_DESCRIPTION_TAGS = '//head//meta[@name="description"]'


def _is_successful_html(page_report: PageReport) -> bool:
    return (
        page_report.crawled
        and page_report.media_type == "text/html"
        and 200 <= page_report.status_code < 300
    )


def _description_length(page_report: PageReport) -> int:
    # Lengths are measured in UTF-8 bytes.
    return len(page_report.description.encode("utf-8"))


def _empty_description(
    page_report: PageReport, html_node: Any, headers: Mapping[str, str]
) -> bool:
    if not _is_successful_html(page_report):
        return False
    return page_report.description == ""


def _short_description(
    page_report: PageReport, html_node: Any, headers: Mapping[str, str]
) -> bool:
    if not _is_successful_html(page_report):
        return False
    return 0 < _description_length(page_report) < MIN_DESCRIPTION_LENGTH


def _long_description(
    page_report: PageReport, html_node: Any, headers: Mapping[str, str]
) -> bool:
    if not _is_successful_html(page_report):
        return False
    return _description_length(page_report) > MAX_DESCRIPTION_LENGTH


def _multiple_description_tags(
    page_report: PageReport, html_node: Any, headers: Mapping[str, str]
) -> bool:
    if not page_report.crawled or page_report.media_type != "text/html":
        return False
    if html_node is None:
        return False
    return len(html_node.xpath(_DESCRIPTION_TAGS)) > 1


def new_empty_description_reporter() -> PageIssueReporter:
    """Report successful HTML pages with a missing or empty description."""
    return PageIssueReporter(error_type=ErrorType.EMPTY_DESCRIPTION, callback=_empty_description)


def new_short_description_reporter() -> PageIssueReporter:
    """Report successful HTML pages with a too short description."""
    return PageIssueReporter(error_type=ErrorType.SHORT_DESCRIPTION, callback=_short_description)


def new_long_description_reporter() -> PageIssueReporter:
    """Report successful HTML pages with a too long description."""
    return PageIssueReporter(error_type=ErrorType.LONG_DESCRIPTION, callback=_long_description)


def new_multiple_description_tags_reporter() -> PageIssueReporter:
    """Report HTML pages with more than one description meta tag in the head."""
    return PageIssueReporter(
        error_type=ErrorType.MULTIPLE_DESCRIPTION_TAGS, callback=_multiple_description_tags
    )