"""Reporter for pages that are too deep in the site structure."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from seocrawl.issues.issue_types import ErrorType
from seocrawl.issues.page.base import PageIssueReporter, PageReport

# Pages deeper than this are reported.
MAX_DEPTH = 4


def _too_deep(page_report: PageReport, html_node: Any, headers: Mapping[str, str]) -> bool:
    if page_report.media_type != "text/html":
        return False
    if not 200 <= page_report.status_code < 300:
        return False
    return page_report.depth > MAX_DEPTH


def new_depth_reporter() -> PageIssueReporter:
    """Report successful HTML pages with a high depth."""
    return PageIssueReporter(error_type=ErrorType.DEPTH, callback=_too_deep)