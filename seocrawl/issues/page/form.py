"""Reporters for forms served or submitted over insecure HTTP."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import urlsplit

from seocrawl.issues.issue_types import ErrorType
from seocrawl.issues.page.base import PageIssueReporter, PageReport


def _forms(html_node: Any) -> list[Any]:
    if html_node is None:
        return []
    return html_node.xpath("//form")


def _is_checked_html(page_report: PageReport) -> bool:
    return page_report.crawled and page_report.media_type == "text/html"


def _form_on_http(page_report: PageReport, html_node: Any, headers: Mapping[str, str]) -> bool:
    if page_report.parsed_url.scheme == "https":
        return False
    if not _is_checked_html(page_report):
        return False
    return bool(_forms(html_node))


def _insecure_form(page_report: PageReport, html_node: Any, headers: Mapping[str, str]) -> bool:
    if not _is_checked_html(page_report):
        return False
    for form in _forms(html_node):
        try:
            scheme = urlsplit(form.get("action", "")).scheme
        except ValueError:
            continue
        if scheme == "http":
            return True
    return False


def new_form_on_http_reporter() -> PageIssueReporter:
    """Report HTML pages served over a non-HTTPS URL that contain a form."""
    return PageIssueReporter(error_type=ErrorType.FORM_ON_HTTP, callback=_form_on_http)


def new_insecure_form_reporter() -> PageIssueReporter:
    """Report HTML pages containing a form whose action is an HTTP URL."""
    return PageIssueReporter(error_type=ErrorType.INSECURE_FORM, callback=_insecure_form)