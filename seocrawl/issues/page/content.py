"""Reporters for problems with a page's content."""

from __future__ import annotations

import mimetypes
from collections.abc import Mapping
from typing import Any

from seocrawl.issues.issue_types import ErrorType
from seocrawl.issues.page.base import PageIssueReporter, PageReport

# Pages with fewer words than this are reported as having little content.
MIN_WORDS = 200

_JAVASCRIPT_TYPES = frozenset({"application/javascript", "text/javascript"})

# Media types that are known regardless of the system's mime tables.
_BUILTIN_TYPES = {
    ".avif": "image/avif",
    ".css": "text/css",
    ".gif": "image/gif",
    ".htm": "text/html",
    ".html": "text/html",
    ".jpeg": "image/jpeg",
    ".jpg": "image/jpeg",
    ".js": "text/javascript",
    ".json": "application/json",
    ".mjs": "text/javascript",
    ".pdf": "application/pdf",
    ".png": "image/png",
    ".svg": "image/svg+xml",
    ".wasm": "application/wasm",
    ".webp": "image/webp",
    ".xml": "text/xml",
}


def _extension(path: str) -> str:
    """Return the extension of the last path element, dot included, or ""."""
    name = path.rpartition("/")[2]
    dot = name.rfind(".")
    return name[dot:] if dot != -1 else ""


def _type_by_extension(ext: str) -> str:
    known = _BUILTIN_TYPES.get(ext) or _BUILTIN_TYPES.get(ext.lower())
    if known:
        return known
    guessed, _encoding = mimetypes.guess_type("file" + ext, strict=False)
    return (guessed or "").split(";")[0].strip()


def _little_content(page_report: PageReport, html_node: Any, headers: Mapping[str, str]) -> bool:
    if not page_report.crawled or page_report.media_type != "text/html":
        return False
    if not 200 <= page_report.status_code < 300:
        return False
    return page_report.words < MIN_WORDS


def _incorrect_media_type(
    page_report: PageReport, html_node: Any, headers: Mapping[str, str]
) -> bool:
    if not page_report.media_type:
        return True

    ext = _extension(page_report.parsed_url.path) or ".html"

    if ext == ".js":
        return page_report.media_type not in _JAVASCRIPT_TYPES

    expected = _type_by_extension(ext)
    if not expected:
        return False
    return expected != page_report.media_type


def new_little_content_reporter() -> PageIssueReporter:
    """Report successful HTML pages with too few words."""
    return PageIssueReporter(error_type=ErrorType.LITTLE_CONTENT, callback=_little_content)


def new_incorrect_media_type_reporter() -> PageIssueReporter:
    """Report pages with no media type or one that does not match their extension."""
    return PageIssueReporter(
        error_type=ErrorType.INCORRECT_MEDIA_TYPE, callback=_incorrect_media_type
    )