import pytest

from seocrawl.issues.issue_types import ErrorType
from seocrawl.issues.page.base import PageReport
from seocrawl.issues.page.depth import new_depth_reporter


def test_depth_no_issues():
    report = PageReport(crawled=True, media_type="text/html", status_code=200, depth=3)
    reporter = new_depth_reporter()
    assert reporter.error_type == ErrorType.DEPTH
    assert reporter.callback(report, None, {}) is False


def test_depth_issues():
    report = PageReport(crawled=True, media_type="text/html", status_code=200, depth=8)
    reporter = new_depth_reporter()
    assert reporter.error_type == ErrorType.DEPTH
    assert reporter.callback(report, None, {}) is True


@pytest.mark.parametrize(
    "report",
    [
        PageReport(crawled=True, media_type="text/css", status_code=200, depth=8),
        PageReport(crawled=True, media_type="text/html", status_code=404, depth=8),
        PageReport(crawled=True, media_type="text/html", status_code=199, depth=8),
    ],
)
def test_depth_skips_other_pages(report):
    assert new_depth_reporter().callback(report, None, {}) is False


def test_depth_limit():
    reporter = new_depth_reporter()
    at_limit = PageReport(media_type="text/html", status_code=200, depth=4)
    over_limit = PageReport(media_type="text/html", status_code=200, depth=5)
    assert reporter.callback(at_limit, None, {}) is False
    assert reporter.callback(over_limit, None, {}) is True


def test_depth_does_not_require_crawled():
    report = PageReport(crawled=False, media_type="text/html", status_code=200, depth=8)
    assert new_depth_reporter()(report) is True