import asyncio
from unittest.mock import MagicMock, patch

import pytest

from app.features.accessibility.exceptions import CAUSE_DNS_FAILURE, CheckError, NavigationError
from app.features.accessibility.services import rules
from app.features.accessibility.services.analyzer import AccessibilityAnalyzer, CheckOutcome
from app.features.accessibility.services.page_loader import LoadedPage, PageLoaderService
from app.features.accessibility.services.static_checks import check_images

PAGE_HTML = """
<html lang="en">
<head><meta name="viewport" content="width=device-width"><title>Shop</title></head>
<body><header></header><main><h1>Shop</h1><img src="cart.png"><input id="q"></main></body>
</html>
"""


@pytest.fixture
def live_driver():
    """Driver whose in-page queries all return empty lists."""
    driver = MagicMock()
    driver.execute_script.return_value = []
    return driver


def test_run_check_wraps_success(parse_html):
    outcome = AccessibilityAnalyzer.run_check("images", check_images, parse_html("<img alt='x'>"))

    assert outcome.ok
    assert outcome.unwrap_or_empty().total_images == 1


def test_run_check_isolates_failure():
    def broken(_):
        raise KeyError("style")

    outcome = AccessibilityAnalyzer.run_check("colors", broken, object())

    assert not outcome.ok
    assert isinstance(outcome.error, CheckError)
    empty = outcome.unwrap_or_empty()
    assert empty.checked is False
    assert empty.issues == []
    assert empty.checked_elements == 0


def test_check_outcome_without_result_is_not_ok():
    assert CheckOutcome(name="aria").ok is False


def test_page_info(parse_html):
    soup = parse_html(PAGE_HTML)

    info = AccessibilityAnalyzer.build_page_info("Shop", soup)

    assert info.has_title is True
    assert info.has_lang_attribute is True
    assert info.has_viewport_meta is True

    bare = AccessibilityAnalyzer.build_page_info("No title found", parse_html("<p></p>"))
    assert bare.has_title is False
    assert bare.has_lang_attribute is False


def test_analyze_page_runs_every_check(parse_html, live_driver):
    report = AccessibilityAnalyzer.analyze_page("https://shop.test", "Shop", parse_html(PAGE_HTML), live_driver)

    assert list(report.checks) == list(rules.CHECK_ORDER)
    assert all(result.checked for result in report.checks.values())
    assert list(report.disability_analysis) == list(rules.CATEGORY_ORDER)

    found = [issue.rule for issue in report.issues]
    assert rules.MISSING_ALT_TEXT in found
    assert rules.MISSING_LABEL in found
    assert report.summary.total_issues == len(report.issues)
    assert report.url == "https://shop.test"


def test_one_failing_check_does_not_abort(parse_html, live_driver):
    broken = MagicMock(side_effect=RuntimeError("boom"))

    with patch.dict(AccessibilityAnalyzer.STATIC_CHECKS, {"headings": broken}):
        report = AccessibilityAnalyzer.analyze_page("https://shop.test", "Shop", parse_html(PAGE_HTML), live_driver)

    assert report.checks["headings"].checked is False
    assert report.checks["images"].checked is True
    assert report.checks["images"].issues


def test_probe_returning_garbage_empties_dynamic_checks(parse_html):
    driver = MagicMock()
    driver.execute_script.return_value = "not a list"

    report = AccessibilityAnalyzer.analyze_page("https://shop.test", "Shop", parse_html(PAGE_HTML), driver)

    assert report.checks["colors"].checked is False
    assert report.checks["keyboard"].checked is False
    assert report.checks["forms"].checked is True


class TestAnalyzeUrl:
    def test_releases_driver_after_analysis(self, parse_html, live_driver):
        page = LoadedPage(
            url="https://shop.test",
            title="Shop",
            dom_snapshot=PAGE_HTML,
            soup=parse_html(PAGE_HTML),
            driver=live_driver,
        )

        with patch.object(PageLoaderService, "load", return_value=page), \
                patch.object(PageLoaderService, "release") as release:
            report = AccessibilityAnalyzer.analyze_url("https://shop.test")

        release.assert_called_once_with(live_driver)
        assert report.page_info.title == "Shop"

    def test_navigation_failure_produces_no_report(self):
        error = NavigationError("net::ERR_NAME_NOT_RESOLVED", CAUSE_DNS_FAILURE)

        with patch.object(PageLoaderService, "load", side_effect=error):
            with pytest.raises(NavigationError):
                AccessibilityAnalyzer.analyze_url("https://nonexistent.invalid")

    def test_async_wrapper(self, sample_report):
        with patch.object(AccessibilityAnalyzer, "analyze_url", return_value=sample_report) as analyze:
            report = asyncio.run(AccessibilityAnalyzer.analyze_url_async("https://example.com"))

        analyze.assert_called_once_with("https://example.com")
        assert report is sample_report
