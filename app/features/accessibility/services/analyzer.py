import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from bs4 import BeautifulSoup

from app.features.accessibility.exceptions import CheckError
from app.features.accessibility.schemas.report import (
    AnalysisReport,
    CheckResult,
    PageInfo,
    empty_check_result,
)
from app.features.accessibility.services import dynamic_checks, rules, static_checks
from app.features.accessibility.services.aggregator import aggregate
from app.features.accessibility.services.disability import assess_all
from app.features.accessibility.services.page_loader import NO_TITLE, PageLoaderService
from app.features.accessibility.services.page_probe import PageProbe
from app.platform.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CheckOutcome:
    """Either the check's result or the error that stopped it."""
    name: str
    result: Optional[CheckResult] = None
    error: Optional[CheckError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.result is not None

    def unwrap_or_empty(self) -> CheckResult:
        if self.ok:
            return self.result
        return empty_check_result(self.name)


class AccessibilityAnalyzer:
    """
    Runs one full accessibility analysis of a URL.

    Flow:
    1. PageLoaderService.open() - navigate, sanitize, parse (driver owned here)
    2. Static checks over the parsed markup
    3. Dynamic checks over the live page (sequenced on the one driver)
    4. Disability-impact assessment
    5. Aggregation into an AnalysisReport

    Loader failures (NavigationError, ContentExtractionError) propagate and
    no report is produced. Any single check failing only empties that check.
    """

    STATIC_CHECKS: Dict[str, Callable[[BeautifulSoup], CheckResult]] = {
        "images": static_checks.check_images,
        "headings": static_checks.check_headings,
        "forms": static_checks.check_forms,
        "links": static_checks.check_links,
        "aria": static_checks.check_aria,
        "semantic": static_checks.check_semantic,
    }

    DYNAMIC_CHECKS: Dict[str, Callable[[PageProbe], CheckResult]] = {
        "colors": dynamic_checks.check_colors,
        "keyboard": dynamic_checks.check_keyboard,
    }

    @staticmethod
    def run_check(name: str, check: Callable[[Any], CheckResult], target: Any) -> CheckOutcome:
        try:
            return CheckOutcome(name=name, result=check(target))
        except Exception as e:
            logger.warning(f"{name} check failed: {e}")
            return CheckOutcome(name=name, error=CheckError(name, str(e)))

    @staticmethod
    def build_page_info(title: str, soup: BeautifulSoup) -> PageInfo:
        return PageInfo(
            title=title,
            has_title=bool(title) and title != NO_TITLE,
            has_lang_attribute=soup.select_one("html[lang]") is not None,
            has_viewport_meta=soup.find("meta", attrs={"name": "viewport"}) is not None,
        )

    @staticmethod
    def run_checks(soup: BeautifulSoup, probe: PageProbe) -> Dict[str, CheckResult]:
        checks = {}
        for name in rules.CHECK_ORDER:
            if name in AccessibilityAnalyzer.STATIC_CHECKS:
                outcome = AccessibilityAnalyzer.run_check(
                    name, AccessibilityAnalyzer.STATIC_CHECKS[name], soup
                )
            else:
                outcome = AccessibilityAnalyzer.run_check(
                    name, AccessibilityAnalyzer.DYNAMIC_CHECKS[name], probe
                )
            checks[name] = outcome.unwrap_or_empty()
        return checks

    @staticmethod
    def analyze_page(url: str, title: str, soup: BeautifulSoup, driver) -> AnalysisReport:
        """Run every check and assessor against an already loaded page."""
        probe = PageProbe(driver)
        page_info = AccessibilityAnalyzer.build_page_info(title, soup)
        checks = AccessibilityAnalyzer.run_checks(soup, probe)
        disability = assess_all(soup, probe)
        return aggregate(url, page_info, checks, disability)

    @staticmethod
    def analyze_url(url: str) -> AnalysisReport:
        """
        Analyze a page for WCAG 2.1 AA issues.

        Args:
            url: Absolute http(s) URL, already validated by the caller

        Returns:
            AnalysisReport for the page

        Raises:
            NavigationError: If the page cannot be loaded
            ContentExtractionError: If the page content cannot be extracted
        """
        logger.info(f"Starting analysis for: {url}")

        with PageLoaderService.open(url) as page:
            report = AccessibilityAnalyzer.analyze_page(url, page.title, page.soup, page.driver)

        logger.info(
            f"Analysis complete for {url}: {report.summary.overall_score}/100, "
            f"{report.summary.critical_issues} critical, {report.summary.warning_issues} warnings"
        )
        return report

    @staticmethod
    async def analyze_url_async(url: str) -> AnalysisReport:
        # Selenium is blocking; keep it off the event loop
        return await asyncio.to_thread(AccessibilityAnalyzer.analyze_url, url)
