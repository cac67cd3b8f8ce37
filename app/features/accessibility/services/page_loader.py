import logging
import re
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from bs4 import BeautifulSoup
from selenium import webdriver
from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.chrome.webdriver import WebDriver
from selenium.webdriver.support.ui import WebDriverWait
from webdriver_manager.chrome import ChromeDriverManager

from app.features.accessibility.exceptions import (
    CAUSE_CONNECTION_REFUSED,
    CAUSE_DNS_FAILURE,
    CAUSE_NAVIGATION_TIMEOUT,
    CAUSE_UNREACHABLE,
    ContentExtractionError,
    NavigationError,
)
from app.platform.config import settings

logger = logging.getLogger(__name__)

NO_TITLE = "No title found"

# Drops every script and any <style> whose text does not look like CSS
# declarations, then serializes what is left.
SANITIZE_SCRIPT = """
for (const style of Array.from(document.querySelectorAll('style'))) {
  const css = style.textContent || '';
  if (css.includes('=') && !css.includes(':')) style.remove();
}
for (const script of Array.from(document.querySelectorAll('script'))) {
  script.remove();
}
return document.documentElement.outerHTML;
"""

_INLINE_STYLE = re.compile(r"""\sstyle\s*=\s*("[^"]*"|'[^']*')""", re.IGNORECASE)
_STYLE_BLOCK = re.compile(r"<style[^>]*>[\s\S]*?</style>", re.IGNORECASE)
_SCRIPT_BLOCK = re.compile(r"<script[^>]*>[\s\S]*?</script>", re.IGNORECASE)
_COMMENT = re.compile(r"<!--[\s\S]*?-->")


@dataclass
class LoadedPage:
    """A navigated page: its sanitized snapshot plus the live driver."""
    url: str
    title: str
    dom_snapshot: str
    soup: BeautifulSoup
    driver: WebDriver


class PageLoaderService:
    """Service for loading web pages for analysis using Selenium WebDriver"""

    @staticmethod
    def _create_driver() -> WebDriver:
        chrome_options = Options()
        chrome_options.add_argument("--headless")
        chrome_options.add_argument("--disable-gpu")
        chrome_options.add_argument("--no-sandbox")
        chrome_options.add_argument("--disable-dev-shm-usage")
        chrome_options.add_argument("--disable-blink-features=AutomationControlled")
        chrome_options.add_argument(f"--user-agent={settings.USER_AGENT}")

        if settings.CHROMEDRIVER_PATH:
            driver_service = Service(executable_path=settings.CHROMEDRIVER_PATH)
            driver = webdriver.Chrome(service=driver_service, options=chrome_options)
        elif settings.USE_WEBDRIVER_MANAGER:
            driver_service = Service(ChromeDriverManager().install())
            driver = webdriver.Chrome(service=driver_service, options=chrome_options)
        else:
            driver = webdriver.Chrome(options=chrome_options)

        try:
            driver.set_page_load_timeout(settings.PAGE_LOAD_TIMEOUT_SECONDS)
        except Exception:
            PageLoaderService.release(driver)
            raise
        return driver

    @staticmethod
    def classify_navigation_failure(error: Exception) -> str:
        """Map a browser error to the cause category reported to the user."""
        text = str(error)
        if "ERR_NAME_NOT_RESOLVED" in text:
            return CAUSE_DNS_FAILURE
        if "ERR_CONNECTION_REFUSED" in text:
            return CAUSE_CONNECTION_REFUSED
        if isinstance(error, TimeoutException) or "ERR_TIMED_OUT" in text or "timeout" in text.lower():
            return CAUSE_NAVIGATION_TIMEOUT
        return CAUSE_UNREACHABLE

    @staticmethod
    def _navigate(driver: WebDriver, url: str) -> None:
        try:
            driver.get(url)
        except TimeoutException as e:
            raise NavigationError(
                f"Page load timeout after {settings.PAGE_LOAD_TIMEOUT_SECONDS} seconds for URL: {url}",
                CAUSE_NAVIGATION_TIMEOUT,
            ) from e
        except WebDriverException as e:
            raise NavigationError(
                f"WebDriver error loading URL {url}: {e.msg or e}",
                PageLoaderService.classify_navigation_failure(e),
            ) from e

    @staticmethod
    def _wait_for_dom(driver: WebDriver) -> None:
        try:
            WebDriverWait(driver, settings.DOM_SETTLE_SECONDS).until(
                lambda d: d.execute_script("return document.readyState") == "complete"
            )
        except TimeoutException:
            logger.info("Document not complete after settle window, extracting anyway")

    @staticmethod
    def extract_content(driver: WebDriver) -> str:
        try:
            html = driver.execute_script(SANITIZE_SCRIPT)
        except WebDriverException as e:
            raise ContentExtractionError(f"Failed to get page content: {e.msg or e}") from e

        if not isinstance(html, str) or not html.strip():
            raise ContentExtractionError("Rendered document is empty")
        return html

    @staticmethod
    def aggressive_sanitize(html: str) -> str:
        """Strip inline styles, style/script blocks and comments."""
        html = _INLINE_STYLE.sub("", html)
        html = _STYLE_BLOCK.sub("", html)
        html = _SCRIPT_BLOCK.sub("", html)
        return _COMMENT.sub("", html)

    @staticmethod
    def parse_markup(html: str) -> BeautifulSoup:
        """
        Parse the snapshot, retrying once on an aggressively sanitized copy.

        Raises:
            ContentExtractionError: If both attempts fail
        """
        try:
            return BeautifulSoup(html, "html.parser")
        except Exception as e:
            logger.warning(f"First parse attempt failed: {e}")

        try:
            return BeautifulSoup(PageLoaderService.aggressive_sanitize(html), "html.parser")
        except Exception as e:
            raise ContentExtractionError(f"Unable to parse webpage content: {e}") from e

    @staticmethod
    def _resolve_title(driver: WebDriver, soup: BeautifulSoup) -> str:
        try:
            title = (driver.title or "").strip()
        except WebDriverException as e:
            logger.warning(f"Could not read title from browser: {e}")
            title = ""

        if not title and soup.title is not None:
            title = soup.title.get_text(strip=True)
        return title or NO_TITLE

    @staticmethod
    def release(driver: WebDriver) -> None:
        try:
            driver.quit()
        except WebDriverException as e:
            logger.warning(f"Failed to close browser: {e}")

    @staticmethod
    def load(url: str) -> LoadedPage:
        """
        Load a page and return its sanitized snapshot with the live driver.

        IMPORTANT: Caller MUST call PageLoaderService.release(page.driver)
        when done, or use PageLoaderService.open() instead.

        Raises:
            NavigationError: If the page cannot be fetched in time
            ContentExtractionError: If the rendered document cannot be serialized or parsed
        """
        try:
            driver = PageLoaderService._create_driver()
        except WebDriverException as e:
            raise NavigationError(f"Could not start browser: {e.msg or e}") from e
        except Exception as e:
            # webdriver-manager download and version errors
            logger.error(f"Browser setup failed: {e}")
            raise NavigationError(f"Could not start browser: {e}", CAUSE_UNREACHABLE) from e

        try:
            PageLoaderService._navigate(driver, url)
            PageLoaderService._wait_for_dom(driver)
            html = PageLoaderService.extract_content(driver)
            soup = PageLoaderService.parse_markup(html)
            title = PageLoaderService._resolve_title(driver, soup)
        except Exception:
            PageLoaderService.release(driver)
            raise

        return LoadedPage(url=url, title=title, dom_snapshot=html, soup=soup, driver=driver)

    @staticmethod
    @contextmanager
    def open(url: str) -> Iterator[LoadedPage]:
        """
        Load a page for the duration of a with-block; the driver is released
        exactly once however the block exits.

        Example:
            with PageLoaderService.open("https://example.com") as page:
                report = run_checks(page.soup, page.driver)
        """
        page = PageLoaderService.load(url)
        try:
            yield page
        finally:
            PageLoaderService.release(page.driver)
