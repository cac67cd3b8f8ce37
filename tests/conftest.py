"""
Test configuration and fixtures for the Accessibility Analyzer API.

Nothing here starts a browser: page-level tests run against parsed markup
and a stub probe standing in for the in-page scripts.
"""

from typing import Generator

import pytest
from bs4 import BeautifulSoup
from fastapi.testclient import TestClient

from app.features.accessibility.schemas.report import PageInfo
from app.features.accessibility.services import rules
from app.features.accessibility.services.aggregator import aggregate
from app.features.accessibility.services.static_checks import check_images, check_semantic


def parse(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


class StubProbe:
    """
    Returns canned in-page query results. Pass an exception instance to make
    that query fail.
    """

    def __init__(self, color_samples=None, focus_styles=None, click_targets=None):
        self._color_samples = color_samples or []
        self._focus_styles = focus_styles or []
        self._click_targets = click_targets or []

    @staticmethod
    def _answer(value):
        if isinstance(value, Exception):
            raise value
        return list(value)

    def color_samples(self):
        return self._answer(self._color_samples)

    def focus_styles(self):
        return self._answer(self._focus_styles)

    def click_targets(self):
        return self._answer(self._click_targets)


@pytest.fixture
def parse_html():
    return parse


@pytest.fixture
def make_probe():
    return StubProbe


@pytest.fixture(scope="session")
def test_app():
    """Create FastAPI test application."""
    from app.main import app

    return app


@pytest.fixture(scope="function")
def client(test_app) -> Generator[TestClient, None, None]:
    """
    Create a test client for making HTTP requests.
    This fixture provides a clean TestClient instance for each test function,
    ensuring proper isolation between tests.
    """
    with TestClient(test_app) as test_client:
        yield test_client


@pytest.fixture
def sample_report():
    """A small report with one missing alt text and a missing main landmark."""
    soup = parse('<html lang="en"><body><img src="/hero.png"></body></html>')
    return aggregate(
        "https://example.com",
        PageInfo(title="Example", has_title=True, has_lang_attribute=True),
        {"images": check_images(soup), "semantic": check_semantic(soup)},
        {},
        analyzed_at="2024-01-01T00:00:00+00:00",
    )


@pytest.fixture
def alt_issue():
    return rules.build_issue(rules.MISSING_ALT_TEXT, "error", "Image missing alt attribute", element="img")
