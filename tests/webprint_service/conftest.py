"""
Pytest fixtures for WebPrint service tests.
"""

import os

# IMPORTANT: Set environment variables BEFORE any imports from webprint_service
# so the cached settings never pick up a real key or provider.
os.environ["OPENAI_API_KEY"] = ""
os.environ["OPENAI_BASE_URL"] = "https://llm.test/v1"
os.environ["OPENAI_MODEL"] = "test-model"
os.environ["CORS_ORIGINS"] = ""
os.environ["LOG_LEVEL"] = "INFO"

import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture
def client():
    """FastAPI test client fixture."""
    from webprint_service.app import app
    return TestClient(app)


@pytest.fixture
def llm_settings(monkeypatch):
    """Enable title suggestions through the environment, as in production."""
    from webprint_service.config import get_settings

    monkeypatch.setenv("OPENAI_API_KEY", "sk-test-key")
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
def mock_page():
    """A Playwright page that loads instantly and prints a tiny PDF."""
    page = AsyncMock()
    page.title = AsyncMock(return_value="Example Article")
    page.evaluate = AsyncMock(return_value={
        "candidates": ["Article body text", "", "", "", "", "", "", ""],
        "body": "Navigation Article body text Footer",
    })
    page.pdf = AsyncMock(return_value=b"%PDF-1.4 fake pdf content")
    return page


def _install_browser(mock_playwright, page):
    """
    Wire a patched ``async_playwright`` so it launches a browser serving ``page``.

    Returns the mock browser so tests can assert it was closed.
    """
    mock_browser = AsyncMock()
    mock_browser.new_page = AsyncMock(return_value=page)
    mock_playwright.return_value.__aenter__ = AsyncMock(
        return_value=MagicMock(
            chromium=MagicMock(
                launch=AsyncMock(return_value=mock_browser)
            )
        )
    )
    mock_playwright.return_value.__aexit__ = AsyncMock(return_value=False)
    return mock_browser


@pytest.fixture
def install_browser():
    """Helper for tests that patch ``playwright.async_api.async_playwright``."""
    return _install_browser
