"""
Pytest configuration.

Live IMDb tests read TEST_IMDB_ID from the environment.
Locally, add it to your .env file. For CI/CD, configure GitHub Secrets.
"""

import os
from pathlib import Path

import httpx
import pytest
from dotenv import load_dotenv

from trailerflow.utils import proxy_utils

# Load .env file from project root
project_root = Path(__file__).parent.parent
load_dotenv(project_root / ".env")


def pytest_configure(config):
    """Configure pytest-asyncio mode."""
    config.addinivalue_line("markers", "asyncio: mark test as async")


@pytest.fixture(autouse=True)
def restore_proxy_base():
    """Every test starts and ends with the same process-wide proxy base."""
    original = proxy_utils.get_m3u8_proxy_url()
    yield
    proxy_utils.set_m3u8_proxy_url(original)


@pytest.fixture
def mock_client():
    """
    Factory fixture returning an httpx.AsyncClient that serves ``pages``.

    Usage:
        client = mock_client({"https://example.com/": (200, "<html>...</html>")})

    Unknown URLs answer 404. A value that is an exception instance is raised instead.
    Every request is recorded on ``client.requests``.
    """

    def _make(pages: dict) -> httpx.AsyncClient:
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            page = pages.get(str(request.url))
            if isinstance(page, Exception):
                raise page
            if page is None:
                return httpx.Response(404, text="Not Found")
            status, body = page
            return httpx.Response(status, text=body)

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        client.requests = requests
        return client

    return _make


@pytest.fixture
def get_test_imdb_id():
    def _get() -> str | None:
        return os.environ.get("TEST_IMDB_ID")

    return _get
