"""Shared fixtures for the test suite."""

import os
from collections.abc import Callable, Generator
from typing import Any

import pytest
from loguru import logger
from starlette.requests import Request

from safejson.core.config import get_settings

type RequestFactory = Callable[..., Request]


@pytest.fixture(autouse=True)
def clean_lru_cache() -> Generator[None]:
    """Clear the settings cache before and after each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove plugin environment variables that might leak into settings.

    Returns:
        pytest.MonkeyPatch: The monkeypatch instance for env manipulation.
    """
    for key in list(os.environ):
        if key.startswith("SAFEJSON_"):
            monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.fixture
def make_request() -> RequestFactory:
    """Build Starlette requests from a method and a header mapping.

    Returns:
        RequestFactory: Factory accepting ``method``, ``headers`` and ``path``.
            Passing ``method=None`` leaves the method out of the scope.
    """

    def _make(
        method: str | None = "GET",
        headers: dict[str, str] | None = None,
        path: str = "/",
    ) -> Request:
        scope: dict[str, Any] = {
            "type": "http",
            "path": path,
            "query_string": b"",
            "headers": [
                (name.lower().encode("latin-1"), value.encode("latin-1"))
                for name, value in (headers or {}).items()
            ],
        }
        if method is not None:
            scope["method"] = method
        return Request(scope)

    return _make


@pytest.fixture
def log_records() -> Generator[list[dict[str, Any]]]:
    """Capture Loguru records emitted during the test.

    Yields:
        list[dict[str, Any]]: Records in emission order.
    """
    records: list[dict[str, Any]] = []
    handler_id = logger.add(
        lambda message: records.append(message.record), level="DEBUG"
    )
    yield records
    logger.remove(handler_id)


@pytest.fixture
def android_headers() -> dict[str, str]:
    """Headers of a cookie-bearing request from a legacy Android browser.

    Returns:
        dict[str, str]: Header mapping without ``X-Requested-With``.
    """
    return {
        "User-Agent": (
            "Mozilla/5.0 (Linux; U; Android 4.0.3; ja-jp) AppleWebKit/534.30"
        ),
        "Cookie": "session=abc123",
    }
