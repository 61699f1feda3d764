"""
Repository-level pytest configuration.

Provides:
  - Markers used across the test tree
  - Isolation from configuration environment variables on the developer machine
  - Captured loguru output and fake HTTP transports for suite tests
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Generator, List

import httpx
import pytest
from loguru import logger


CONFIG_ENV_VARS = (
    "API_BASE_URL",
    "API_TIMEOUT",
    "AUTH_ENDPOINT",
    "AUTH_CLIENT_ID",
    "AUTH_CLIENT_SECRET",
    "AUTH_USERNAME",
    "AUTH_PASSWORD",
    "LOGGING_LEVEL",
    "LOGGING_FILE",
    "LOG_LEVEL",
)


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""
    config.addinivalue_line("markers", "unit: Fast tests without network access")
    config.addinivalue_line("markers", "auth: Tests related to authentication")


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(autouse=True)
def _clean_config_env(monkeypatch) -> None:
    """Keep configuration env vars from leaking into tests."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def log_messages() -> Generator[List[str], None, None]:
    """Collect loguru messages emitted during the test."""
    messages: List[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def token_endpoint() -> Callable[..., httpx.MockTransport]:
    """
    Build a fake OAuth server.

    Every request it receives is appended to ``transport.requests``.
    """
    def factory(status_code: int = 200, json: Dict = None, content: bytes = None) -> httpx.MockTransport:
        requests: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if content is not None:
                return httpx.Response(status_code, content=content)
            return httpx.Response(status_code, json=json if json is not None else {})

        transport = httpx.MockTransport(handler)
        transport.requests = requests
        return transport

    return factory


@pytest.fixture
def refusing_transport() -> httpx.MockTransport:
    """Transport that fails every request as if the port were closed."""
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("[Errno 111] Connection refused", request=request)

    return httpx.MockTransport(handler)
