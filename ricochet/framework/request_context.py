"""
================================================================================
Request Context
================================================================================

The object every suite step receives. It carries the suite's base URL and
bearer token as they were when the step started, and offers a small httpx
wrapper plus helpers to abort the step.

Features:
    - Path resolution against the base URL
    - Bearer authentication on every request
    - Request/response logging with sensitive headers masked
    - Allure attachments for each call

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

import allure
import httpx
from allure_commons.types import AttachmentType
from loguru import logger

from .oauth import DEFAULT_TIMEOUT
from .urls import combine_url


# Maximum response length to include in Allure reports
MAX_RESPONSE_LENGTH = 3000

SENSITIVE_HEADERS = {"authorization", "x-api-key", "cookie", "set-cookie"}


class StepFailure(AssertionError):
    """Abort signal raised from a step body to stop the suite."""
    pass


class RequestContext:
    """
    Per-step view of a suite's connection settings.

    A new context is built for every step, so changes made to the suite
    while a step runs are not seen by that step.

    Usage:
        >>> def list_users(r: RequestContext) -> None:
        ...     response = r.get("/users")
        ...     r.expect_status(response, 200)
    """

    def __init__(
        self,
        base_url: Optional[httpx.URL],
        token: str = "",
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._base_url = base_url
        self._token = token or ""
        self.timeout = timeout
        self._transport = transport
        self._session: Optional[httpx.Client] = None

    @property
    def base_url(self) -> Optional[httpx.URL]:
        return self._base_url

    @property
    def token(self) -> str:
        return self._token

    def __enter__(self) -> "RequestContext":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP session, if one was opened."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def url(self, path: str) -> str:
        """Resolve ``path`` against the base URL."""
        return combine_url(self._base_url, path)

    def headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """Build request headers, adding the bearer token when there is one."""
        result = dict(extra or {})
        if self._token:
            result.setdefault("Authorization", f"Bearer {self._token}")
        return result

    def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """
        Execute an HTTP request against the suite's server.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE, PATCH)
            path: Path relative to the base URL, or an absolute URL
            **kwargs: Additional arguments passed to httpx.Client.request

        Returns:
            httpx.Response object
        """
        url = self.url(path)
        kwargs["headers"] = self.headers(kwargs.get("headers"))

        if self._session is None:
            self._session = httpx.Client(
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
            )

        response = self._session.request(method, url, **kwargs)
        logger.debug(
            f"{method} {url} -> {response.status_code} "
            f"headers={self._redact_headers(kwargs['headers'])}"
        )
        self._log_to_allure(method, url, kwargs["headers"], response)
        return response

    def get(self, path: str, **kwargs: Any) -> httpx.Response:
        """Execute GET request."""
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> httpx.Response:
        """Execute POST request."""
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs: Any) -> httpx.Response:
        """Execute PUT request."""
        return self.request("PUT", path, **kwargs)

    def patch(self, path: str, **kwargs: Any) -> httpx.Response:
        """Execute PATCH request."""
        return self.request("PATCH", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> httpx.Response:
        """Execute DELETE request."""
        return self.request("DELETE", path, **kwargs)

    def fail(self, message: str) -> None:
        """Abort the current step, and with it the rest of the suite."""
        raise StepFailure(message)

    def expect_status(self, response: httpx.Response, *codes: int) -> httpx.Response:
        """Abort the step unless the response status is one of ``codes``."""
        expected = codes or (200,)
        if response.status_code not in expected:
            self.fail(
                f"{response.request.method} {response.request.url} returned "
                f"{response.status_code}, expected {' or '.join(map(str, expected))}"
            )
        return response

    def expect_json(self, response: httpx.Response) -> Any:
        """Decode a JSON body or abort the step."""
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            self.fail(f"Response from {response.request.url} is not JSON: {e}")

    def _log_to_allure(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        response: httpx.Response,
    ) -> None:
        status_emoji = "✅" if response.status_code < 400 else "❌"

        with allure.step(f"{status_emoji} {method} {url} → {response.status_code}"):
            safe_headers = self._redact_headers(headers)
            if safe_headers:
                allure.attach(
                    json.dumps(safe_headers, ensure_ascii=False, indent=2),
                    name="Request Headers",
                    attachment_type=AttachmentType.JSON,
                )

            response_content = response.text or "<empty>"
            if len(response_content) > MAX_RESPONSE_LENGTH:
                response_content = (
                    f"{response_content[:MAX_RESPONSE_LENGTH]}\n\n"
                    f"... [Truncated, full length: {len(response_content)} chars] ..."
                )
            allure.attach(
                response_content,
                name="Response Body",
                attachment_type=AttachmentType.TEXT,
            )

    def _redact_headers(self, headers: Dict[str, Any]) -> Dict[str, Any]:
        """Mask sensitive header values before logging."""
        return {
            key: "***MASKED***" if key.lower() in SENSITIVE_HEADERS else value
            for key, value in headers.items()
        }


__all__ = [
    "RequestContext",
    "StepFailure",
]
