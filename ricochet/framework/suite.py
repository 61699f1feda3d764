"""
================================================================================
Test Suite
================================================================================

A named, ordered list of steps bound to one server.

Suites are configured by chaining:

    >>> suite = (
    ...     registry.register("users")
    ...     .set_base_url("https://api.example.com")
    ...     .add_test("list users", list_users)
    ...     .add_test("create user", create_user)
    ... )
    >>> suite.run()

Steps run one after another in the order they were added. The first step
that raises stops the run and marks the suite as failed.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple

import allure
import httpx
from loguru import logger

from .oauth import DEFAULT_TIMEOUT, BootstrapTransportError, CredentialBootstrapper
from .request_context import RequestContext
from .urls import parse_base_url


TestFunc = Callable[[RequestContext], None]


class SuiteState(str, Enum):
    """Run lifecycle of a suite."""
    NOT_RUN = "not_run"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"


@dataclass(frozen=True)
class Step:
    """A single named unit of test logic."""
    name: str
    body: TestFunc


class Suite:
    """
    Ordered collection of steps plus the base URL and token they share.

    Not safe for concurrent use: configure it during setup, then run it
    from one thread at a time.
    """

    def __init__(
        self,
        name: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """
        Args:
            name: Suite name, unique within a registry
            timeout: HTTP timeout in seconds for bootstrap and step requests
            transport: Optional httpx transport shared by all requests
        """
        self.name = name
        self.timeout = timeout
        self.transport = transport
        self.base_url: Optional[httpx.URL] = None
        self.token = ""
        self.failed = False
        self.failure: Optional[str] = None
        self.bootstrap_error: Optional[str] = None
        self.failed_step: Optional[str] = None
        self.state = SuiteState.NOT_RUN
        self._steps: list = []

    def __repr__(self) -> str:
        return f"Suite(name={self.name!r}, steps={len(self._steps)}, state={self.state.value})"

    @property
    def steps(self) -> Tuple[Step, ...]:
        return tuple(self._steps)

    # =========================================================================
    # Configuration
    # =========================================================================

    def set_base_url(self, raw: str) -> "Suite":
        """
        Set the server every following operation talks to.

        Raises:
            ConfigurationError: If ``raw`` is not an absolute http(s) URL
        """
        self.base_url = parse_base_url(raw)
        logger.debug(f"Suite '{self.name}' base URL set to {self.base_url}")
        return self

    def add_test(self, name: str, body: TestFunc) -> "Suite":
        """Append a step. Steps run in the order they are added."""
        self._steps.append(Step(name, body))
        return self

    def test(self, name: str) -> Callable[[TestFunc], TestFunc]:
        """
        Decorator form of :meth:`add_test`.

            >>> @suite.test("health check")
            ... def health(r):
            ...     r.expect_status(r.get("/health"), 200)
        """
        def decorator(body: TestFunc) -> TestFunc:
            self.add_test(name, body)
            return body
        return decorator

    def authenticate(
        self,
        endpoint: str,
        client_id: str,
        client_secret: str,
        username: str,
        password: str,
    ) -> Optional["Suite"]:
        """
        Run the OAuth2 password grant and keep the resulting token.

        Returns:
            The suite, or None when the token endpoint could not be reached

        Raises:
            ConfigurationError: No base URL set
            AuthenticationError: Grant rejected or response not decodable
        """
        bootstrapper = CredentialBootstrapper(
            self.base_url, timeout=self.timeout, transport=self.transport
        )
        try:
            token = bootstrapper.fetch_token(
                endpoint, client_id, client_secret, username, password
            )
        except BootstrapTransportError as e:
            logger.error(f"Suite '{self.name}': {e}")
            self.bootstrap_error = str(e)
            return None

        self.token = token
        self.bootstrap_error = None
        logger.info(f"Suite '{self.name}' authenticated as {username}")
        return self

    # =========================================================================
    # Execution
    # =========================================================================

    def new_context(self) -> RequestContext:
        """Build the context handed to the next step."""
        return RequestContext(
            base_url=self.base_url,
            token=self.token,
            timeout=self.timeout,
            transport=self.transport,
        )

    def run(self) -> bool:
        """
        Run every step in order, stopping at the first failure.

        ``failed`` is sticky: once a run has aborted it stays True, even if
        a later run passes. ``state``, ``failure`` and ``failed_step``
        describe the latest run only.

        Returns:
            True when all steps of this run passed
        """
        logger.info(f"Running {self.name}")
        self.failure = None
        self.failed_step = None
        self.state = SuiteState.RUNNING

        current: Optional[Step] = None
        try:
            for current in list(self._steps):
                logger.info(f"\t ... {current.name}")
                with allure.step(current.name), self.new_context() as ctx:
                    current.body(ctx)
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.error(f"\t\t Error: {message}")
            self.failed = True
            self.failure = message
            self.failed_step = current.name if current else None
            self.state = SuiteState.FAILED
            return False

        self.state = SuiteState.PASSED
        return True


__all__ = [
    "Step",
    "Suite",
    "SuiteState",
    "TestFunc",
]
