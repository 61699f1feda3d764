"""Ricochet: declarative, sequential test suites for HTTP APIs."""

__version__ = "0.1.0"

from .common import init_logger
from .framework import (
    AuthenticationError,
    BootstrapTransportError,
    ConfigLoader,
    ConfigurationError,
    CredentialBootstrapper,
    RequestContext,
    Step,
    StepFailure,
    Suite,
    SuiteRegistry,
    SuiteState,
)

__all__ = [
    "__version__",
    "init_logger",
    "AuthenticationError",
    "BootstrapTransportError",
    "ConfigLoader",
    "ConfigurationError",
    "CredentialBootstrapper",
    "RequestContext",
    "Step",
    "StepFailure",
    "Suite",
    "SuiteRegistry",
    "SuiteState",
]
