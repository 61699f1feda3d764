"""
================================================================================
Ricochet Framework
================================================================================

Suite declaration and execution components.

Modules:
    - config_loader: YAML configuration management
    - urls: Base URL parsing and endpoint joining
    - oauth: OAuth2 password-grant token bootstrap
    - request_context: Per-step HTTP helper handed to test bodies
    - suite: Suite configuration and fail-fast execution
    - registry: Suite registry and sequential multi-suite runs

Author: Automation Team
License: MIT
================================================================================
"""

from .config_loader import ConfigLoader, ConfigurationError
from .oauth import AuthenticationError, BootstrapTransportError, CredentialBootstrapper
from .registry import SuiteRegistry
from .request_context import RequestContext, StepFailure
from .suite import Step, Suite, SuiteState
from .urls import combine_url, parse_base_url

__all__ = [
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
    "combine_url",
    "parse_base_url",
]
