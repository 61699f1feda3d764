"""
================================================================================
OAuth2 Password-Grant Bootstrap
================================================================================

Obtains a bearer token for a suite before its steps run:
    - Form-encoded POST of the password grant to <base URL + endpoint>
    - Strict decoding of {"access_token": "<string>"}
    - Transport failures kept apart from rejected or malformed responses

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

import httpx
from loguru import logger

from .config_loader import ConfigurationError
from .urls import combine_url


# Default bootstrap timeout in seconds
DEFAULT_TIMEOUT = 30.0

# Form fields never written to the log
SECRET_FIELDS = ("client_secret", "password")


class AuthenticationError(ConfigurationError):
    """Raised when the token endpoint rejects the grant or answers garbage."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class BootstrapTransportError(Exception):
    """Raised when the token endpoint could not be reached at all."""
    pass


class CredentialBootstrapper:
    """
    Performs the OAuth2 ``password`` grant for a suite.

    Usage:
        >>> bootstrapper = CredentialBootstrapper(parse_base_url("https://api.example.com"))
        >>> token = bootstrapper.fetch_token("/oauth/token", "cli", "s3cret", "alice", "pw")
    """

    def __init__(
        self,
        base_url: Optional[httpx.URL],
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.transport = transport

    def fetch_token(
        self,
        endpoint: str,
        client_id: str,
        client_secret: str,
        username: str,
        password: str,
    ) -> str:
        """
        Exchange user credentials for an access token.

        Args:
            endpoint: Token endpoint, relative to the base URL
            client_id: OAuth client identifier
            client_secret: OAuth client secret
            username: Resource owner name
            password: Resource owner password

        Returns:
            The decoded access token

        Raises:
            ConfigurationError: No base URL configured
            BootstrapTransportError: Connection, DNS or timeout failure
            AuthenticationError: Non-200 status or undecodable body
        """
        if self.base_url is None:
            raise ConfigurationError("bootstrap requires a base URL")

        form = {
            "grant_type": "password",
            "client_id": client_id,
            "client_secret": client_secret,
            "username": username,
            "password": password,
        }
        url = combine_url(self.base_url, endpoint)
        logger.debug(f"OAuth password grant POST {url} form={self._redact_form(form)}")

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                with client.stream("POST", url, data=form) as response:
                    response.read()
                    return self._decode(response)
        except httpx.TransportError as e:
            raise BootstrapTransportError(f"OAuth error: {e}") from e

    def _decode(self, response: httpx.Response) -> str:
        """Pull the access token out of a token endpoint response."""
        if response.status_code != 200:
            raise AuthenticationError(
                f"OAuth returned {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )

        try:
            payload: Any = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise AuthenticationError(
                f"Error decoding OAuth response: {e}",
                status_code=response.status_code,
            ) from e

        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not isinstance(token, str):
            raise AuthenticationError(
                "Error decoding OAuth response: missing string access_token",
                status_code=response.status_code,
            )

        return token

    @staticmethod
    def _redact_form(form: Dict[str, str]) -> Dict[str, str]:
        return {
            key: "***MASKED***" if key in SECRET_FIELDS else value
            for key, value in form.items()
        }


__all__ = [
    "AuthenticationError",
    "BootstrapTransportError",
    "CredentialBootstrapper",
    "DEFAULT_TIMEOUT",
]
