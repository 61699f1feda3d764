"""URL helpers shared by suites, the OAuth bootstrap and request contexts."""

from __future__ import annotations

from typing import Optional, Union

import httpx

from .config_loader import ConfigurationError


ALLOWED_SCHEMES = ("http", "https")


def parse_base_url(raw: str) -> httpx.URL:
    """
    Parse a base URL, rejecting anything that is not an absolute http(s) URL.

    Raises:
        ConfigurationError: If the URL is malformed or relative
    """
    if not isinstance(raw, str) or not raw.strip():
        raise ConfigurationError(f"Error parsing base URL: empty value {raw!r}")

    try:
        url = httpx.URL(raw.strip())
    except httpx.InvalidURL as e:
        raise ConfigurationError(f"Error parsing base URL {raw!r}: {e}") from e

    if url.scheme not in ALLOWED_SCHEMES:
        raise ConfigurationError(
            f"Error parsing base URL {raw!r}: scheme must be one of {ALLOWED_SCHEMES}"
        )
    if not url.host:
        raise ConfigurationError(f"Error parsing base URL {raw!r}: missing host")

    return url


def combine_url(base: Optional[httpx.URL], endpoint: Union[str, httpx.URL]) -> str:
    """
    Join ``endpoint`` onto the path of ``base``.

    ``/api`` + ``/oauth/token`` gives ``/api/oauth/token``; an absolute
    endpoint is returned unchanged. The endpoint's query string is kept,
    the base's is dropped. Both paths are joined in their encoded form, so
    ``a%2Fb`` stays a single segment.
    """
    try:
        target = httpx.URL(endpoint)
    except httpx.InvalidURL as e:
        raise ConfigurationError(f"Invalid endpoint {endpoint!r}: {e}") from e

    if target.is_absolute_url:
        return str(target)

    if base is None:
        raise ConfigurationError(
            f"Cannot resolve {endpoint!r}: no base URL configured"
        )

    base_path = base.raw_path.decode("ascii").partition("?")[0]
    path, has_query, query = target.raw_path.decode("ascii").partition("?")

    authority = base.netloc.decode("ascii")
    if base.userinfo:
        authority = f"{base.userinfo.decode('ascii')}@{authority}"

    combined = f"{base.scheme}://{authority}{base_path.rstrip('/')}/{path.lstrip('/')}"
    if has_query and query:
        combined = f"{combined}?{query}"
    return combined


__all__ = [
    "ALLOWED_SCHEMES",
    "combine_url",
    "parse_base_url",
]
