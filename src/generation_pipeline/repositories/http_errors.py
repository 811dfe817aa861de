"""Mapping of httpx failures onto the provider error taxonomy."""

import httpx

from generation_pipeline.errors import (
    MissingCredentialsError,
    ProviderNetworkError,
    RateLimitedError,
)


def raise_for_provider_status(provider: str, response: httpx.Response) -> None:
    """Raise the matching ProviderError for a non-2xx response.

    Raises:
        MissingCredentialsError: On 401/403
        RateLimitedError: On 429
        ProviderNetworkError: On any other non-success status
    """
    status = response.status_code
    if status < 400:
        return
    if status in (401, 403):
        raise MissingCredentialsError(provider, f"credentials rejected (HTTP {status})")
    if status == 429:
        raise RateLimitedError(provider, "rate limited (HTTP 429)")
    raise ProviderNetworkError(provider, f"unexpected HTTP {status}")


def network_error(provider: str, error: httpx.HTTPError) -> ProviderNetworkError:
    """Wrap a transport-level httpx error."""
    message = f"{type(error).__name__}: {error}"
    if "connection refused" in str(error).lower():
        message += " (is the provider endpoint reachable?)"
    return ProviderNetworkError(provider, message)
