"""
PagerDuty HTTP client setup.
"""

import httpx

from core.config import (
    PAGERDUTY_ACCEPT_HEADER,
    PAGERDUTY_API_TOKEN,
    PAGERDUTY_BASE_URL,
    PAGERDUTY_TIMEOUT_SECONDS,
)


def build_auth_header(api_token: str, auth_method: str = "api-token") -> str:
    """Authorization header value: OAuth tokens are bearer tokens, API keys are not."""
    if auth_method == "oauth":
        return f"Bearer {api_token}"
    return f"Token token={api_token}"


def create_pagerduty_client(
    api_token: str | None = None,
    auth_method: str = "api-token",
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """
    Create an async PagerDuty REST client.

    Falls back to PAGERDUTY_API_TOKEN when no token is given. The caller owns
    the client and must close it (use it as an async context manager).

    Raises:
        ValueError: If no token is available
    """
    token = api_token or PAGERDUTY_API_TOKEN
    if not token:
        raise ValueError("No PagerDuty API token provided")

    return httpx.AsyncClient(
        base_url=PAGERDUTY_BASE_URL,
        headers={
            "Accept": PAGERDUTY_ACCEPT_HEADER,
            "Authorization": build_auth_header(token, auth_method),
            "Content-Type": "application/json",
        },
        timeout=PAGERDUTY_TIMEOUT_SECONDS,
        transport=transport,
    )
