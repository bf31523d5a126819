"""FastAPI dependencies for PagerDuty credentials and shared resources."""

from collections.abc import AsyncIterator
from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException, status

from api.models.responses import ErrorCodes
from core.config import PAGERDUTY_API_TOKEN
from core.pagerduty_client import create_pagerduty_client
from services.schedules import PagerDutyScheduleSource


@dataclass
class PagerDutyCredentials:
    token: str
    auth_method: str  # "api-token" or "oauth"


async def get_pagerduty_credentials(
    x_pagerduty_token: str | None = Header(None, alias="X-PagerDuty-Token"),
    authorization: str | None = Header(None),
) -> PagerDutyCredentials:
    """
    Resolve the PagerDuty token for this request.

    Order: X-PagerDuty-Token header (API token), 'Authorization: Bearer'
    (OAuth token), then the server's PAGERDUTY_API_TOKEN.

    Raises:
        HTTPException: 401 if no token is available
    """
    if x_pagerduty_token:
        return PagerDutyCredentials(token=x_pagerduty_token, auth_method="api-token")

    if authorization and authorization.lower().startswith("bearer "):
        token = authorization[len("bearer "):].strip()
        if token:
            return PagerDutyCredentials(token=token, auth_method="oauth")

    if PAGERDUTY_API_TOKEN:
        return PagerDutyCredentials(token=PAGERDUTY_API_TOKEN, auth_method="api-token")

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={
            "error": "Missing PagerDuty access token",
            "code": ErrorCodes.UNAUTHORIZED,
            "details": ["Send X-PagerDuty-Token or Authorization: Bearer <token>"],
        },
    )


async def get_schedule_source(
    credentials: PagerDutyCredentials = Depends(get_pagerduty_credentials),
) -> AsyncIterator[PagerDutyScheduleSource]:
    """Yield a schedule source whose HTTP client is closed after the request."""
    async with create_pagerduty_client(credentials.token, credentials.auth_method) as client:
        yield PagerDutyScheduleSource(client)
