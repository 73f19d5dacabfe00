"""HTTP client factory for talking to the Cloud Controller API."""

import httpx

from buildpack_usage.settings import Settings


def create_cf_client(settings: Settings) -> httpx.Client:
    """
    Build a blocking Client configured for the platform API.

    Requests are issued one at a time, so no connection pool tuning is applied.
    """
    return httpx.Client(
        base_url=settings.api_url,
        timeout=settings.api_timeout,
        verify=not settings.skip_ssl_validation,
        headers={
            "Authorization": settings.access_token,
            "Accept": "application/json",
        },
    )
