"""
Cloud Controller client wrapper used by the resolver and the scanner.

All outgoing calls are plain GETs that return a JSON object; every failure
mode is normalized into a single TransportError.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from buildpack_usage.errors import TransportError
from buildpack_usage.http_client import create_cf_client
from buildpack_usage.settings import Settings

logger = logging.getLogger(__name__)


def _require_non_empty(value: str, field_name: str) -> str:
    """Normalize and validate non-empty request arguments."""
    cleaned = value.strip()
    if not cleaned:
        raise ValueError(f"{field_name} must be a non-empty string.")
    return cleaned


@dataclass(slots=True)
class CloudControllerClient:
    """Typed wrapper around the shared blocking Client."""

    _client: httpx.Client

    @classmethod
    def from_settings(cls, settings: Settings) -> "CloudControllerClient":
        """Factory that builds the client from Settings."""
        return cls(create_cf_client(settings))

    def close(self) -> None:
        """Close the underlying HTTP resources."""
        self._client.close()

    def __enter__(self) -> "CloudControllerClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def fetch(self, locator: str) -> dict[str, Any]:
        """GET a relative API path or an absolute URL and return the JSON object."""
        path = _require_non_empty(locator, "locator")
        logger.debug("Fetching resource", extra={"path": path})
        return self._request("GET", path)

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        """Normalized request handler for all outgoing API calls."""

        def _transport_error(message: str, *, exc: Exception | None = None) -> TransportError:
            logger.error(
                message,
                extra={"method": method, "path": path},
                exc_info=exc,
            )
            return TransportError(message)

        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as exc:
            raise _transport_error(
                f"Platform API request timed out ({method} {path}).",
                exc=exc,
            ) from exc
        except httpx.RequestError as exc:
            raise _transport_error(
                f"Platform API request failed ({method} {path}): {exc!s}",
                exc=exc,
            ) from exc

        if response.is_error:
            snippet = response.text.strip()
            if len(snippet) > 512:
                snippet = f"{snippet[:512]}..."
            logger.warning(
                "Platform API responded with error",
                extra={
                    "method": method,
                    "path": path,
                    "status_code": response.status_code,
                    "content": snippet,
                },
            )
            raise TransportError(
                f"Platform API error ({response.status_code}) during {method} {path}: {snippet or 'no body provided.'}"
            )

        try:
            data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.error(
                "Platform API returned invalid JSON",
                extra={"method": method, "path": path},
            )
            raise TransportError(
                f"Platform API returned invalid JSON during {method} {path}."
            ) from exc

        if not isinstance(data, dict):
            raise _transport_error(
                f"Platform API returned a {type(data).__name__} instead of an object during {method} {path}."
            )
        return data
