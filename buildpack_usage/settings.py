"""Environment-driven configuration utilities for the buildpack-usage command."""

import logging
import os
import subprocess
from dataclasses import dataclass

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

MAX_SELECTION_ATTEMPTS = 10
CF_CLI_TIMEOUT = 10.0

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _read_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean value (true/false).")


def _read_positive_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip() or str(default)
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer.") from exc
    if value <= 0:
        raise ValueError(f"{name} must be greater than zero.")
    return value


def _token_from_cf_cli() -> str:
    """Ask a logged-in cf CLI for its current OAuth token."""
    try:
        output = subprocess.check_output(
            ["cf", "oauth-token"],
            text=True,
            stderr=subprocess.DEVNULL,
            timeout=CF_CLI_TIMEOUT,
        )
    except (OSError, subprocess.CalledProcessError, subprocess.TimeoutExpired) as exc:
        logger.debug("cf oauth-token unavailable", exc_info=exc)
        return ""
    return output.strip()


def _normalize_token(token: str) -> str:
    if token.lower().startswith("bearer "):
        return token
    return f"bearer {token}"


@dataclass(frozen=True, slots=True)
class Settings:
    """Container for runtime configuration."""

    api_url: str
    access_token: str
    api_timeout: float = 30.0
    skip_ssl_validation: bool = False
    max_selection_attempts: int = MAX_SELECTION_ATTEMPTS
    name_fallback: bool = True

    @classmethod
    def load(cls) -> "Settings":
        """
        Load configuration from environment variables.

        Python-dotenv is used so developers can rely on a local .env file without
        exporting variables globally. When CF_TOKEN is not set the token of the
        logged-in cf CLI is used.
        """
        load_dotenv()

        api_url = os.getenv("CF_API_URL", "").strip()
        if not api_url:
            raise ValueError("CF_API_URL is required but was not provided.")

        token = os.getenv("CF_TOKEN", "").strip() or _token_from_cf_cli()
        if not token:
            raise ValueError(
                "CF_TOKEN is required when no logged-in cf CLI is available."
            )

        api_timeout_raw = os.getenv("API_TIMEOUT", "").strip() or "30"
        try:
            api_timeout = float(api_timeout_raw)
        except ValueError as exc:
            raise ValueError("API_TIMEOUT must be a numeric value.") from exc
        if api_timeout <= 0:
            raise ValueError("API_TIMEOUT must be greater than zero.")

        return cls(
            api_url=api_url.rstrip("/"),
            access_token=_normalize_token(token),
            api_timeout=api_timeout,
            skip_ssl_validation=_read_bool("CF_SKIP_SSL_VALIDATION", False),
            max_selection_attempts=_read_positive_int(
                "MAX_SELECTION_ATTEMPTS", MAX_SELECTION_ATTEMPTS
            ),
            name_fallback=_read_bool("BUILDPACK_NAME_FALLBACK", True),
        )
