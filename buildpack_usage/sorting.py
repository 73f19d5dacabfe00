"""Deterministic ordering of report rows."""

from collections.abc import Iterable

from buildpack_usage.models import AppLocator


def locator_key(locator: AppLocator) -> tuple[str, str, str]:
    return (locator.org_name, locator.space_name, locator.app_name)


def sort_locators(locators: Iterable[AppLocator]) -> list[AppLocator]:
    """Order by org, then space, then app name; equal keys keep their input order."""
    return sorted(locators, key=locator_key)
