"""Walk the application collection and collect the apps built with a buildpack."""

import logging

from buildpack_usage.client import CloudControllerClient
from buildpack_usage.models import (
    AppEntity,
    AppLocator,
    AppPage,
    Buildpack,
    OrganizationResource,
    OrgSpaceInfo,
    SpaceResource,
    decode,
)

logger = logging.getLogger(__name__)

APPS_PATH = "/v2/apps"


def matches_buildpack(app: AppEntity, buildpack: Buildpack, *, name_fallback: bool = True) -> bool:
    """
    Decide whether ``app`` was built with ``buildpack``.

    The detected guid is checked first. Apps that were never detected only
    carry the declared buildpack name, so with ``name_fallback`` that name is
    compared too. Two buildpacks sharing a name both match the fallback.
    """
    if app.detected_buildpack_guid == buildpack.guid:
        return True
    return name_fallback and app.buildpack is not None and app.buildpack == buildpack.name


class AppScanner:
    """One scan over ``/v2/apps`` with a space -> org/space cache local to the scan."""

    def __init__(self, client: CloudControllerClient, *, name_fallback: bool = True) -> None:
        self._client = client
        self._name_fallback = name_fallback

    def scan(self, buildpack: Buildpack) -> list[AppLocator]:
        """Return every matching app as an unsorted list of locators."""
        locators: list[AppLocator] = []
        org_spaces: dict[str, OrgSpaceInfo] = {}
        pages = 0

        next_url: str | None = APPS_PATH
        while next_url is not None:
            page = decode(AppPage, self._client.fetch(next_url), next_url)
            pages += 1
            for resource in page.resources:
                app = resource.entity
                if not matches_buildpack(app, buildpack, name_fallback=self._name_fallback):
                    continue

                info = org_spaces.get(app.space_url)
                if info is None:
                    info = self._org_space_info(app.space_url)
                    org_spaces[app.space_url] = info

                locators.append(AppLocator.for_app(info, app.name))
            next_url = page.next_url

        logger.info(
            "Scan complete",
            extra={
                "buildpack": buildpack.name,
                "pages": pages,
                "matches": len(locators),
                "spaces": len(org_spaces),
            },
        )
        return locators

    def _org_space_info(self, space_url: str) -> OrgSpaceInfo:
        space = decode(SpaceResource, self._client.fetch(space_url), space_url).entity
        org_url = space.organization_url
        org = decode(OrganizationResource, self._client.fetch(org_url), org_url).entity
        return OrgSpaceInfo(org_name=org.name, space_name=space.name)
