from collections.abc import Callable, Iterator
from typing import Any

import httpx
import pytest

from buildpack_usage.client import CloudControllerClient

API_BASE = "http://cf.mock.local"


def buildpack(guid: str, name: str) -> dict[str, Any]:
    return {"metadata": {"guid": guid}, "entity": {"name": name, "stack": "cflinuxfs4"}}


def app(
    name: str,
    space_url: str,
    *,
    detected: str | None = None,
    declared: str | None = None,
) -> dict[str, Any]:
    return {
        "metadata": {"guid": f"{name}-guid"},
        "entity": {
            "name": name,
            "space_url": space_url,
            "detected_buildpack_guid": detected,
            "buildpack": declared,
        },
    }


def space(name: str, organization_url: str) -> dict[str, Any]:
    return {"entity": {"name": name, "organization_url": organization_url}}


def org(name: str) -> dict[str, Any]:
    return {"entity": {"name": name}}


def page(resources: list[dict[str, Any]], next_url: str | None = None) -> dict[str, Any]:
    return {"total_results": len(resources), "resources": resources, "next_url": next_url}


class FakeCloudController:
    """Serves canned documents keyed by path + query and records each request."""

    def __init__(self, documents: dict[str, Any]) -> None:
        self.documents = documents
        self.requests: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        locator = request.url.raw_path.decode()
        self.requests.append(locator)
        if locator not in self.documents:
            return httpx.Response(404, json={"description": f"Unknown resource {locator}"})
        return httpx.Response(200, json=self.documents[locator])

    def count(self, locator: str) -> int:
        return self.requests.count(locator)


@pytest.fixture
def make_client() -> Iterator[Callable[[Callable[[httpx.Request], httpx.Response]], CloudControllerClient]]:
    clients: list[CloudControllerClient] = []

    def _build(handler: Callable[[httpx.Request], httpx.Response]) -> CloudControllerClient:
        client = CloudControllerClient(
            httpx.Client(transport=httpx.MockTransport(handler), base_url=API_BASE)
        )
        clients.append(client)
        return client

    yield _build
    for client in clients:
        client.close()


@pytest.fixture
def platform_documents() -> dict[str, Any]:
    """Two pages, five apps, two detected as java_buildpack in separate orgs."""
    return {
        "/v2/buildpacks": page(
            [
                buildpack("bp-java", "java_buildpack"),
                buildpack("bp-node", "nodejs_buildpack"),
                buildpack("bp-php", "php_buildpack"),
            ]
        ),
        "/v2/apps": page(
            [
                app("zeta-api", "/v2/spaces/s-dev", detected="bp-java"),
                app("web", "/v2/spaces/s-dev", detected="bp-node"),
                app("worker", "/v2/spaces/s-prod", declared="nodejs_buildpack"),
            ],
            next_url="/v2/apps?order-direction=asc&page=2&results-per-page=3",
        ),
        "/v2/apps?order-direction=asc&page=2&results-per-page=3": page(
            [
                app("alpha-api", "/v2/spaces/s-qa", detected="bp-java"),
                app("docs", "/v2/spaces/s-qa"),
            ]
        ),
        "/v2/spaces/s-dev": space("dev", "/v2/organizations/o-sales"),
        "/v2/spaces/s-prod": space("prod", "/v2/organizations/o-sales"),
        "/v2/spaces/s-qa": space("qa", "/v2/organizations/o-eng"),
        "/v2/organizations/o-sales": org("sales"),
        "/v2/organizations/o-eng": org("engineering"),
    }
