"""
Integration smoke test for the buildpack-usage command.

This script spins up:
1. A mock Cloud Controller v2 API (Starlette) exposing /v2/buildpacks, a
   two-page /v2/apps collection, and the spaces/organizations they point at.
2. The buildpack-usage CLI, pointed at the mock API through CF_API_URL.

Usage:
    python scripts/smoke_test.py

The script prints the CLI output and exits with the CLI's exit code.
"""

import os
import sys
import threading
import time
from typing import Any

import uvicorn
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from buildpack_usage.cli import run_cli

MOCK_SERVICE_HOST = "127.0.0.1"
MOCK_SERVICE_PORT = 9071

BUILDPACKS: list[dict[str, Any]] = [
    {"metadata": {"guid": "bp-java"}, "entity": {"name": "java_buildpack"}},
    {"metadata": {"guid": "bp-node"}, "entity": {"name": "nodejs_buildpack"}},
]

APP_PAGES: dict[str, dict[str, Any]] = {
    "1": {
        "resources": [
            {"entity": {"name": "orders", "space_url": "/v2/spaces/dev", "detected_buildpack_guid": "bp-java"}},
            {"entity": {"name": "frontend", "space_url": "/v2/spaces/dev", "detected_buildpack_guid": "bp-node"}},
        ],
        "next_url": "/v2/apps?page=2",
    },
    "2": {
        "resources": [
            {"entity": {"name": "billing", "space_url": "/v2/spaces/prod", "buildpack": "java_buildpack"}},
        ],
        "next_url": None,
    },
}

SPACES = {
    "dev": {"name": "dev", "organization_url": "/v2/organizations/retail"},
    "prod": {"name": "prod", "organization_url": "/v2/organizations/finance"},
}

ORGANIZATIONS = {"retail": {"name": "retail"}, "finance": {"name": "finance"}}


async def buildpacks_endpoint(request: Request) -> JSONResponse:
    return JSONResponse({"resources": BUILDPACKS, "next_url": None})


async def apps_endpoint(request: Request) -> JSONResponse:
    return JSONResponse(APP_PAGES[request.query_params.get("page", "1")])


async def space_endpoint(request: Request) -> JSONResponse:
    space = SPACES.get(request.path_params["guid"])
    if space is None:
        return JSONResponse({"description": "space not found"}, status_code=404)
    return JSONResponse({"entity": space})


async def organization_endpoint(request: Request) -> JSONResponse:
    organization = ORGANIZATIONS.get(request.path_params["guid"])
    if organization is None:
        return JSONResponse({"description": "organization not found"}, status_code=404)
    return JSONResponse({"entity": organization})


def build_mock_service() -> Starlette:
    return Starlette(
        routes=[
            Route("/v2/buildpacks", buildpacks_endpoint, methods=["GET"]),
            Route("/v2/apps", apps_endpoint, methods=["GET"]),
            Route("/v2/spaces/{guid:str}", space_endpoint, methods=["GET"]),
            Route("/v2/organizations/{guid:str}", organization_endpoint, methods=["GET"]),
        ],
    )


def start_uvicorn_app(app: Starlette, host: str, port: int) -> uvicorn.Server:
    config = uvicorn.Config(app, host=host, port=port, log_level="error")
    server = uvicorn.Server(config)
    threading.Thread(target=server.run, daemon=True).start()
    # Give the server a moment to bind the port.
    time.sleep(0.3)
    return server


def run_smoke_flow() -> int:
    print("Starting mock Cloud Controller API...")
    mock_server = start_uvicorn_app(build_mock_service(), MOCK_SERVICE_HOST, MOCK_SERVICE_PORT)

    os.environ["CF_API_URL"] = f"http://{MOCK_SERVICE_HOST}:{MOCK_SERVICE_PORT}"
    os.environ["CF_TOKEN"] = "smoke-token"

    try:
        print("Running buildpack-usage -b java_buildpack...")
        exit_code = run_cli(["buildpack-usage", "-b", "java_buildpack"])
        print("Exit code:", exit_code)
        if exit_code == 0:
            print("Smoke test succeeded")
        return exit_code
    finally:
        print("Stopping mock Cloud Controller API...")
        mock_server.should_exit = True
        time.sleep(0.2)


if __name__ == "__main__":
    try:
        sys.exit(run_smoke_flow())
    except KeyboardInterrupt:
        print("Smoke test interrupted.")
