"""
Command line entry point.

Usage::

    cf-usage buildpack-usage [-b BUILDPACK]

Without ``-b`` the available buildpacks are listed and one is chosen
interactively.
"""

import argparse
import logging
import sys
from typing import TextIO

from rich.console import Console

from buildpack_usage import __version__
from buildpack_usage.client import CloudControllerClient
from buildpack_usage.command import BuildpackUsageCommand
from buildpack_usage.presenter import ReportPresenter
from buildpack_usage.settings import Settings

logger = logging.getLogger(__name__)

COMMAND_NAME = "buildpack-usage"

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG_ERROR = 2


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cf-usage",
        description="Inspect how platform applications are built.",
    )
    parser.add_argument("--version", "-v", action="store_true", help="Show the version")

    subparsers = parser.add_subparsers(dest="command")
    usage_parser = subparsers.add_parser(
        COMMAND_NAME,
        help="Show all apps using a given buildpack",
    )
    usage_parser.add_argument(
        "-b",
        "--buildpack",
        dest="buildpack",
        default=None,
        help="The requested buildpack (prompted for when omitted)",
    )
    return parser


def run_cli(
    args: list[str] | None = None,
    *,
    settings: Settings | None = None,
    client: CloudControllerClient | None = None,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    """
    Run the CLI and return the process exit code.

    Settings and the API client are built from the environment unless given.
    A client built here is closed on return; an injected client stays open
    and remains owned by the caller.
    """
    parser = create_parser()
    parsed = parser.parse_args(args)
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    if parsed.version:
        stdout.write(f"buildpack-usage v{__version__}\n")
        return EXIT_OK

    if parsed.command != COMMAND_NAME:
        parser.print_help(stdout)
        return EXIT_OK

    if settings is None:
        try:
            settings = Settings.load()
        except ValueError as exc:
            logger.error("Invalid configuration: %s", exc)
            stdout.write(f"Configuration error: {exc}\n")
            return EXIT_CONFIG_ERROR

    owns_client = client is None
    if client is None:
        client = CloudControllerClient.from_settings(settings)

    presenter = ReportPresenter(Console(file=stdout, highlight=False, soft_wrap=True))
    try:
        command = BuildpackUsageCommand.from_settings(
            settings,
            client,
            presenter,
            input_stream=stdin,
            output=stdout,
        )
        report = command.run(parsed.buildpack)
    finally:
        if owns_client:
            client.close()

    return EXIT_OK if report.succeeded else EXIT_FAILED
