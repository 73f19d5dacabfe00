"""
The buildpack-usage command: resolve, scan, sort and present.

Each run ends in exactly one of three reportable outcomes (EMPTY, POPULATED or
FAILED) so presentation stays separate from the scan itself.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TextIO

from buildpack_usage.client import CloudControllerClient
from buildpack_usage.errors import BuildpackUsageError
from buildpack_usage.models import AppLocator, Buildpack
from buildpack_usage.presenter import ReportPresenter
from buildpack_usage.resolver import BuildpackResolver
from buildpack_usage.scanner import AppScanner
from buildpack_usage.settings import MAX_SELECTION_ATTEMPTS, Settings
from buildpack_usage.sorting import sort_locators

logger = logging.getLogger(__name__)


class ReportStatus(Enum):
    EMPTY = "empty"
    POPULATED = "populated"
    FAILED = "failed"


@dataclass(frozen=True)
class UsageReport:
    status: ReportStatus
    buildpack: Buildpack | None = None
    locators: tuple[AppLocator, ...] = field(default_factory=tuple)
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status is not ReportStatus.FAILED


class BuildpackUsageCommand:
    """Wires the resolver, scanner and sorter to a presenter."""

    def __init__(
        self,
        client: CloudControllerClient,
        presenter: ReportPresenter,
        *,
        input_stream: TextIO,
        output: TextIO,
        max_attempts: int = MAX_SELECTION_ATTEMPTS,
        name_fallback: bool = True,
    ) -> None:
        self._resolver = BuildpackResolver(client, max_attempts=max_attempts)
        self._scanner = AppScanner(client, name_fallback=name_fallback)
        self._presenter = presenter
        self._input = input_stream
        self._output = output

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        client: CloudControllerClient,
        presenter: ReportPresenter,
        *,
        input_stream: TextIO,
        output: TextIO,
    ) -> "BuildpackUsageCommand":
        return cls(
            client,
            presenter,
            input_stream=input_stream,
            output=output,
            max_attempts=settings.max_selection_attempts,
            name_fallback=settings.name_fallback,
        )

    def run(self, buildpack_name: str | None = None) -> UsageReport:
        """Resolve the buildpack (prompting when no name is given) and report its apps."""
        buildpack: Buildpack | None = None
        try:
            if buildpack_name is None:
                buildpack = self._resolver.select_interactively(self._input, self._output)
            else:
                buildpack = self._resolver.resolve_by_name(buildpack_name)

            self._presenter.checking(buildpack.name)
            locators = sort_locators(self._scanner.scan(buildpack))
        except BuildpackUsageError as exc:
            logger.warning("buildpack-usage failed", exc_info=True)
            report = UsageReport(ReportStatus.FAILED, buildpack=buildpack, error=str(exc))
        else:
            status = ReportStatus.POPULATED if locators else ReportStatus.EMPTY
            report = UsageReport(status, buildpack=buildpack, locators=tuple(locators))

        self.present(report)
        return report

    def present(self, report: UsageReport) -> None:
        if report.status is ReportStatus.FAILED:
            self._presenter.failed(report.error or "unknown error")
            return

        self._presenter.ok()
        if report.status is ReportStatus.EMPTY:
            self._presenter.no_apps()
        else:
            self._presenter.table(report.locators)
