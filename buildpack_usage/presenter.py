"""Terminal rendering of a buildpack usage report."""

from collections.abc import Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from buildpack_usage.models import AppLocator

TABLE_HEADERS = ("org", "space", "application")


class ReportPresenter:
    """Writes status lines and the result table to an injected console."""

    def __init__(self, console: Console) -> None:
        self._console = console

    def checking(self, buildpack_name: str) -> None:
        self._console.print(
            f"Checking which apps use buildpack [cyan]{escape(buildpack_name)}[/cyan] ...\n"
        )

    def ok(self) -> None:
        self._console.print("[green]OK[/green]\n")

    def failed(self, message: str) -> None:
        self._console.print("[red]FAILED[/red]")
        self._console.print(f"Error completing request: {escape(message)}")

    def no_apps(self) -> None:
        self._console.print("No apps found")

    def table(self, locators: Sequence[AppLocator]) -> None:
        table = Table(box=box.SIMPLE_HEAD, show_edge=False, pad_edge=False)
        for header in TABLE_HEADERS:
            table.add_column(header, style="bold" if header == "application" else None)
        for locator in locators:
            table.add_row(
                escape(locator.org_name),
                escape(locator.space_name),
                escape(locator.app_name),
            )
        self._console.print(table)
