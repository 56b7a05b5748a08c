"""Report rendering for the CLI"""

from rich.console import Console
from rich.table import Table

from backend import TestReport


def show_report(report: TestReport, console: Console):
    """
    Print failed assertions, suite errors and the run totals

    Args:
        report: Report of the finished run
        console: Rich console for output
    """
    if report.failed or report.errors:
        table = Table(title="Failures")
        table.add_column("Test", style="cyan")
        table.add_column("Check")
        table.add_column("Detail")

        for outcome in report.failed:
            table.add_row(outcome.description, outcome.check, outcome.message)
        for error in report.errors:
            table.add_row(error.source, f"[red]{error.error_type}[/red]", error.message)

        console.print(table)

    style = "green" if report.ok else "red"
    marker = "✓" if report.ok else "✗"
    console.print(f"[{style}]{marker} {report.summary()}[/{style}]")
