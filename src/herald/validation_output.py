from __future__ import annotations

from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .results import NotificationResult
from .validation import ValidationIssue, ValidationReport, describe_section, group_validation_issues


class ValidationFormatter:
    """Renders a configuration :class:`ValidationReport` as grouped Rich panels."""

    def __init__(
        self,
        console: Optional[Console] = None,
        config_data: Optional[Dict[str, Any]] = None,
    ):
        self.console = console or Console()
        self.config_data = config_data

    def format_report(self, report: ValidationReport) -> None:
        if report.errors:
            self._format_issues(report.errors, "error", "Validation Errors", "bold red")
        if report.warnings:
            self._format_issues(report.warnings, "warning", "Validation Warnings", "bold yellow")

        if not report.errors and not report.warnings:
            self.console.print("[bold green]✓ Configuration passed validation.[/bold green]")
        elif not report.errors:
            self.console.print("[bold green]✓ Configuration passed validation (with warnings).[/bold green]")

    def _format_issues(
        self,
        issues: List[ValidationIssue],
        severity: str,
        header_text: str,
        header_style: str,
    ) -> None:
        self.console.print(f"\n[{header_style}]{header_text}: {len(issues)} {severity}(s) detected[/{header_style}]")
        for section, section_issues in group_validation_issues(issues).items():
            panel = Panel(
                self._create_issues_table(section_issues),
                title=f"[bold]{escape(describe_section(section, self.config_data))}[/bold]",
                border_style="red" if severity == "error" else "yellow",
                padding=(1, 2),
            )
            self.console.print(panel)

    def _create_issues_table(self, issues: List[ValidationIssue]) -> Table:
        table = Table(show_header=False, show_edge=False, pad_edge=False, box=None, padding=(0, 1))
        table.add_column("Path", style="cyan", overflow="fold")
        table.add_column("Message", overflow="fold")
        for issue in issues:
            table.add_row(escape(issue.path), f"{escape(issue.message)} [dim]({issue.code})[/dim]")
        return table


def format_result_table(results: List[NotificationResult]) -> Table:
    """One row per send outcome, used by the ``send`` command."""
    table = Table(title="Delivery Results")
    table.add_column("Notification", style="dim", overflow="fold")
    table.add_column("Channel")
    table.add_column("Provider")
    table.add_column("Status")
    table.add_column("Detail", overflow="fold")
    for result in results:
        status = "[green]sent[/green]" if result.success else "[red]failed[/red]"
        detail = result.message_id if result.success else f"{result.error_message} ({result.error_code})"
        table.add_row(
            result.notification_id or "-",
            result.channel.name if result.channel else "-",
            result.provider_name or "-",
            status,
            detail or "",
        )
    return table


__all__ = [
    "ValidationFormatter",
    "format_result_table",
]
