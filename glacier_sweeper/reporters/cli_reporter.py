"""
CLI Reporter Module
===================

Rich terminal output for sweeps.

This module provides:
- The per-vault y/N confirmation prompt
- Live progress lines for regions, polls and archive deletions
- A final summary panel and per-vault table
- Highlighted skipped regions and failed vaults

Classes
-------
CLIReporter
    Main reporter class for terminal output.

Example
-------
>>> from glacier_sweeper.reporters import CLIReporter
>>>
>>> reporter = CLIReporter()
>>> if reporter.confirm_vault(vault):
...     ...
>>> reporter.report_sweep(sweep_report)

See Also
--------
rich : Python library for rich text and formatting.
JSONReporter : For machine-readable output.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from glacier_sweeper.cleaners.vault_purger import DeleteStatus, DeletionOutcome
from glacier_sweeper.core.fleet_sweeper import SweepReport, VaultReport, VaultStatus
from glacier_sweeper.core.models import Vault
from glacier_sweeper.inventory.retrieval_job import RetrievalJob

# Module logger
logger = logging.getLogger(__name__)

STATUS_ICONS = {
    DeleteStatus.SUCCESS: "[green]✓[/green]",
    DeleteStatus.FAILED: "[red]✗[/red]",
    DeleteStatus.DRY_RUN: "[blue]~[/blue]",
}

VAULT_STYLES = {
    VaultStatus.PURGED: "green",
    VaultStatus.DECLINED: "dim",
    VaultStatus.FAILED: "red",
    VaultStatus.CANCELLED: "yellow",
}


class CLIReporter:
    """
    Reporter for displaying sweep progress and results in the terminal.

    Parameters
    ----------
    console : Console, optional
        Rich Console instance. If not provided, creates a new one.

    Attributes
    ----------
    console : Console
        The Rich Console used for output and prompts.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        """Initialize the CLI reporter with a Rich Console."""
        self.console = console or Console()
        logger.debug("Initialized CLIReporter")

    # =========================================================================
    # Interaction
    # =========================================================================

    def confirm_vault(self, vault: Vault) -> bool:
        """
        Ask whether a vault should be destroyed.

        Only a case-insensitive ``y`` confirms; anything else, including
        an empty answer or a closed stdin, declines.

        Parameters
        ----------
        vault : Vault
            Vault about to be purged.

        Returns
        -------
        bool
            True if the user answered ``y``.
        """
        prompt = (
            f"[bold red]{escape(str(vault))}: "
            "Would you like to destroy this vault? (y/N) [/bold red]"
        )
        try:
            answer = self.console.input(prompt)
        except EOFError:
            answer = ""

        if answer.strip().lower() == "y":
            self.console.print(
                f"[green]Vault {escape(vault.name)} in region "
                f"{escape(vault.region)} marked for deletion.[/green]"
            )
            return True
        return False

    # =========================================================================
    # Progress Callbacks
    # =========================================================================

    def print_sweep_header(self, regions: Sequence[str], dry_run: bool = False) -> None:
        """Print the mode banner and the list of regions about to be swept."""
        if dry_run:
            self.console.print(
                Panel(
                    "[yellow bold]DRY-RUN MODE[/yellow bold]\n"
                    "Inventories will be requested but no archive will be deleted.",
                    border_style="yellow",
                )
            )

        region_text = (
            ", ".join(regions) if len(regions) <= 5
            else f"{len(regions)} regions"
        )
        header_text = Text()
        header_text.append("\nGlacier Vault Sweep\n", style="bold blue")
        header_text.append(f"Regions: {region_text}", style="dim")
        self.console.print(Panel(header_text, border_style="blue"))

    def print_region_progress(self, region: str, status: str) -> None:
        """Progress callback for region-level events."""
        if status == "scanning":
            self.console.print(
                f"\nScanning for Glacier Vaults in region [green bold]{escape(region)}[/]"
            )
        elif status == "skipped":
            self.console.print(f"  [yellow]Skipping region {escape(region)}[/yellow]")

    def print_poll_notice(self, job: RetrievalJob) -> None:
        """Poll callback: the inventory job is still running."""
        self.console.print(
            f"  [dim]Waiting for inventory of {escape(job.vault.name)} "
            f"(check {job.poll_count})...[/dim]"
        )

    def print_outcome(self, outcome: DeletionOutcome) -> None:
        """Progress callback for a single archive."""
        icon = STATUS_ICONS.get(outcome.status, "?")
        text = {
            DeleteStatus.SUCCESS: "Deleted",
            DeleteStatus.FAILED: f"Failed: {outcome.error_message}",
            DeleteStatus.DRY_RUN: "Would delete",
        }.get(outcome.status, "Unknown")
        self.console.print(
            f"  {icon} {escape(outcome.archive_id)} - {escape(text)}",
            highlight=False,
        )

    def print_vault_report(self, report: VaultReport) -> None:
        """Vault callback: announce failed or cancelled vaults."""
        if report.status == VaultStatus.FAILED:
            self.console.print(
                f"  [red]Vault {escape(report.vault.name)} could not be purged: "
                f"{escape(report.error or 'unknown error')}[/red]"
            )
        elif report.status == VaultStatus.PURGED and report.summary is not None:
            self.console.print(
                f"  [green]Vault {escape(report.vault.name)}: "
                f"{report.summary.deleted} deleted, {report.summary.failed} failed[/green]"
            )

    # =========================================================================
    # Final Report
    # =========================================================================

    def report_sweep(self, report: SweepReport) -> None:
        """
        Print the final summary of a sweep.

        Parameters
        ----------
        report : SweepReport
            Aggregated sweep results.
        """
        self._print_summary(report)

        if report.vault_reports:
            self._print_vault_table(report.vault_reports)
        else:
            self.console.print("\n[green]No Glacier vaults found.[/green]")

        if report.region_errors:
            self.console.print("\n[yellow bold]Skipped regions:[/yellow bold]")
            for region, reason in report.region_errors.items():
                self.console.print(f"  [yellow]{escape(region)}:[/yellow] {escape(reason)}")

        failed_archives = [
            o for r in report.vault_reports for o in r.outcomes
            if o.status == DeleteStatus.FAILED
        ]
        if failed_archives:
            self.console.print("\n[red bold]Archives that could not be deleted:[/red bold]")
            for outcome in failed_archives:
                self.console.print(
                    f"  [red]• {escape(f'[{outcome.region}] {outcome.vault_name}')} "
                    f"{escape(outcome.archive_id)}: {escape(outcome.error_message or '')}[/red]",
                    highlight=False,
                )

        if report.cancelled:
            self.console.print("\n[yellow]Sweep was cancelled before it finished.[/yellow]")

    def _print_summary(self, report: SweepReport) -> None:
        summary = Table(show_header=False, box=None, padding=(0, 2))
        summary.add_column("Metric", style="cyan")
        summary.add_column("Value", style="white")

        summary.add_row("Regions Visited:", str(len(report.regions_visited)))
        summary.add_row("Vaults Found:", str(len(report.vault_reports)))
        summary.add_row("Vaults Purged:", f"[green]{len(report.purged_vaults)}[/]")
        if report.dry_run:
            summary.add_row("Archives Listed:", str(report.total_archives))
        else:
            summary.add_row("Archives Deleted:", f"[green]{report.total_deleted}[/]")
        failed_style = "red" if report.total_failed_archives else "green"
        summary.add_row("Archives Failed:", f"[{failed_style}]{report.total_failed_archives}[/]")
        if report.failed_vaults:
            summary.add_row("Vaults Failed:", f"[red]{len(report.failed_vaults)}[/]")
        if report.region_errors:
            summary.add_row(
                "Errors:",
                f"[yellow]{len(report.region_errors)} region(s) skipped[/]",
            )

        self.console.print("\n")
        self.console.print(Panel(summary, title="Summary", border_style="blue"))

    def _print_vault_table(self, vault_reports: Sequence[VaultReport]) -> None:
        table = Table(title="\nVaults", title_style="bold", show_lines=False)
        table.add_column("Region", style="yellow", no_wrap=True)
        table.add_column("Vault", style="cyan")
        table.add_column("Status")
        table.add_column("Deleted", justify="right")
        table.add_column("Failed", justify="right")
        table.add_column("Error", style="dim", max_width=50)

        for r in vault_reports:
            style = VAULT_STYLES.get(r.status, "white")
            table.add_row(
                r.vault.region,
                r.vault.name,
                f"[{style}]{r.status.value}[/]",
                str(r.summary.deleted) if r.summary else "-",
                str(r.summary.failed) if r.summary else "-",
                escape(self._truncate(r.error or "", 50)),
            )

        self.console.print(table)

    @staticmethod
    def _truncate(text: str, max_length: int) -> str:
        if len(text) <= max_length:
            return text
        return text[:max_length - 3] + "..."

    # =========================================================================
    # Messages
    # =========================================================================

    def print_completion_message(self, output_file: Optional[str] = None) -> None:
        """Print sweep completion message."""
        self.console.print("\n[green bold]Sweep complete![/green bold]")
        if output_file:
            self.console.print(f"[dim]Report saved to: {escape(output_file)}[/dim]")

    def print_error(self, message: str) -> None:
        """Print an error message."""
        self.console.print(f"\n[red bold]Error:[/red bold] {escape(message)}")

    def __repr__(self) -> str:
        return "CLIReporter()"
