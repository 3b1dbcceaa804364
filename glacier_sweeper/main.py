"""
glacier-sweeper CLI - Glacier Vault Teardown

Main entry point for the command-line interface.
"""

import signal
import sys
import threading
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape

from .core.exceptions import StorageClientError
from .core.fleet_sweeper import FleetSweeper, SweepReport
from .core.logging import setup_logging
from .core.models import Credentials
from .core.regions import DEFAULT_POLL_INTERVAL, GLACIER_REGIONS, SweepConfig, resolve_regions
from .core.storage_client import StorageClient
from .reporters.cli_reporter import CLIReporter
from .reporters.json_reporter import JSONReporter


console = Console()

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_CANCELLED = 130

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _credentials(
    reporter: CLIReporter, access_key_id: str, secret_access_key: str
) -> Credentials:
    """Build credentials, exiting before any AWS call when either half is blank."""
    if not access_key_id.strip() or not secret_access_key.strip():
        reporter.print_error("AWS Access Key ID and Secret Access Key are required")
        sys.exit(EXIT_FAILURES)
    return Credentials(access_key_id.strip(), secret_access_key.strip())


def credential_options(func):
    """Attach the access key pair options shared by every AWS command."""
    func = click.option(
        "--secret",
        "--secret-access-key",
        "secret_access_key",
        envvar="AWS_SECRET_ACCESS_KEY",
        required=True,
        help="AWS Secret Access Key (or AWS_SECRET_ACCESS_KEY)",
    )(func)
    func = click.option(
        "--id",
        "--access-key-id",
        "access_key_id",
        envvar="AWS_ACCESS_KEY_ID",
        required=True,
        help="AWS Access Key ID (or AWS_ACCESS_KEY_ID)",
    )(func)
    return func


@click.group()
@click.version_option(version="0.1.0", prog_name="glacier-sweeper")
def cli():
    """
    glacier-sweeper: Amazon S3 Glacier vault teardown

    Finds Glacier vaults across regions and, for every vault you confirm,
    requests an inventory and deletes each archive it lists.
    """
    pass


@cli.command("sweep")
@credential_options
@click.option(
    "--region",
    "-r",
    default=None,
    help="Only sweep this region (default: every Glacier region)",
)
@click.option(
    "--poll-interval",
    default=DEFAULT_POLL_INTERVAL,
    type=click.FloatRange(min=0),
    show_default=True,
    help="Seconds between inventory job status checks",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Request inventories and list archives without deleting them",
)
@click.option(
    "--yes",
    "-y",
    is_flag=True,
    default=False,
    help="Answer yes to every vault prompt (dangerous!)",
)
@click.option(
    "--output",
    "-o",
    default=None,
    help="Write the sweep report to this JSON file",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity",
)
@click.option(
    "--log-file",
    default=None,
    help="Also write log records to this file",
)
def sweep(
    access_key_id: str,
    secret_access_key: str,
    region: Optional[str],
    poll_interval: float,
    dry_run: bool,
    yes: bool,
    output: Optional[str],
    log_level: str,
    log_file: Optional[str],
):
    """
    Empty Glacier vaults, one confirmed vault at a time.

    For each vault you confirm, an inventory retrieval job is started.
    These jobs usually take several hours; the sweep waits, then deletes
    every archive the inventory lists.

    Examples:

        # Sweep every region, asking before each vault
        glacier-sweeper sweep --id AKIA... --secret ...

        # Only one region, check job status every 15 minutes
        glacier-sweeper sweep -r eu-west-1 --poll-interval 900

        # See what would be deleted and keep a report
        glacier-sweeper sweep --dry-run --output sweep.json
    """
    setup_logging(level=log_level, log_file=log_file)
    reporter = CLIReporter(console)
    credentials = _credentials(reporter, access_key_id, secret_access_key)

    config = SweepConfig(
        regions=resolve_regions(region),
        poll_interval=poll_interval,
        dry_run=dry_run,
    )
    cancel_event = threading.Event()

    sweeper = FleetSweeper(
        credentials=credentials,
        config=config,
        confirm=(lambda vault: True) if yes else reporter.confirm_vault,
        client_factory=StorageClient.connect,
        cancel_event=cancel_event,
        progress_callback=reporter.print_region_progress,
        vault_callback=reporter.print_vault_report,
        outcome_callback=reporter.print_outcome,
        poll_callback=reporter.print_poll_notice,
    )

    reporter.print_sweep_header(config.regions, dry_run=dry_run)

    previous_handler = signal.signal(signal.SIGTERM, lambda signum, frame: cancel_event.set())
    try:
        report = sweeper.sweep()
    except KeyboardInterrupt:
        console.print("\n[yellow]Sweep cancelled by user.[/yellow]")
        sys.exit(EXIT_CANCELLED)
    finally:
        signal.signal(signal.SIGTERM, previous_handler)

    reporter.report_sweep(report)

    output_file = None
    if output:
        output_file = JSONReporter(output_path=output).report(report)
    reporter.print_completion_message(output_file)

    sys.exit(_exit_code(report))


def _exit_code(report: SweepReport) -> int:
    if report.cancelled:
        return EXIT_CANCELLED
    if report.has_failures:
        return EXIT_FAILURES
    return EXIT_OK


@cli.command("regions")
def list_regions():
    """List the regions swept when no --region is given."""
    console.print(f"\n[bold]Glacier regions ({len(GLACIER_REGIONS)} total):[/bold]\n")
    for region in GLACIER_REGIONS:
        console.print(f"  • {region}")
    console.print()


@cli.command("validate")
@credential_options
@click.option(
    "--region",
    "-r",
    default="us-east-1",
    help="AWS region to use for validation",
)
def validate_credentials(access_key_id: str, secret_access_key: str, region: str):
    """Validate AWS credentials and show account info."""
    reporter = CLIReporter(console)
    credentials = _credentials(reporter, access_key_id, secret_access_key)
    try:
        with StorageClient(region, credentials) as client:
            identity = client.validate_credentials()
    except StorageClientError as e:
        reporter.print_error(f"Validation Failed: {e}")
        sys.exit(EXIT_FAILURES)

    console.print("\n[green bold]AWS credentials are valid![/green bold]")
    console.print(f"\n  Account ID: {identity['Account']}")
    console.print(f"  ARN: {escape(identity['Arn'])}")
    console.print(f"  Region: {region}")
    console.print()


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
