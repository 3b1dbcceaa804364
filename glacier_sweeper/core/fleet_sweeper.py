"""
Fleet Sweeper Module
====================

Orchestrates vault teardown across regions.

This module handles:
- Building one storage client per region
- Listing vaults and asking for confirmation per vault
- Purging confirmed vaults one at a time
- Isolating failures so no region or vault can abort the sweep
- Aggregating per-vault outcomes into a single report

Classes
-------
VaultStatus
    Final state of a vault within a sweep.
VaultReport
    Outcome of one vault.
SweepReport
    Aggregated results of a sweep.
FleetSweeper
    Walks regions and vaults in order.

Example
-------
>>> from glacier_sweeper.core import Credentials, FleetSweeper, SweepConfig
>>>
>>> sweeper = FleetSweeper(
...     credentials=Credentials("AKIA...", "secret"),
...     config=SweepConfig(regions=("us-east-1",)),
...     confirm=lambda vault: vault.name.startswith("tmp-"),
... )
>>> report = sweeper.sweep()
>>> print(f"Purged {len(report.purged_vaults)} vault(s)")

Notes
-----
Processing is sequential: regions, vaults and archives are
handled one at a time in listing order. The only blocking point is the
inventory job poll wait, which observes the cancel event.

See Also
--------
StorageClient : Client built for each region.
VaultPurger : Workflow run for each confirmed vault.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from glacier_sweeper.cleaners.vault_purger import (
    DeletionOutcome,
    PurgeSummary,
    VaultPurger,
)
from glacier_sweeper.core.exceptions import (
    GlacierSweepError,
    OperationCancelledError,
    StorageClientError,
)
from glacier_sweeper.core.models import Credentials, Vault
from glacier_sweeper.core.regions import SweepConfig
from glacier_sweeper.core.storage_client import StorageClient
from glacier_sweeper.inventory.retrieval_job import RetrievalJob

# Module logger
logger = logging.getLogger(__name__)

ClientFactory = Callable[[str, Credentials], StorageClient]
PurgerFactory = Callable[..., VaultPurger]


class VaultStatus(Enum):
    """Final state of a vault within a sweep."""

    PURGED = "purged"
    DECLINED = "declined"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass
class VaultReport:
    """
    Outcome of one vault.

    Parameters
    ----------
    vault : Vault
        The vault this report is about.
    status : VaultStatus
        What happened to the vault.
    summary : PurgeSummary, optional
        Per-archive outcomes, when a listing was obtained.
    error : str, optional
        Why the purge failed or stopped.
    error_type : str, optional
        Exception class name of the failure.
    """

    vault: Vault
    status: VaultStatus
    summary: Optional[PurgeSummary] = None
    error: Optional[str] = None
    error_type: Optional[str] = None

    @property
    def outcomes(self) -> List[DeletionOutcome]:
        return self.summary.outcomes if self.summary else []

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "vault": self.vault.to_dict(),
            "status": self.status.value,
            "error": self.error,
            "error_type": self.error_type,
            "summary": self.summary.to_dict() if self.summary else None,
        }


@dataclass
class SweepReport:
    """
    Aggregated results of a sweep across regions.

    Parameters
    ----------
    regions_requested : list of str
        Regions the sweep was configured to visit.
    regions_visited : list of str
        Regions the sweep actually reached, in order.
    vault_reports : list of VaultReport
        One report per vault encountered.
    region_errors : dict
        Mapping of skipped region name to the reason it was skipped.
    cancelled : bool
        Whether the sweep stopped because of a cancellation signal.
    dry_run : bool
        Whether deletions were simulated.
    """

    regions_requested: List[str] = field(default_factory=list)
    regions_visited: List[str] = field(default_factory=list)
    vault_reports: List[VaultReport] = field(default_factory=list)
    region_errors: Dict[str, str] = field(default_factory=dict)
    cancelled: bool = False
    dry_run: bool = False
    start_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    end_time: Optional[datetime] = None

    def _vaults_with(self, status: VaultStatus) -> List[VaultReport]:
        return [r for r in self.vault_reports if r.status == status]

    @property
    def purged_vaults(self) -> List[VaultReport]:
        return self._vaults_with(VaultStatus.PURGED)

    @property
    def declined_vaults(self) -> List[VaultReport]:
        return self._vaults_with(VaultStatus.DECLINED)

    @property
    def failed_vaults(self) -> List[VaultReport]:
        return self._vaults_with(VaultStatus.FAILED)

    @property
    def skipped_regions(self) -> List[str]:
        return list(self.region_errors.keys())

    @property
    def total_archives(self) -> int:
        return sum(len(r.outcomes) for r in self.vault_reports)

    @property
    def total_deleted(self) -> int:
        return sum(r.summary.deleted for r in self.vault_reports if r.summary)

    @property
    def total_failed_archives(self) -> int:
        return sum(r.summary.failed for r in self.vault_reports if r.summary)

    @property
    def has_failures(self) -> bool:
        """True if any vault failed or any archive could not be deleted."""
        return bool(self.failed_vaults) or self.total_failed_archives > 0

    def complete(self) -> None:
        self.end_time = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary for serialization.

        Returns
        -------
        dict
            Dictionary representation suitable for JSON serialization.
        """
        return {
            "regions_requested": self.regions_requested,
            "regions_visited": self.regions_visited,
            "region_errors": self.region_errors,
            "cancelled": self.cancelled,
            "dry_run": self.dry_run,
            "totals": {
                "vaults": len(self.vault_reports),
                "purged_vaults": len(self.purged_vaults),
                "declined_vaults": len(self.declined_vaults),
                "failed_vaults": len(self.failed_vaults),
                "archives": self.total_archives,
                "deleted_archives": self.total_deleted,
                "failed_archives": self.total_failed_archives,
            },
            "vaults": [r.to_dict() for r in self.vault_reports],
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
        }

    def __repr__(self) -> str:
        return (
            f"SweepReport(regions={len(self.regions_visited)}, "
            f"vaults={len(self.vault_reports)}, "
            f"deleted={self.total_deleted}, cancelled={self.cancelled})"
        )


class FleetSweeper:
    """
    Sweeps Glacier vaults across regions.

    Parameters
    ----------
    credentials : Credentials
        Access key pair used for every region client.
    config : SweepConfig
        Regions to visit, poll interval and dry-run flag.
    confirm : callable
        Called with each vault; only ``True`` allows the purge.
    client_factory : callable, default=StorageClient.connect
        Builds the client for a region from ``(region, credentials)``.
    purger_factory : callable, default=VaultPurger
        Builds the purger for a region client.
    cancel_event : threading.Event, optional
        Set by a supervisor to stop the sweep at the next wait, archive
        or vault boundary.
    progress_callback : callable, optional
        Called with ``(region, status)``; status is one of
        ``'scanning'``, ``'complete'``, ``'skipped'``.
    vault_callback : callable, optional
        Called with each finished :class:`VaultReport`.
    outcome_callback : callable, optional
        Called with each :class:`DeletionOutcome`.
    poll_callback : callable, optional
        Called with the :class:`RetrievalJob` after each pending poll.
    """

    def __init__(
        self,
        credentials: Credentials,
        config: SweepConfig,
        confirm: Callable[[Vault], bool],
        client_factory: ClientFactory = StorageClient.connect,
        purger_factory: PurgerFactory = VaultPurger,
        cancel_event: Optional[threading.Event] = None,
        progress_callback: Optional[Callable[[str, str], None]] = None,
        vault_callback: Optional[Callable[[VaultReport], None]] = None,
        outcome_callback: Optional[Callable[[DeletionOutcome], None]] = None,
        poll_callback: Optional[Callable[[RetrievalJob], None]] = None,
    ) -> None:
        """Initialize the sweeper with the specified configuration."""
        self.credentials = credentials
        self.config = config
        self.confirm = confirm
        self.client_factory = client_factory
        self.purger_factory = purger_factory
        self.cancel_event = cancel_event or threading.Event()
        self.progress_callback = progress_callback
        self.vault_callback = vault_callback
        self.outcome_callback = outcome_callback
        self.poll_callback = poll_callback

        logger.debug("Initialized FleetSweeper for %d region(s)", len(config.regions))

    def sweep(self) -> SweepReport:
        """
        Visit every configured region in order.

        Returns
        -------
        SweepReport
            Aggregated outcome; never raises for region, vault or
            archive failures. An interrupt (Ctrl-C) ends the sweep with
            ``cancelled`` set and everything recorded so far.
        """
        report = SweepReport(
            regions_requested=list(self.config.regions),
            dry_run=self.config.dry_run,
        )
        logger.info("Starting sweep across %d region(s)", len(self.config.regions))

        for region in self.config.regions:
            if self.cancel_event.is_set():
                report.cancelled = True
                break
            try:
                self._sweep_region(region, report)
            except KeyboardInterrupt:
                logger.warning("Sweep interrupted in region %s", region)
                self.cancel_event.set()
                report.cancelled = True
            if report.cancelled:
                break

        report.complete()
        logger.info(
            "Sweep finished: %d vault(s) purged, %d archive(s) deleted, %d region(s) skipped",
            len(report.purged_vaults),
            report.total_deleted,
            len(report.region_errors),
        )
        return report

    def _notify(self, region: str, status: str) -> None:
        if self.progress_callback:
            self.progress_callback(region, status)

    def _sweep_region(self, region: str, report: SweepReport) -> None:
        """Sweep a single region (internal method)."""
        report.regions_visited.append(region)
        self._notify(region, "scanning")

        try:
            client = self.client_factory(region, self.credentials)
        except StorageClientError as e:
            self._skip_region(region, f"Error creating Glacier client: {e}", report)
            return

        with client:
            try:
                vaults = client.list_vaults()
            except StorageClientError as e:
                self._skip_region(region, str(e), report)
                return

            purger = self.purger_factory(
                client,
                poll_interval=self.config.poll_interval,
                cancel_event=self.cancel_event,
                dry_run=self.config.dry_run,
            )
            for vault in vaults:
                if self.cancel_event.is_set():
                    report.cancelled = True
                    return
                vault_report = self._sweep_vault(purger, vault)
                report.vault_reports.append(vault_report)
                if self.vault_callback:
                    self.vault_callback(vault_report)
                if vault_report.status == VaultStatus.CANCELLED:
                    report.cancelled = True
                    return

        self._notify(region, "complete")

    def _skip_region(self, region: str, reason: str, report: SweepReport) -> None:
        logger.warning("Skipping region %s: %s", region, reason)
        report.region_errors[region] = reason
        self._notify(region, "skipped")

    def _sweep_vault(self, purger: VaultPurger, vault: Vault) -> VaultReport:
        """Confirm and purge a single vault (internal method)."""
        if not self.confirm(vault):
            logger.info("Vault %s in region %s left untouched", vault.name, vault.region)
            return VaultReport(vault=vault, status=VaultStatus.DECLINED)

        logger.info("Vault %s in region %s marked for deletion", vault.name, vault.region)
        try:
            summary = purger.purge(
                vault,
                progress_callback=self.outcome_callback,
                poll_callback=self.poll_callback,
            )
        except OperationCancelledError as e:
            return VaultReport(
                vault=vault,
                status=VaultStatus.CANCELLED,
                summary=e.summary,
                error=e.message,
                error_type=type(e).__name__,
            )
        except GlacierSweepError as e:
            logger.error("Purge of vault %s in %s failed: %s", vault.name, vault.region, e)
            return VaultReport(
                vault=vault,
                status=VaultStatus.FAILED,
                error=str(e),
                error_type=type(e).__name__,
            )

        return VaultReport(vault=vault, status=VaultStatus.PURGED, summary=summary)

    def __repr__(self) -> str:
        return (
            f"FleetSweeper(regions={len(self.config.regions)}, "
            f"dry_run={self.config.dry_run})"
        )
