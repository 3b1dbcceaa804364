"""
Purger for emptying a Glacier vault.

Runs the inventory-then-delete workflow for one vault, with dry-run
mode, per-archive error isolation and progress callbacks.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from ..core.exceptions import DeletionError, OperationCancelledError
from ..core.models import ArchiveRef, Vault
from ..core.regions import DEFAULT_POLL_INTERVAL
from ..core.storage_client import StorageClient
from ..inventory.archive_lister import ArchiveLister
from ..inventory.retrieval_job import RetrievalJob

logger = logging.getLogger(__name__)


class DeleteStatus(Enum):
    """Status of a single archive delete attempt."""

    SUCCESS = "success"
    FAILED = "failed"
    DRY_RUN = "dry_run"


@dataclass
class DeletionOutcome:
    """
    Result of a single archive deletion attempt.

    Attributes:
        archive_id: Glacier archive ID
        vault_name: Name of the vault holding the archive
        region: AWS region
        status: Result status
        error_message: Error message if failed
        error_code: Glacier error code if the service returned one
        timestamp: When the operation was attempted
    """

    archive_id: str
    vault_name: str
    region: str
    status: DeleteStatus
    error_message: Optional[str] = None
    error_code: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def success(self) -> bool:
        return self.status == DeleteStatus.SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "archive_id": self.archive_id,
            "vault_name": self.vault_name,
            "region": self.region,
            "status": self.status.value,
            "success": self.success,
            "error_message": self.error_message,
            "error_code": self.error_code,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class PurgeSummary:
    """
    Outcomes of purging one vault, in listing order.

    Attributes:
        vault: The purged vault
        job_id: Inventory retrieval job used for the listing
        total: Number of archives processed
        deleted: Number successfully deleted
        failed: Number that failed to delete
        dry_run: Number processed in dry-run mode
        outcomes: Individual outcome for each archive
        start_time: When the purge started
        end_time: When the purge completed
    """

    vault: Vault
    job_id: Optional[str] = None
    total: int = 0
    deleted: int = 0
    failed: int = 0
    dry_run: int = 0
    outcomes: List[DeletionOutcome] = field(default_factory=list)
    start_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    end_time: Optional[datetime] = None

    def add_outcome(self, outcome: DeletionOutcome) -> None:
        """Add an outcome and update counts."""
        self.outcomes.append(outcome)
        self.total += 1

        if outcome.status == DeleteStatus.SUCCESS:
            self.deleted += 1
        elif outcome.status == DeleteStatus.FAILED:
            self.failed += 1
        elif outcome.status == DeleteStatus.DRY_RUN:
            self.dry_run += 1

    def complete(self) -> None:
        """Mark the purge as complete."""
        self.end_time = datetime.now(timezone.utc)

    @property
    def failed_outcomes(self) -> List[DeletionOutcome]:
        return [o for o in self.outcomes if o.status == DeleteStatus.FAILED]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "vault": self.vault.name,
            "region": self.vault.region,
            "job_id": self.job_id,
            "total": self.total,
            "deleted": self.deleted,
            "failed": self.failed,
            "dry_run": self.dry_run,
            "outcomes": [o.to_dict() for o in self.outcomes],
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
        }


class VaultPurger:
    """
    Empties vaults of one region.

    For each vault: start an inventory job, poll until it completes,
    fetch and decode the listing, then delete every archive one at a
    time. A failed delete is recorded and never stops the remaining
    deletes.
    """

    def __init__(
        self,
        storage_client: StorageClient,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        cancel_event: Optional[threading.Event] = None,
        dry_run: bool = False,
        lister: Optional[ArchiveLister] = None,
    ):
        """
        Initialize the purger.

        Args:
            storage_client: Client of the region being purged
            poll_interval: Seconds between job status checks
            cancel_event: Event that interrupts waits and deletions when set
            dry_run: If True, list archives but do not delete them
            lister: Decoder for job output
        """
        self.storage_client = storage_client
        self.region = storage_client.region
        self.poll_interval = poll_interval
        self.cancel_event = cancel_event or threading.Event()
        self.dry_run = dry_run
        self.lister = lister or ArchiveLister()

    def purge(
        self,
        vault: Vault,
        progress_callback: Optional[Callable[[DeletionOutcome], None]] = None,
        poll_callback: Optional[Callable[[RetrievalJob], None]] = None,
    ) -> PurgeSummary:
        """
        Delete every archive of a vault.

        Args:
            vault: Vault to empty
            progress_callback: Optional callback called after each archive
            poll_callback: Optional callback called after each pending poll

        Returns:
            PurgeSummary with one outcome per listed archive

        Raises:
            JobInitiationError, JobQueryError, JobOutputError,
            MalformedOutputError: The vault could not be inventoried
            OperationCancelledError: The cancel event was set or the
                process was interrupted; carries the outcomes produced
                so far
        """
        summary: Optional[PurgeSummary] = None
        try:
            job = RetrievalJob.start(self.storage_client, vault, lister=self.lister)
            logger.warning(
                "This operation will likely take a number of hours to complete. "
                "Please wait while AWS generates a list of archives for vault %s.",
                vault.name,
            )

            job.wait_until_complete(
                self.poll_interval,
                cancel_event=self.cancel_event,
                on_poll=poll_callback,
            )
            archives = job.fetch_archives()
            logger.info("Vault %s lists %d archive(s)", vault.name, len(archives))

            summary = PurgeSummary(vault=vault, job_id=job.job_id)
            self._delete_all(archives, summary, progress_callback)
        except KeyboardInterrupt as e:
            # Ctrl-C becomes a cancellation carrying the partial summary
            self.cancel_event.set()
            if summary is not None:
                summary.complete()
            raise OperationCancelledError(
                f"Interrupted while purging vault {vault.name}",
                summary=summary,
                details={"vault": vault.name},
            ) from e

        summary.complete()
        logger.info(
            "Vault %s: %d deleted, %d failed, %d dry-run",
            vault.name,
            summary.deleted,
            summary.failed,
            summary.dry_run,
        )
        return summary

    def _delete_all(
        self,
        archives: List[ArchiveRef],
        summary: PurgeSummary,
        progress_callback: Optional[Callable[[DeletionOutcome], None]],
    ) -> None:
        """Delete archives in listing order, stopping when cancelled (internal method)."""
        for archive in archives:
            if self.cancel_event.is_set():
                summary.complete()
                raise OperationCancelledError(
                    f"Cancelled while deleting archives of vault {summary.vault.name}",
                    summary=summary,
                    details={
                        "vault": summary.vault.name,
                        "remaining": len(archives) - summary.total,
                    },
                )

            outcome = self.delete_archive(archive)
            summary.add_outcome(outcome)

            if progress_callback:
                progress_callback(outcome)

    def delete_archive(self, archive: ArchiveRef) -> DeletionOutcome:
        """
        Delete a single archive.

        Args:
            archive: Archive to delete

        Returns:
            DeletionOutcome with operation status
        """
        vault = archive.vault
        if self.dry_run:
            return DeletionOutcome(
                archive_id=archive.archive_id,
                vault_name=vault.name,
                region=vault.region,
                status=DeleteStatus.DRY_RUN,
            )

        try:
            self.storage_client.delete_archive(vault, archive.archive_id)
        except DeletionError as e:
            logger.warning(
                "Error deleting archive %s from vault %s: %s",
                archive.archive_id,
                vault.name,
                e.message,
            )
            return DeletionOutcome(
                archive_id=archive.archive_id,
                vault_name=vault.name,
                region=vault.region,
                status=DeleteStatus.FAILED,
                error_message=e.message,
                error_code=e.error_code,
            )

        return DeletionOutcome(
            archive_id=archive.archive_id,
            vault_name=vault.name,
            region=vault.region,
            status=DeleteStatus.SUCCESS,
        )
