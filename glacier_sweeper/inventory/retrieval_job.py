"""
Inventory Retrieval Job
=======================

State machine for one in-flight Glacier inventory retrieval job.

States
------
::

    REQUESTED --poll--> PENDING --poll--> PENDING ...
        |                  |
        +------------------+--poll--> COMPLETED  (terminal)
                           |
                           +--poll--> FAILED     (terminal)

``REQUESTED`` is the instant after Glacier returned a job ID and before
the first poll. Terminal states are never left and are never polled
again. Reaching ``COMPLETED`` allows exactly one fetch of the job output.

Glacier cannot cancel a job, so there is no cancelled state: cancelling
a wait only stops this process from waiting on it.

Example
-------
>>> job = RetrievalJob.start(client, vault)
>>> job.wait_until_complete(poll_interval=60, cancel_event=stop)
>>> archives = job.fetch_archives()
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, List, Optional

from glacier_sweeper.core.exceptions import (
    JobFailedError,
    JobStateError,
    OperationCancelledError,
)
from glacier_sweeper.core.models import ArchiveRef, JobStatusReport, Vault
from glacier_sweeper.core.storage_client import StorageClient
from glacier_sweeper.inventory.archive_lister import ArchiveLister

# Module logger
logger = logging.getLogger(__name__)


class JobStatus(Enum):
    """Status of an inventory retrieval job."""

    REQUESTED = "requested"
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


class RetrievalJob:
    """
    One inventory retrieval job for one vault.

    Parameters
    ----------
    client : StorageClient
        Client of the region the vault lives in.
    vault : Vault
        Vault being inventoried.
    job_id : str
        Glacier job ID returned by ``initiate_job``.
    lister : ArchiveLister, optional
        Decoder for the job output.

    Attributes
    ----------
    status : JobStatus
        Current state; changed only by :meth:`poll`.
    poll_count : int
        Number of status queries sent to Glacier.
    last_report : JobStatusReport or None
        Most recent ``describe_job`` result.
    """

    def __init__(
        self,
        client: StorageClient,
        vault: Vault,
        job_id: str,
        lister: Optional[ArchiveLister] = None,
    ) -> None:
        self.client = client
        self.vault = vault
        self.job_id = job_id
        self.lister = lister or ArchiveLister()
        self.status = JobStatus.REQUESTED
        self.poll_count = 0
        self.last_report: Optional[JobStatusReport] = None
        self.requested_at = datetime.now(timezone.utc)
        self.completed_at: Optional[datetime] = None
        self._archives: Optional[List[ArchiveRef]] = None

    @classmethod
    def start(
        cls,
        client: StorageClient,
        vault: Vault,
        lister: Optional[ArchiveLister] = None,
    ) -> RetrievalJob:
        """
        Initiate an inventory retrieval job for ``vault``.

        Raises
        ------
        JobInitiationError
            If Glacier does not accept the job.
        """
        job_id = client.start_inventory_job(vault)
        logger.info(
            "Inventory retrieval job initiated for vault %s, job ID: %s",
            vault.name,
            job_id,
        )
        return cls(client, vault, job_id, lister=lister)

    def poll(self) -> JobStatus:
        """
        Query the job status once and advance the state machine.

        A job already in a terminal state is not queried again.

        Raises
        ------
        JobQueryError
            If the status query fails.
        """
        if self.status.is_terminal:
            return self.status

        report = self.client.poll_job_status(self.job_id, self.vault)
        self.poll_count += 1
        self.last_report = report

        if not report.completed:
            self.status = JobStatus.PENDING
        elif report.failed:
            self.status = JobStatus.FAILED
            self.completed_at = datetime.now(timezone.utc)
        else:
            self.status = JobStatus.COMPLETED
            self.completed_at = datetime.now(timezone.utc)
        return self.status

    def wait_until_complete(
        self,
        poll_interval: float,
        cancel_event: Optional[threading.Event] = None,
        on_poll: Optional[Callable[[RetrievalJob], None]] = None,
    ) -> None:
        """
        Block until the job reaches a terminal state.

        Waits ``poll_interval`` seconds before every poll. There is no
        timeout: inventory jobs routinely take several hours.

        Parameters
        ----------
        poll_interval : float
            Seconds to wait between polls.
        cancel_event : threading.Event, optional
            When set, the wait returns early and the job is abandoned.
        on_poll : callable, optional
            Called with the job after every poll that leaves it pending.

        Raises
        ------
        OperationCancelledError
            If ``cancel_event`` is set while waiting.
        JobFailedError
            If Glacier reports the job as failed.
        JobQueryError
            If a status query fails.
        """
        cancel_event = cancel_event or threading.Event()

        while not self.status.is_terminal:
            if cancel_event.wait(poll_interval):
                logger.warning(
                    "Stopped waiting for job %s on vault %s", self.job_id, self.vault.name
                )
                raise OperationCancelledError(
                    f"Cancelled while waiting for inventory of vault {self.vault.name}",
                    details={"vault": self.vault.name, "job_id": self.job_id},
                )

            if self.poll() is JobStatus.PENDING:
                logger.info(
                    "Waiting for inventory retrieval job on vault %s (poll %d)",
                    self.vault.name,
                    self.poll_count,
                )
                if on_poll:
                    on_poll(self)

        if self.status is JobStatus.FAILED:
            message = self.last_report.status_message if self.last_report else None
            raise JobFailedError(
                f"Inventory retrieval job failed: {message or 'no reason given'}",
                vault=self.vault.name,
                region=self.vault.region,
                job_id=self.job_id,
            )

        logger.info("Inventory retrieval job completed for vault %s", self.vault.name)

    def fetch_archives(self) -> List[ArchiveRef]:
        """
        Fetch and decode the job output.

        The output is downloaded at most once; later calls return the
        same list.

        Raises
        ------
        JobStateError
            If the job has not completed successfully.
        JobOutputError
            If the output cannot be downloaded.
        MalformedOutputError
            If the output cannot be decoded.
        """
        if self.status is not JobStatus.COMPLETED:
            raise JobStateError(
                f"Job output is not available in state '{self.status.value}'",
                vault=self.vault.name,
                region=self.vault.region,
                job_id=self.job_id,
            )
        if self._archives is None:
            payload = self.client.fetch_job_output(self.job_id, self.vault)
            self._archives = self.lister.decode(payload, self.vault)
        return self._archives

    def __repr__(self) -> str:
        return (
            f"RetrievalJob(vault='{self.vault.name}', region='{self.vault.region}', "
            f"job_id='{self.job_id}', status={self.status.value})"
        )
