"""
Tests for the RetrievalJob state machine.
"""

import threading
from unittest.mock import MagicMock

import pytest

from glacier_sweeper.core.exceptions import (
    JobFailedError,
    JobInitiationError,
    JobStateError,
    OperationCancelledError,
)
from glacier_sweeper.core.models import Vault
from glacier_sweeper.inventory.retrieval_job import JobStatus, RetrievalJob


@pytest.fixture
def sample_vault():
    return Vault(region="us-east-1", name="backups")


class TestStateTransitions:
    """Tests for poll-driven transitions."""

    def test_start_is_requested(self, make_fake_client, sample_vault):
        client = make_fake_client(vault_names=["backups"])

        job = RetrievalJob.start(client, sample_vault)

        assert job.status == JobStatus.REQUESTED
        assert job.job_id == "job-backups"
        assert job.poll_count == 0
        assert client.ops("poll") == []

    def test_start_failure_propagates(self, make_fake_client, sample_vault):
        client = make_fake_client(
            start_error=JobInitiationError("Access denied", vault="backups")
        )

        with pytest.raises(JobInitiationError):
            RetrievalJob.start(client, sample_vault)

    def test_pending_then_completed(self, make_fake_client, sample_vault, pending):
        client = make_fake_client(statuses=[pending])
        job = RetrievalJob.start(client, sample_vault)

        assert job.poll() == JobStatus.PENDING
        assert job.poll() == JobStatus.COMPLETED
        assert job.completed_at is not None

    def test_failed_is_terminal(self, make_fake_client, sample_vault, failed_job):
        client = make_fake_client(statuses=[failed_job])
        job = RetrievalJob.start(client, sample_vault)

        assert job.poll() == JobStatus.FAILED
        assert job.poll() == JobStatus.FAILED
        assert len(client.ops("poll")) == 1

    def test_completed_is_never_polled_again(self, make_fake_client, sample_vault):
        client = make_fake_client()
        job = RetrievalJob.start(client, sample_vault)

        job.poll()
        job.poll()
        job.poll()

        assert job.status == JobStatus.COMPLETED
        assert job.poll_count == 1
        assert len(client.ops("poll")) == 1


class TestWaitUntilComplete:
    """Tests for the polling loop."""

    def test_three_pending_polls_then_one_fetch(
        self, make_fake_client, sample_vault, pending, make_payload
    ):
        """Test that the output is fetched once, only after the final poll."""
        client = make_fake_client(
            statuses=[pending, pending, pending],
            outputs={"backups": make_payload("a1")},
        )
        job = RetrievalJob.start(client, sample_vault)
        notices = []

        job.wait_until_complete(0, on_poll=notices.append)
        archives = job.fetch_archives()

        assert [a.archive_id for a in archives] == ["a1"]
        assert len(notices) == 3
        assert [call[0] for call in client.calls] == [
            "start",
            "poll",
            "poll",
            "poll",
            "poll",
            "fetch",
        ]

    def test_waits_before_every_poll(self, make_fake_client, sample_vault, pending):
        client = make_fake_client(statuses=[pending, pending])
        event = MagicMock(spec=threading.Event)
        event.wait.return_value = False
        job = RetrievalJob.start(client, sample_vault)

        job.wait_until_complete(60, cancel_event=event)

        assert event.wait.call_count == 3
        event.wait.assert_called_with(60)

    def test_failed_job_raises(self, make_fake_client, sample_vault, pending, failed_job):
        client = make_fake_client(statuses=[pending, failed_job])
        job = RetrievalJob.start(client, sample_vault)

        with pytest.raises(JobFailedError, match="Inventory not available") as exc_info:
            job.wait_until_complete(0)

        assert exc_info.value.job_id == "job-backups"
        assert client.ops("fetch") == []

    def test_cancelled_before_first_poll(self, make_fake_client, sample_vault):
        client = make_fake_client()
        cancel_event = threading.Event()
        cancel_event.set()
        job = RetrievalJob.start(client, sample_vault)

        with pytest.raises(OperationCancelledError):
            job.wait_until_complete(3600, cancel_event=cancel_event)

        assert client.ops("poll") == []
        assert job.status == JobStatus.REQUESTED

    def test_cancelled_between_polls(self, make_fake_client, sample_vault, pending):
        client = make_fake_client(statuses=[pending, pending])
        event = MagicMock(spec=threading.Event)
        event.wait.side_effect = [False, True]
        job = RetrievalJob.start(client, sample_vault)

        with pytest.raises(OperationCancelledError):
            job.wait_until_complete(60, cancel_event=event)

        assert job.poll_count == 1
        assert job.status == JobStatus.PENDING


class TestFetchArchives:
    """Tests for fetching the job output."""

    def test_fetch_before_completion_rejected(self, make_fake_client, sample_vault, pending):
        client = make_fake_client(statuses=[pending])
        job = RetrievalJob.start(client, sample_vault)
        job.poll()

        with pytest.raises(JobStateError):
            job.fetch_archives()

        assert client.ops("fetch") == []

    def test_fetch_after_failure_rejected(self, make_fake_client, sample_vault, failed_job):
        client = make_fake_client(statuses=[failed_job])
        job = RetrievalJob.start(client, sample_vault)
        job.poll()

        with pytest.raises(JobStateError):
            job.fetch_archives()

    def test_output_fetched_once(self, make_fake_client, sample_vault, make_payload):
        client = make_fake_client(outputs={"backups": make_payload("a1", "a2")})
        job = RetrievalJob.start(client, sample_vault)
        job.wait_until_complete(0)

        first = job.fetch_archives()
        second = job.fetch_archives()

        assert first == second
        assert len(client.ops("fetch")) == 1
