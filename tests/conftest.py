"""
Pytest configuration and shared fixtures for testing.
"""

import json
import os

import boto3
import pytest
from moto import mock_aws

from glacier_sweeper.core.exceptions import DeletionError, RegionUnavailableError
from glacier_sweeper.core.models import Credentials, JobStatusReport, Vault
from glacier_sweeper.core.storage_client import StorageClient


def inventory_payload(*archive_ids):
    """Build a job output document listing the given archive IDs."""
    return json.dumps(
        {
            "VaultARN": "arn:aws:glacier:us-east-1:123456789012:vaults/test",
            "InventoryDate": "2024-01-15T10:30:00Z",
            "ArchiveList": [
                {"ArchiveId": archive_id, "Size": 1024, "SHA256TreeHash": "abc"}
                for archive_id in archive_ids
            ],
        }
    ).encode("utf-8")


class FakeStorageClient:
    """
    In-memory stand-in for StorageClient.

    Records every call in ``calls`` so tests can assert ordering.
    """

    def __init__(
        self,
        region="us-east-1",
        vault_names=(),
        statuses=None,
        outputs=None,
        failing_archives=(),
        list_error=None,
        start_error=None,
    ):
        self.region = region
        self.vaults = [Vault(region=region, name=name) for name in vault_names]
        # Polls left before a job reports completion
        self.statuses = list(statuses or [])
        self.outputs = outputs or {}
        self.failing_archives = set(failing_archives)
        self.list_error = list_error
        self.start_error = start_error
        self.calls = []
        self.closed = False

    def list_vaults(self):
        self.calls.append(("list_vaults",))
        if self.list_error:
            raise self.list_error
        return list(self.vaults)

    def start_inventory_job(self, vault):
        self.calls.append(("start", vault.name))
        if self.start_error:
            raise self.start_error
        return f"job-{vault.name}"

    def poll_job_status(self, job_id, vault):
        self.calls.append(("poll", vault.name))
        if self.statuses:
            return self.statuses.pop(0)
        return JobStatusReport(completed=True, status_code="Succeeded")

    def fetch_job_output(self, job_id, vault):
        self.calls.append(("fetch", vault.name))
        return self.outputs.get(vault.name, inventory_payload())

    def delete_archive(self, vault, archive_id):
        self.calls.append(("delete", vault.name, archive_id))
        if archive_id in self.failing_archives:
            raise DeletionError(
                "Archive no longer exists (already deleted)",
                archive_id=archive_id,
                vault=vault.name,
                error_code="ResourceNotFoundException",
            )

    def ops(self, name):
        """Return recorded calls of one operation."""
        return [call for call in self.calls if call[0] == name]

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


@pytest.fixture
def aws_credentials():
    """Mock AWS credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


@pytest.fixture
def mock_aws_environment(aws_credentials):
    """Create a mocked AWS environment."""
    with mock_aws():
        yield


@pytest.fixture
def credentials():
    """Static test key pair."""
    return Credentials("testing", "testing")


@pytest.fixture
def storage_client(mock_aws_environment, credentials):
    """Create a StorageClient bound to the mocked us-east-1."""
    client = StorageClient.connect("us-east-1", credentials)
    yield client
    client.close()


@pytest.fixture
def glacier_client(mock_aws_environment):
    """Create a boto3 Glacier client for setting up test vaults."""
    return boto3.client("glacier", region_name="us-east-1")


@pytest.fixture
def vault(glacier_client):
    """Create a vault for testing."""
    glacier_client.create_vault(vaultName="test-vault")
    return Vault(region="us-east-1", name="test-vault")


@pytest.fixture
def make_fake_client():
    """Factory for FakeStorageClient instances."""
    return FakeStorageClient


@pytest.fixture
def make_payload():
    """Factory for inventory job output payloads."""
    return inventory_payload


@pytest.fixture
def pending():
    return JobStatusReport(completed=False, status_code="InProgress")


@pytest.fixture
def succeeded():
    return JobStatusReport(completed=True, status_code="Succeeded")


@pytest.fixture
def failed_job():
    return JobStatusReport(
        completed=True, status_code="Failed", status_message="Inventory not available"
    )


@pytest.fixture
def unavailable_region_error():
    return RegionUnavailableError(
        "Error listing Glacier vaults in region me-south-1: region is not enabled",
        service="glacier",
        region="me-south-1",
    )
