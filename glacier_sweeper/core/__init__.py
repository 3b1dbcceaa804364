"""
Core Components
===============

This module provides the foundational components for glacier-sweeper:

- :class:`StorageClient` - Region-scoped Glacier client
- :class:`FleetSweeper` - Walks regions and vaults
- :class:`SweepConfig` - Immutable sweep configuration
- Domain models and the exception hierarchy

Classes
-------
StorageClient
    boto3 Glacier wrapper with retry configuration and error translation.
FleetSweeper
    Sequential region and vault orchestration with failure isolation.
SweepReport
    Aggregated results of a sweep.
SweepConfig
    Regions, poll interval and dry-run flag.

Exceptions
----------
GlacierSweepError
    Base exception for all glacier-sweeper errors.
StorageClientError
    Region-level errors; the region is skipped.
JobError
    Inventory job errors; the vault is skipped.
DeletionError
    Single archive failures; recorded as failed outcomes.

See Also
--------
glacier_sweeper.inventory : Inventory job and output decoding.
glacier_sweeper.cleaners : Vault purger.
glacier_sweeper.reporters : Output formatters.
"""

from glacier_sweeper.core.exceptions import (
    AuthError,
    DeletionError,
    GlacierSweepError,
    JobError,
    JobFailedError,
    JobInitiationError,
    JobOutputError,
    JobQueryError,
    JobStateError,
    MalformedOutputError,
    NetworkError,
    OperationCancelledError,
    RegionUnavailableError,
    StorageClientError,
)
from glacier_sweeper.core.models import ArchiveRef, Credentials, JobStatusReport, Vault
from glacier_sweeper.core.regions import GLACIER_REGIONS, SweepConfig, resolve_regions
from glacier_sweeper.core.storage_client import StorageClient
from glacier_sweeper.core.fleet_sweeper import (
    FleetSweeper,
    SweepReport,
    VaultReport,
    VaultStatus,
)

__all__ = [
    # Client
    "StorageClient",
    # Models
    "ArchiveRef",
    "Credentials",
    "JobStatusReport",
    "Vault",
    # Configuration
    "GLACIER_REGIONS",
    "SweepConfig",
    "resolve_regions",
    # Orchestration
    "FleetSweeper",
    "SweepReport",
    "VaultReport",
    "VaultStatus",
    # Exceptions - Base
    "GlacierSweepError",
    # Exceptions - Storage client
    "StorageClientError",
    "AuthError",
    "NetworkError",
    "RegionUnavailableError",
    # Exceptions - Jobs
    "JobError",
    "JobInitiationError",
    "JobQueryError",
    "JobFailedError",
    "JobOutputError",
    "MalformedOutputError",
    "JobStateError",
    # Exceptions - Deletion
    "DeletionError",
    "OperationCancelledError",
]
