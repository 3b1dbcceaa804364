"""
Custom Exceptions for glacier-sweeper
=====================================

This module defines the hierarchy of exceptions raised while sweeping
Glacier vaults. The hierarchy mirrors the units of work of a sweep so
that callers can isolate failures at the right boundary:

- region-level errors skip a region,
- job-level errors abort a single vault,
- deletion errors fail a single archive.

Exception Hierarchy
-------------------
::

    GlacierSweepError (base)
    ├── StorageClientError
    │   ├── AuthError
    │   ├── NetworkError
    │   └── RegionUnavailableError
    ├── JobError
    │   ├── JobInitiationError
    │   ├── JobQueryError
    │   │   └── JobFailedError
    │   ├── JobOutputError
    │   ├── MalformedOutputError
    │   └── JobStateError
    ├── DeletionError
    └── OperationCancelledError

Example
-------
>>> from glacier_sweeper.core.exceptions import JobError, RegionUnavailableError
>>>
>>> try:
...     vaults = client.list_vaults()
... except RegionUnavailableError as e:
...     print(f"Skipping region: {e}")
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class GlacierSweepError(Exception):
    """
    Base exception for all glacier-sweeper errors.

    Parameters
    ----------
    message : str
        Human-readable error message.
    details : dict, optional
        Additional context about the error.

    Attributes
    ----------
    message : str
        The error message.
    details : dict
        Additional error details.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.details = dict(details or {})
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for serialization.

        Returns
        -------
        dict
            Dictionary representation of the error.
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


# =============================================================================
# Storage Client Exceptions
# =============================================================================


class StorageClientError(GlacierSweepError):
    """
    Base exception for region-scoped client errors.

    Raised when a client for a region cannot be built or the region
    cannot be listed. A sweep reports these and skips the region.

    Parameters
    ----------
    message : str
        Human-readable error message.
    service : str, optional
        The AWS service that caused the error.
    region : str, optional
        The AWS region where the error occurred.
    details : dict, optional
        Additional context about the error.
    """

    def __init__(
        self,
        message: str,
        service: Optional[str] = None,
        region: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.service = service
        self.region = region
        full_details = dict(details or {})
        if service:
            full_details["service"] = service
        if region:
            full_details["region"] = region
        super().__init__(message, full_details)


class AuthError(StorageClientError):
    """
    Raised when AWS credentials are missing, incomplete or rejected.

    Example
    -------
    >>> raise AuthError(
    ...     "Invalid AWS credentials",
    ...     details={"hint": "Check your access key and secret key"}
    ... )
    """

    pass


class NetworkError(StorageClientError):
    """Raised when an AWS endpoint cannot be reached."""

    pass


class RegionUnavailableError(StorageClientError):
    """
    Raised when a region is invalid or its vaults cannot be listed.

    A region with zero vaults is not an error; this exception means the
    region itself could not be inspected.

    Example
    -------
    >>> raise RegionUnavailableError(
    ...     "Failed to list vaults",
    ...     service="glacier",
    ...     region="me-south-1"
    ... )
    """

    pass


# =============================================================================
# Inventory Job Exceptions
# =============================================================================


class JobError(GlacierSweepError):
    """
    Base exception for inventory retrieval job errors.

    Any of these aborts the purge of a single vault. The sweep moves on
    to the next vault.

    Parameters
    ----------
    message : str
        Human-readable error message.
    vault : str, optional
        Name of the vault the job belongs to.
    region : str, optional
        Region of the vault.
    job_id : str, optional
        Glacier job identifier, when one exists.
    details : dict, optional
        Additional context about the error.
    """

    def __init__(
        self,
        message: str,
        vault: Optional[str] = None,
        region: Optional[str] = None,
        job_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.vault = vault
        self.region = region
        self.job_id = job_id
        full_details = dict(details or {})
        if vault:
            full_details["vault"] = vault
        if region:
            full_details["region"] = region
        if job_id:
            full_details["job_id"] = job_id
        super().__init__(message, full_details)


class JobInitiationError(JobError):
    """Raised when an inventory retrieval job cannot be started."""

    pass


class JobQueryError(JobError):
    """Raised when the status of a job cannot be queried."""

    pass


class JobFailedError(JobQueryError):
    """
    Raised when Glacier reports that an inventory job finished with
    status code ``Failed``.

    Example
    -------
    >>> raise JobFailedError(
    ...     "Inventory retrieval job failed",
    ...     vault="photos-2014",
    ...     job_id="HkF9p6o7yjhFx-K3CGl6fuSm6VzW9T7e",
    ...     details={"status_message": "Vault is empty"}
    ... )
    """

    pass


class JobOutputError(JobError):
    """Raised when the output of a completed job cannot be fetched."""

    pass


class MalformedOutputError(JobError):
    """
    Raised when a job output payload cannot be decoded into an archive
    listing.
    """

    pass


class JobStateError(JobError):
    """Raised when a job operation is invalid for the job's current state."""

    pass


# =============================================================================
# Deletion Exceptions
# =============================================================================


class DeletionError(GlacierSweepError):
    """
    Raised when a single archive cannot be deleted.

    Fatal only to that archive: the purge records a failed outcome and
    continues with the next archive.

    Parameters
    ----------
    message : str
        Human-readable error message.
    archive_id : str, optional
        The archive that could not be deleted.
    vault : str, optional
        Name of the vault holding the archive.
    error_code : str, optional
        Glacier error code, when the service returned one.
    details : dict, optional
        Additional context about the error.
    """

    def __init__(
        self,
        message: str,
        archive_id: Optional[str] = None,
        vault: Optional[str] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.archive_id = archive_id
        self.vault = vault
        self.error_code = error_code
        full_details = dict(details or {})
        if archive_id:
            full_details["archive_id"] = archive_id
        if vault:
            full_details["vault"] = vault
        if error_code:
            full_details["error_code"] = error_code
        super().__init__(message, full_details)


class OperationCancelledError(GlacierSweepError):
    """
    Raised when a cancellation signal is observed at a wait or between
    archive deletions.

    Parameters
    ----------
    message : str
        Human-readable error message.
    summary : PurgeSummary, optional
        Outcomes already produced before cancellation was observed.
    """

    def __init__(
        self,
        message: str = "Operation cancelled",
        summary: Optional[Any] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.summary = summary
        super().__init__(message, details)
