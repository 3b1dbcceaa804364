"""
Storage Client Module
=====================

Provides a region-scoped wrapper around the boto3 Glacier client with
built-in retry configuration and translation of botocore failures into
the sweeper's exception hierarchy.

This module implements the AWS client layer of the application,
handling all direct communication with Amazon S3 Glacier.

Classes
-------
StorageClient
    Region-bound client exposing the operations a vault purge needs.

Example
-------
>>> from glacier_sweeper.core.models import Credentials
>>> from glacier_sweeper.core.storage_client import StorageClient
>>>
>>> creds = Credentials("AKIA...", "secret")
>>> with StorageClient.connect("eu-west-1", creds) as client:
...     for vault in client.list_vaults():
...         print(vault.name)

Notes
-----
The boto3 session and service clients are created once and cached.
Every public operation raises a subclass of
:class:`~glacier_sweeper.core.exceptions.GlacierSweepError`; botocore
exceptions never escape this module.

See Also
--------
boto3 : AWS SDK for Python
botocore : Low-level AWS client library
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    InvalidRegionError,
    NoCredentialsError,
    PartialCredentialsError,
)

from glacier_sweeper.core.exceptions import (
    AuthError,
    DeletionError,
    JobInitiationError,
    JobOutputError,
    JobQueryError,
    NetworkError,
    RegionUnavailableError,
    StorageClientError,
)
from glacier_sweeper.core.models import Credentials, JobStatusReport, Vault

# Module logger
logger = logging.getLogger(__name__)

INVENTORY_RETRIEVAL = "inventory-retrieval"

AUTH_ERROR_CODES = {
    "InvalidClientTokenId",
    "SignatureDoesNotMatch",
    "UnrecognizedClientException",
    "InvalidSignatureException",
    "AccessDeniedException",
    "ExpiredToken",
}


def _error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "Unknown")


def _error_message(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Message", str(error))


class StorageClient:
    """
    Region-scoped Glacier client.

    Each region owns exactly one StorageClient for the lifetime of its
    sweep. The client holds its own boto3 session built from a static
    access key pair, so no credentials are shared between regions.

    Parameters
    ----------
    region : str
        AWS region the client is bound to.
    credentials : Credentials
        Access key pair presented to AWS.
    max_retries : int, default=3
        Maximum attempts per API call (adaptive retry mode).
    timeout : int, default=30
        Connect and read timeout in seconds.

    Raises
    ------
    AuthError
        If credentials are missing or incomplete.
    RegionUnavailableError
        If the region name is not valid.
    NetworkError
        If the endpoint cannot be reached during validation.
    """

    # Friendly messages for Glacier error codes seen on delete_archive
    ERROR_MESSAGES = {
        "ResourceNotFoundException": "Archive no longer exists (already deleted)",
        "AccessDeniedException": "Insufficient permissions to delete archive",
        "InvalidParameterValueException": "Archive ID was rejected by Glacier",
        "MissingParameterValueException": "Request is missing a required parameter",
        "ServiceUnavailableException": "Glacier is temporarily unavailable",
        "RequestTimeoutException": "Request timed out",
        "LimitExceededException": "Request limit exceeded",
    }

    def __init__(
        self,
        region: str,
        credentials: Credentials,
        max_retries: int = 3,
        timeout: int = 30,
    ) -> None:
        """Initialize the client; no AWS call is made here."""
        self.region = region
        self.credentials = credentials
        self.max_retries = max_retries
        self.timeout = timeout

        self._session: Optional[boto3.Session] = None
        self._clients: Dict[str, Any] = {}
        self._config = Config(
            retries={"max_attempts": max_retries, "mode": "adaptive"},
            connect_timeout=timeout,
            read_timeout=timeout,
        )

        logger.debug("Initialized StorageClient for %s", region)

    @classmethod
    def connect(
        cls,
        region: str,
        credentials: Credentials,
        max_retries: int = 3,
        timeout: int = 30,
    ) -> StorageClient:
        """
        Build a client bound to ``region`` and create its Glacier client.

        Creating the service client surfaces configuration problems
        (bad region name, missing keys) immediately rather than at the
        first vault operation.

        Returns
        -------
        StorageClient
            A ready-to-use client for the region.
        """
        client = cls(region, credentials, max_retries=max_retries, timeout=timeout)
        client._get_client("glacier")
        return client

    # =========================================================================
    # Session and Service Clients
    # =========================================================================

    @property
    def session(self) -> boto3.Session:
        """The boto3 session, created on first access."""
        if self._session is None:
            self._session = self._create_session()
        return self._session

    def _create_session(self) -> boto3.Session:
        if not self.credentials.access_key_id or not self.credentials.secret_access_key:
            raise AuthError(
                "AWS access key ID and secret access key are required",
                region=self.region,
            )
        try:
            session = boto3.Session(
                region_name=self.region,
                **self.credentials.as_session_kwargs(),
            )
        except BotoCoreError as e:
            raise StorageClientError(
                f"Failed to create AWS session: {e}",
                region=self.region,
            ) from e
        logger.debug("Created boto3 session for region %s", self.region)
        return session

    def _get_client(self, service_name: str) -> Any:
        if service_name in self._clients:
            return self._clients[service_name]

        try:
            client = self.session.client(service_name, config=self._config)
        except InvalidRegionError as e:
            raise RegionUnavailableError(
                f"Invalid region name: {self.region}",
                service=service_name,
                region=self.region,
            ) from e
        except (NoCredentialsError, PartialCredentialsError) as e:
            raise AuthError(
                f"AWS credentials are incomplete: {e}",
                service=service_name,
                region=self.region,
            ) from e
        except BotoCoreError as e:
            raise StorageClientError(
                f"Failed to create {service_name} client: {e}",
                service=service_name,
                region=self.region,
            ) from e

        self._clients[service_name] = client
        logger.debug("Created %s client for %s", service_name, self.region)
        return client

    @property
    def glacier(self) -> Any:
        """The cached boto3 Glacier client."""
        return self._get_client("glacier")

    # =========================================================================
    # Credential Operations
    # =========================================================================

    def validate_credentials(self) -> Dict[str, str]:
        """
        Validate the key pair by calling STS GetCallerIdentity.

        Returns
        -------
        dict
            Caller identity with ``Account``, ``Arn`` and ``UserId``.

        Raises
        ------
        AuthError
            If AWS rejects the credentials.
        NetworkError
            If STS cannot be reached.
        """
        sts = self._get_client("sts")
        try:
            identity = sts.get_caller_identity()
        except ClientError as e:
            code = _error_code(e)
            raise AuthError(
                "Invalid AWS credentials" if code in AUTH_ERROR_CODES
                else f"Failed to validate credentials: {_error_message(e)}",
                service="sts",
                region=self.region,
                details={"error_code": code},
            ) from e
        except (EndpointConnectionError, ConnectTimeoutError) as e:
            raise NetworkError(
                f"Could not reach STS: {e}",
                service="sts",
                region=self.region,
            ) from e
        except (NoCredentialsError, PartialCredentialsError) as e:
            raise AuthError(str(e), service="sts", region=self.region) from e
        except BotoCoreError as e:
            raise StorageClientError(
                f"Failed to validate credentials: {e}",
                service="sts",
                region=self.region,
            ) from e

        logger.info("Credentials validated for account %s", identity["Account"])
        return {
            "Account": identity["Account"],
            "Arn": identity["Arn"],
            "UserId": identity["UserId"],
        }

    # =========================================================================
    # Glacier Operations
    # =========================================================================

    def list_vaults(self) -> List[Vault]:
        """
        List every vault in the region.

        Returns
        -------
        list of Vault
            Vaults in listing order; empty when the region has none.

        Raises
        ------
        RegionUnavailableError
            If the region cannot be listed.
        """
        vaults: List[Vault] = []
        try:
            paginator = self.glacier.get_paginator("list_vaults")
            for page in paginator.paginate():
                for entry in page.get("VaultList", []):
                    vaults.append(Vault.from_listing(self.region, entry))
        except ClientError as e:
            raise RegionUnavailableError(
                f"Error listing Glacier vaults in region {self.region}: {_error_message(e)}",
                service="glacier",
                region=self.region,
                details={"error_code": _error_code(e)},
            ) from e
        except BotoCoreError as e:
            raise RegionUnavailableError(
                f"Error listing Glacier vaults in region {self.region}: {e}",
                service="glacier",
                region=self.region,
            ) from e

        logger.info("Found %d vault(s) in %s", len(vaults), self.region)
        return vaults

    def start_inventory_job(self, vault: Vault) -> str:
        """
        Initiate an inventory retrieval job for ``vault``.

        Returns
        -------
        str
            The Glacier job ID.

        Raises
        ------
        JobInitiationError
            If Glacier refuses or cannot be reached.
        """
        try:
            response = self.glacier.initiate_job(
                accountId="-",
                vaultName=vault.name,
                jobParameters={"Type": INVENTORY_RETRIEVAL, "Format": "JSON"},
            )
        except ClientError as e:
            raise JobInitiationError(
                f"Failed to initiate inventory retrieval job: {_error_message(e)}",
                vault=vault.name,
                region=self.region,
                details={"error_code": _error_code(e)},
            ) from e
        except BotoCoreError as e:
            raise JobInitiationError(
                f"Failed to initiate inventory retrieval job: {e}",
                vault=vault.name,
                region=self.region,
            ) from e
        return response["jobId"]

    def poll_job_status(self, job_id: str, vault: Vault) -> JobStatusReport:
        """
        Describe a job once.

        Raises
        ------
        JobQueryError
            If the job cannot be described.
        """
        try:
            response = self.glacier.describe_job(
                accountId="-",
                vaultName=vault.name,
                jobId=job_id,
            )
        except ClientError as e:
            raise JobQueryError(
                f"Failed to describe job: {_error_message(e)}",
                vault=vault.name,
                region=self.region,
                job_id=job_id,
                details={"error_code": _error_code(e)},
            ) from e
        except BotoCoreError as e:
            raise JobQueryError(
                f"Failed to describe job: {e}",
                vault=vault.name,
                region=self.region,
                job_id=job_id,
            ) from e
        return JobStatusReport(
            completed=bool(response.get("Completed")),
            status_code=response.get("StatusCode"),
            status_message=response.get("StatusMessage"),
        )

    def fetch_job_output(self, job_id: str, vault: Vault) -> bytes:
        """
        Download the full output of a completed job.

        The response body is read once and closed before returning.

        Raises
        ------
        JobOutputError
            If the output cannot be requested or read.
        """
        try:
            response = self.glacier.get_job_output(
                accountId="-",
                vaultName=vault.name,
                jobId=job_id,
            )
        except ClientError as e:
            raise JobOutputError(
                f"Failed to get job output: {_error_message(e)}",
                vault=vault.name,
                region=self.region,
                job_id=job_id,
                details={"error_code": _error_code(e)},
            ) from e
        except BotoCoreError as e:
            raise JobOutputError(
                f"Failed to get job output: {e}",
                vault=vault.name,
                region=self.region,
                job_id=job_id,
            ) from e

        body = response["body"]
        try:
            return body.read()
        except (BotoCoreError, OSError) as e:
            raise JobOutputError(
                f"Failed to read job output: {e}",
                vault=vault.name,
                region=self.region,
                job_id=job_id,
            ) from e
        finally:
            body.close()

    def delete_archive(self, vault: Vault, archive_id: str) -> None:
        """
        Delete one archive.

        Raises
        ------
        DeletionError
            If the archive could not be deleted, including when it was
            already gone.
        """
        try:
            self.glacier.delete_archive(
                accountId="-",
                vaultName=vault.name,
                archiveId=archive_id,
            )
        except ClientError as e:
            code = _error_code(e)
            raise DeletionError(
                self.ERROR_MESSAGES.get(code, _error_message(e)),
                archive_id=archive_id,
                vault=vault.name,
                error_code=code,
            ) from e
        except BotoCoreError as e:
            raise DeletionError(
                str(e),
                archive_id=archive_id,
                vault=vault.name,
            ) from e
        logger.debug("Archive %s deleted from vault %s", archive_id, vault.name)

    # =========================================================================
    # Context Manager Support
    # =========================================================================

    def close(self) -> None:
        """Release cached service clients and the session."""
        for client in self._clients.values():
            close = getattr(client, "close", None)
            if close is not None:
                close()
        self._clients.clear()
        self._session = None

    def __enter__(self) -> StorageClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"StorageClient(region='{self.region}', "
            f"credentials={self.credentials!r}, "
            f"max_retries={self.max_retries})"
        )
