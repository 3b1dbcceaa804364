"""
Domain models shared across the sweeper.

All models are frozen dataclasses: a vault, an archive reference or a
credential pair never changes once it has been produced.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Credentials:
    """
    Static AWS access key pair presented when a region client is built.

    Attributes:
        access_key_id: AWS access key ID
        secret_access_key: AWS secret access key
        session_token: Optional STS session token
    """

    access_key_id: str
    secret_access_key: str = field(repr=False)
    session_token: Optional[str] = field(default=None, repr=False)

    def as_session_kwargs(self) -> Dict[str, str]:
        """Keyword arguments for ``boto3.Session``."""
        kwargs = {
            "aws_access_key_id": self.access_key_id,
            "aws_secret_access_key": self.secret_access_key,
        }
        if self.session_token:
            kwargs["aws_session_token"] = self.session_token
        return kwargs


@dataclass(frozen=True)
class Vault:
    """
    A Glacier vault listed from a region.

    Identity is ``(region, name)``; the listing details are carried for
    display only and do not take part in equality.
    """

    region: str
    name: str
    arn: Optional[str] = field(default=None, compare=False)
    number_of_archives: Optional[int] = field(default=None, compare=False)
    size_in_bytes: Optional[int] = field(default=None, compare=False)

    @classmethod
    def from_listing(cls, region: str, entry: Dict[str, Any]) -> Vault:
        """Build a vault from one ``VaultList`` entry of ``list_vaults``."""
        return cls(
            region=region,
            name=entry["VaultName"],
            arn=entry.get("VaultARN"),
            number_of_archives=entry.get("NumberOfArchives"),
            size_in_bytes=entry.get("SizeInBytes"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "region": self.region,
            "name": self.name,
            "arn": self.arn,
            "number_of_archives": self.number_of_archives,
            "size_in_bytes": self.size_in_bytes,
        }

    def __str__(self) -> str:
        return f"[{self.region}] {self.name}"


@dataclass(frozen=True)
class ArchiveRef:
    """An archive listed by a completed inventory job."""

    vault: Vault
    archive_id: str


@dataclass(frozen=True)
class JobStatusReport:
    """
    Result of one ``describe_job`` call.

    Attributes:
        completed: Whether Glacier considers the job finished
        status_code: ``InProgress``, ``Succeeded`` or ``Failed``
        status_message: Free-form message from Glacier, if any
    """

    completed: bool
    status_code: Optional[str] = None
    status_message: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.completed and self.status_code == "Failed"
