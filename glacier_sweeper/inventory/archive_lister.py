"""
Decoder for inventory retrieval job output.

A Glacier inventory is a JSON document of the form::

    {
      "VaultARN": "...",
      "InventoryDate": "...",
      "ArchiveList": [
        {"ArchiveId": "...", "Size": 1024, "CreationDate": "...", ...},
        ...
      ]
    }

Only ``ArchiveList[].ArchiveId`` is used; all other fields are ignored.
"""

from __future__ import annotations

import json
import logging
from typing import IO, List, Union

from glacier_sweeper.core.exceptions import MalformedOutputError
from glacier_sweeper.core.models import ArchiveRef, Vault

logger = logging.getLogger(__name__)

ARCHIVE_LIST_FIELD = "ArchiveList"
ARCHIVE_ID_FIELD = "ArchiveId"

Payload = Union[bytes, str, IO[bytes]]


class ArchiveLister:
    """
    Decodes a job output payload into archive references.

    The decoder holds no state, so decoding the same payload twice
    yields the same sequence.
    """

    def decode(self, payload: Payload, vault: Vault) -> List[ArchiveRef]:
        """
        Decode an inventory payload.

        Args:
            payload: Raw job output as bytes, str or a readable binary stream
            vault: Vault the inventory was taken from

        Returns:
            Archive references in listing order

        Raises:
            MalformedOutputError: If the payload is not a JSON object with
                an ``ArchiveList`` of entries carrying an ``ArchiveId``
        """
        if hasattr(payload, "read"):
            payload = payload.read()

        try:
            document = json.loads(payload)
        except (TypeError, ValueError) as e:
            raise self._malformed(vault, f"Job output is not valid JSON: {e}") from e

        if not isinstance(document, dict):
            raise self._malformed(vault, "Job output is not a JSON object")

        entries = document.get(ARCHIVE_LIST_FIELD)
        if entries is None:
            raise self._malformed(vault, f"Job output has no '{ARCHIVE_LIST_FIELD}' field")
        if not isinstance(entries, list):
            raise self._malformed(vault, f"'{ARCHIVE_LIST_FIELD}' is not a list")

        archives = []
        for position, entry in enumerate(entries):
            archive_id = entry.get(ARCHIVE_ID_FIELD) if isinstance(entry, dict) else None
            if not isinstance(archive_id, str) or not archive_id:
                raise self._malformed(
                    vault,
                    f"Entry {position} of '{ARCHIVE_LIST_FIELD}' has no '{ARCHIVE_ID_FIELD}'",
                )
            archives.append(ArchiveRef(vault=vault, archive_id=archive_id))

        logger.debug("Decoded %d archive(s) for vault %s", len(archives), vault.name)
        return archives

    @staticmethod
    def _malformed(vault: Vault, message: str) -> MalformedOutputError:
        return MalformedOutputError(message, vault=vault.name, region=vault.region)
