"""
Vault Cleaners
==============

This module provides the purger that empties Glacier vaults.

Safety features:
- Dry-run mode for previewing deletions
- Per-archive error isolation: one failed delete never stops the rest
- Cancellation between polls and between deletions
- Progress callbacks for every archive

Available Cleaners
------------------
VaultPurger
    Inventories a vault and deletes every archive it lists.

Data Classes
------------
DeleteStatus
    Enum representing the status of an archive delete.
DeletionOutcome
    Result of a single archive deletion attempt.
PurgeSummary
    Ordered outcomes for one vault.

Example
-------
>>> from glacier_sweeper.cleaners import VaultPurger
>>>
>>> purger = VaultPurger(client, poll_interval=60)
>>> summary = purger.purge(vault)
>>> print(f"Deleted {summary.deleted} of {summary.total} archives")
"""

from glacier_sweeper.cleaners.vault_purger import (
    DeleteStatus,
    DeletionOutcome,
    PurgeSummary,
    VaultPurger,
)

__all__ = [
    "DeleteStatus",
    "DeletionOutcome",
    "PurgeSummary",
    "VaultPurger",
]
