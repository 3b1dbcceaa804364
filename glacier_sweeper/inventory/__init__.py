"""
Inventory Retrieval
===================

Components for obtaining the archive listing of a vault.

Glacier does not list vault contents synchronously. An inventory
retrieval job has to be initiated, awaited (typically for hours) and its
output downloaded and decoded.

Classes
-------
RetrievalJob
    State machine for one in-flight inventory job.
JobStatus
    States of a RetrievalJob.
ArchiveLister
    Decoder turning job output into archive references.
"""

from glacier_sweeper.inventory.archive_lister import ArchiveLister
from glacier_sweeper.inventory.retrieval_job import JobStatus, RetrievalJob

__all__ = [
    "ArchiveLister",
    "JobStatus",
    "RetrievalJob",
]
