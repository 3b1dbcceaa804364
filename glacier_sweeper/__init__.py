"""
glacier-sweeper: Bulk Teardown of Amazon S3 Glacier Vaults
==========================================================

Enumerates Glacier vaults across regions, asks for confirmation per
vault, and empties every confirmed vault by requesting an inventory,
waiting for it, and deleting each archive it lists.

Modules
-------
core
    Storage client, region catalog, sweep orchestration, exceptions
inventory
    Inventory retrieval job state machine and output decoding
cleaners
    Vault purger
reporters
    Output formatters (CLI, JSON)

Example
-------
>>> from glacier_sweeper import Credentials, FleetSweeper, SweepConfig
>>>
>>> sweeper = FleetSweeper(
...     credentials=Credentials("AKIA...", "secret"),
...     config=SweepConfig(regions=("eu-west-1",)),
...     confirm=lambda vault: True,
... )
>>> report = sweeper.sweep()
>>> print(f"Deleted {report.total_deleted} archives")

Notes
-----
Inventory retrieval jobs usually take several hours. The sweep blocks
while it waits; run it somewhere it can stay up that long.

See Also
--------
boto3 : AWS SDK for Python
"""

__version__ = "0.1.0"
__author__ = "glacier-sweeper developers"
__license__ = "MIT"

# Public API
from glacier_sweeper.core import (
    Credentials,
    FleetSweeper,
    GlacierSweepError,
    StorageClient,
    SweepConfig,
    SweepReport,
)
from glacier_sweeper.cleaners import VaultPurger

__all__ = [
    # Version info
    "__version__",
    "__author__",
    "__license__",
    # Core classes
    "Credentials",
    "FleetSweeper",
    "GlacierSweepError",
    "StorageClient",
    "SweepConfig",
    "SweepReport",
    "VaultPurger",
]
