"""
Region Catalog and Sweep Configuration
======================================

Provides the static catalog of regions that host Amazon S3 Glacier and
the immutable configuration value handed to a sweep.

Example
-------
>>> from glacier_sweeper.core.regions import SweepConfig, resolve_regions
>>>
>>> config = SweepConfig(regions=resolve_regions("eu-west-1"))
>>> config.regions
('eu-west-1',)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

# Regions where Glacier vaults can exist
GLACIER_REGIONS: Tuple[str, ...] = (
    "us-east-2",
    "us-east-1",
    "us-west-1",
    "us-west-2",
    "af-south-1",
    "ap-east-1",
    "ap-southeast-3",
    "ap-south-1",
    "ap-northeast-3",
    "ap-northeast-2",
    "ap-southeast-1",
    "ap-southeast-2",
    "ap-northeast-1",
    "ca-central-1",
    "eu-central-1",
    "eu-west-1",
    "eu-west-2",
    "eu-south-1",
    "eu-west-3",
    "eu-north-1",
    "me-south-1",
    "sa-east-1",
    "us-gov-east-1",
    "us-gov-west-1",
)

DEFAULT_POLL_INTERVAL = 60.0


def resolve_regions(
    restriction: Optional[str] = None,
    catalog: Iterable[str] = GLACIER_REGIONS,
) -> Tuple[str, ...]:
    """
    Determine which regions a sweep visits.

    Parameters
    ----------
    restriction : str, optional
        A single region to restrict the sweep to. When given, the
        catalog is not consulted at all. A blank value is treated as
        no restriction.
    catalog : iterable of str, default=GLACIER_REGIONS
        Full region catalog used when no restriction is given.

    Returns
    -------
    tuple of str
        Regions in visiting order.
    """
    if restriction and restriction.strip():
        return (restriction.strip(),)
    return tuple(catalog)


@dataclass(frozen=True)
class SweepConfig:
    """
    Immutable configuration for one sweep.

    Attributes:
        regions: Regions to visit, in order
        poll_interval: Seconds between inventory job status checks
        dry_run: Report what would be deleted without deleting
    """

    regions: Tuple[str, ...] = GLACIER_REGIONS
    poll_interval: float = DEFAULT_POLL_INTERVAL
    dry_run: bool = False

    def __post_init__(self) -> None:
        if self.poll_interval < 0:
            raise ValueError("poll_interval must not be negative")
        # Accept any iterable but always store a tuple
        object.__setattr__(self, "regions", tuple(self.regions))
