"""
JSON Reporter Module
====================

Exports sweep results to JSON for auditing and later processing.

Output Structure
----------------
::

    {
      "metadata": {
        "generated_at": "2024-01-15T10:30:00",
        "regions_requested": [...],
        "regions_visited": [...],
        "cancelled": false,
        "dry_run": false,
        "totals": {"vaults": 3, "deleted_archives": 1200, ...}
      },
      "region_errors": {"me-south-1": "..."},
      "vaults": [
        {"vault": {...}, "status": "purged", "summary": {"outcomes": [...]}},
        ...
      ]
    }

See Also
--------
CLIReporter : For terminal display.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from glacier_sweeper.core.fleet_sweeper import SweepReport

# Module logger
logger = logging.getLogger(__name__)


class JSONReporter:
    """
    Reporter for exporting sweep results to JSON.

    Parameters
    ----------
    output_path : str, optional
        Path for the output file. If not provided, generates a
        timestamped filename in the current directory.
    indent : int, default=2
        JSON indentation level. Set to None for compact output.
    """

    def __init__(
        self,
        output_path: Optional[str] = None,
        indent: Optional[int] = 2,
    ) -> None:
        """Initialize the JSON reporter with optional output path and indentation."""
        self.output_path = output_path
        self.indent = indent
        logger.debug("Initialized JSONReporter (output_path=%s)", output_path)

    def _get_output_path(self) -> Path:
        if self.output_path:
            return Path(self.output_path)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        return Path(f"glacier_sweep_{timestamp}.json")

    def report(self, result: SweepReport) -> str:
        """
        Export sweep results to a JSON file.

        Parameters
        ----------
        result : SweepReport
            Sweep results to export.

        Returns
        -------
        str
            Path to the created JSON file.
        """
        output_path = self._get_output_path()

        logger.info(
            "Exporting report for %d vault(s) to %s",
            len(result.vault_reports),
            output_path,
        )

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(result), f, indent=self.indent, default=str)

        logger.info("JSON export complete: %s", output_path)
        return str(output_path)

    def to_string(self, result: SweepReport) -> str:
        """Convert sweep results to a JSON string without writing a file."""
        return json.dumps(self.to_dict(result), indent=self.indent, default=str)

    def to_dict(self, result: SweepReport) -> Dict[str, Any]:
        """
        Build the report document.

        Parameters
        ----------
        result : SweepReport
            Sweep results to convert.

        Returns
        -------
        dict
            Structured data dictionary.
        """
        data = result.to_dict()
        return {
            "metadata": {
                "generated_at": datetime.now(timezone.utc).isoformat(),
                "regions_requested": data["regions_requested"],
                "regions_visited": data["regions_visited"],
                "cancelled": data["cancelled"],
                "dry_run": data["dry_run"],
                "start_time": data["start_time"],
                "end_time": data["end_time"],
                "totals": data["totals"],
            },
            "region_errors": data["region_errors"],
            "vaults": data["vaults"],
        }

    def __repr__(self) -> str:
        return f"JSONReporter(output_path={self.output_path!r}, indent={self.indent})"
