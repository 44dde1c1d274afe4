"""
JSON Reporter Module
====================

Exports the summary of a cleanup run to JSON for audit trails and
programmatic access.

Output Structure
----------------
::

    {
      "metadata": {
        "resource_type": "EBS",
        "region": "us-west-2",
        "dry_run": false,
        "listed": 3,
        "deleted": 2,
        "failed": 1,
        "skipped": 0,
        "success": false,
        "start_time": "2024-01-15T10:30:00+00:00",
        "end_time": "2024-01-15T10:52:11+00:00"
      },
      "results": [...],
      "snapshots": [...],
      "errors": [...]
    }

Example
-------
>>> reporter = JSONReporter(output_path="cleanup.json")
>>> filepath = reporter.report(summary, dry_run=False)
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from awsugar.cleaners.pipeline import CleanupSummary

# Module logger
logger = logging.getLogger(__name__)


class JSONReporter:
    """
    Reporter for exporting cleanup summaries to JSON format.

    Parameters
    ----------
    output_path : str, optional
        Path for the output file. If not provided, generates a
        timestamped filename in the current directory.
    indent : int, default=2
        JSON indentation level. None for compact output.
    """

    def __init__(
        self,
        output_path: Optional[str] = None,
        indent: Optional[int] = 2,
    ) -> None:
        self.output_path = output_path
        self.indent = indent
        logger.debug(f"Initialized JSONReporter (output_path={output_path})")

    def _get_output_path(self, resource_type: str) -> Path:
        if self.output_path:
            return Path(self.output_path)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        slug = resource_type.lower().replace(" ", "_") or "cleanup"
        return Path(f"awsugar_{slug}_{timestamp}.json")

    def report(self, summary: CleanupSummary, dry_run: bool = False) -> str:
        """
        Write the summary to a JSON file.

        Returns
        -------
        str
            Path to the created JSON file.
        """
        output_path = self._get_output_path(summary.resource_type)

        logger.info(f"Exporting cleanup report to {output_path}")

        data = self.to_dict(summary, dry_run=dry_run)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=self.indent, default=str)

        logger.info(f"JSON export complete: {output_path}")
        return str(output_path)

    def to_string(self, summary: CleanupSummary, dry_run: bool = False) -> str:
        """Convert the summary to a JSON string without writing a file."""
        return json.dumps(
            self.to_dict(summary, dry_run=dry_run),
            indent=self.indent,
            default=str,
        )

    def to_dict(self, summary: CleanupSummary, dry_run: bool = False) -> Dict[str, Any]:
        """Build the report structure."""
        data = summary.to_dict()
        return {
            "metadata": {
                "resource_type": summary.resource_type,
                "region": summary.region,
                "dry_run": dry_run,
                "listed": summary.listed,
                "deleted": summary.deleted,
                "failed": summary.failed,
                "skipped": summary.skipped,
                "success": summary.success,
                "start_time": data["start_time"],
                "end_time": data["end_time"],
            },
            "results": data["results"],
            "snapshots": data["snapshots"],
            "errors": data["errors"],
        }

    def __repr__(self) -> str:
        return f"JSONReporter(output_path={self.output_path!r}, indent={self.indent})"
