"""
Reporters
=========

Output formatters for cleanup runs.

CLIReporter
    Rich terminal output: candidates, per-item outcomes, snapshot
    progress and the final summary.
JSONReporter
    JSON export of a run summary.
"""

from awsugar.reporters.cli_reporter import CLIReporter
from awsugar.reporters.json_reporter import JSONReporter

__all__ = [
    "CLIReporter",
    "JSONReporter",
]
