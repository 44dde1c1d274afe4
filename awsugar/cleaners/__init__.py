"""
Resource Cleaners
=================

This module provides the cleanup pipeline that lists, prepares and
deletes unused AWS resources.

Safety features:
- Dry-run mode for previewing deletions
- Snapshot-before-delete ("sweet clean") for volumes
- Per-item failure collection: one failure never stops the batch
- Items whose snapshot failed are never deleted

Data Classes
------------
DeleteStatus
    Enum representing the status of a delete operation.
DeleteResult
    Result of a single resource deletion attempt.
SweetenResult
    Result of preparing one resource.
CleanupSummary
    Summary of a batch cleanup.

Example
-------
>>> from awsugar.cleaners import CleanupPipeline, DeleteStatus
>>> from awsugar.core import AWSClient, CleanupContext
>>> from awsugar.resources import get_kind
>>>
>>> context = CleanupContext(aws_client=AWSClient(region="us-west-2"), dry_run=True)
>>> summary = CleanupPipeline(context).run(get_kind("network-interface"))
>>> for result in summary.results:
...     print(result.resource_id, result.status.value)
"""

from awsugar.cleaners.pipeline import (
    CleanupItem,
    CleanupPipeline,
    CleanupSummary,
    DeleteResult,
    DeleteStatus,
    SweetenResult,
)

__all__ = [
    "CleanupItem",
    "CleanupPipeline",
    "CleanupSummary",
    "DeleteResult",
    "DeleteStatus",
    "SweetenResult",
]
