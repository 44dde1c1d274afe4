"""
Core Infrastructure Components
==============================

This module provides the foundational components for awsugar:

- :class:`AWSClient` - Manages the AWS session and service clients
- :class:`Deletable` / :class:`Sweetener` - Resource capability contracts
- :class:`SnapshotWaiter` - Blocks until a snapshot is completed
- :class:`CleanupContext` - Configuration of one cleanup run
- Exception hierarchy for error handling

Example
-------
>>> from awsugar.core import AWSClient, CleanupContext
>>>
>>> client = AWSClient(region="us-west-2", profile="production")
>>> context = CleanupContext(aws_client=client, dry_run=True)

See Also
--------
awsugar.resources : Resource kinds and their listing functions.
awsugar.cleaners : The cleanup pipeline.
"""

from awsugar.core.exceptions import (
    AWSClientError,
    AwsugarError,
    BatchCleanupError,
    CleanerError,
    CredentialsError,
    DeleteError,
    ListingError,
    RegionError,
    ServiceError,
    SnapshotCancelledError,
    SnapshotError,
    SnapshotTimeoutError,
    SweetenError,
    UnsupportedKindError,
)
from awsugar.core.aws_client import AWSClient
from awsugar.core.base_resource import Deletable, Resource, Sweetener
from awsugar.core.waiter import SnapshotState, SnapshotWaiter
from awsugar.core.context import CleanupContext

__all__ = [
    # Client and context
    "AWSClient",
    "CleanupContext",
    # Resource contracts
    "Resource",
    "Deletable",
    "Sweetener",
    # Snapshot waiting
    "SnapshotState",
    "SnapshotWaiter",
    # Exceptions - Base
    "AwsugarError",
    # Exceptions - AWS Client
    "AWSClientError",
    "CredentialsError",
    "RegionError",
    "ServiceError",
    # Exceptions - Listing
    "ListingError",
    "UnsupportedKindError",
    # Exceptions - Cleaner
    "CleanerError",
    "DeleteError",
    "SweetenError",
    "SnapshotError",
    "SnapshotTimeoutError",
    "SnapshotCancelledError",
    "BatchCleanupError",
]
