"""
awsugar: AWS Working Sugar
==========================

A command-line tool that lists and deletes unused AWS resources (idle
EC2 instances, classic load balancers without instances, unattached
network interfaces and EBS volumes), snapshotting volumes before they
are destroyed.

Modules
-------
core
    AWS client, capability contracts, snapshot waiter, run context
resources
    Resource kinds and their listing functions
cleaners
    The list / sweeten / delete pipeline
reporters
    Console and JSON output

Example
-------
>>> from awsugar import AWSClient, CleanupContext, CleanupPipeline, get_kind
>>>
>>> context = CleanupContext(aws_client=AWSClient(region="us-west-2"), dry_run=True)
>>> summary = CleanupPipeline(context).run(get_kind("volume"))
>>> print(f"{summary.dry_run} volumes would be deleted")

Notes
-----
Requires AWS credentials configured via:
- Environment variables (AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY)
- AWS credentials file (~/.aws/credentials)
- IAM role (when running on AWS infrastructure)
"""

__version__ = "0.1.0"
__license__ = "MIT"

# Public API
from awsugar.core.aws_client import AWSClient
from awsugar.core.context import CleanupContext
from awsugar.core.exceptions import AwsugarError, BatchCleanupError
from awsugar.cleaners.pipeline import CleanupPipeline, CleanupSummary
from awsugar.resources import get_kind

__all__ = [
    "__version__",
    "__license__",
    "AWSClient",
    "AwsugarError",
    "BatchCleanupError",
    "CleanupContext",
    "CleanupPipeline",
    "CleanupSummary",
    "get_kind",
]
