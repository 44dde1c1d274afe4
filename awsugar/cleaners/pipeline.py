"""
Cleanup Pipeline
================

Runs one cleanup batch for a resource kind::

    list ──► sweeten (optional) ──► delete ──► summary

- Listing failures are fatal: nothing has been touched yet.
- Sweeten and delete failures are collected per item; the batch always
  runs to the end and every cause is reported in the summary.
- An item whose sweetening failed is not deleted; unrelated items
  still are.
- In dry-run mode only listing and reporting happen.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

from awsugar.core.base_resource import Deletable, Sweetener
from awsugar.core.context import CleanupContext
from awsugar.core.exceptions import (
    BatchCleanupError,
    CleanerError,
    DeleteError,
    SnapshotCancelledError,
    SweetenError,
)
from awsugar.resources import ResourceKind

# Module logger
logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DeleteStatus(Enum):
    """Status of a delete operation."""

    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"
    DRY_RUN = "dry_run"


@dataclass
class DeleteResult:
    """
    Result of a single deletion attempt.

    Attributes:
        resource_id: Provider ID of the resource
        resource_name: Display name of the resource
        resource_type: Resource type label ('EC2', 'EBS', ...)
        region: AWS region
        status: Result status
        error: Failure cause when FAILED or SKIPPED
        timestamp: When the operation was attempted
    """

    resource_id: str
    resource_name: str
    resource_type: str
    region: str
    status: DeleteStatus
    error: Optional[CleanerError] = None
    timestamp: datetime = field(default_factory=_utcnow)

    @property
    def error_message(self) -> Optional[str]:
        return str(self.error) if self.error else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "resource_id": self.resource_id,
            "resource_name": self.resource_name,
            "resource_type": self.resource_type,
            "region": self.region,
            "status": self.status.value,
            "error_message": self.error_message,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class SweetenResult:
    """Result of preparing one resource before deletion."""

    resource_id: str
    resource_type: str
    owner_id: str
    snapshot_id: Optional[str] = None
    error: Optional[CleanerError] = None
    timestamp: datetime = field(default_factory=_utcnow)

    @property
    def success(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "resource_id": self.resource_id,
            "resource_type": self.resource_type,
            "owner_id": self.owner_id,
            "snapshot_id": self.snapshot_id,
            "error_message": str(self.error) if self.error else None,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class CleanupItem:
    """
    One resource to delete together with what must be prepared first.

    Attributes:
        resource: The resource to delete
        sweeteners: Resources to sweeten before the deletion
        sweeten_error: First preparation failure, if any
    """

    resource: Deletable
    sweeteners: List[Sweetener] = field(default_factory=list)
    sweeten_error: Optional[SweetenError] = None

    @classmethod
    def for_resource(cls, resource: Deletable) -> CleanupItem:
        return cls(resource=resource, sweeteners=resource.sweeteners())


@dataclass
class CleanupSummary:
    """
    Summary of a cleanup batch.

    Attributes:
        resource_type: Resource type label of the batch
        region: AWS region
        listed: Number of candidates returned by the listing
        total: Number of delete results recorded
        deleted: Number successfully deleted
        failed: Number that failed to delete
        skipped: Number not deleted because their preparation failed
        dry_run: Number processed in dry-run mode
        results: Individual delete results, in list order
        sweeten_results: Individual sweeten results, in list order
        errors: Every failure cause, in the order it happened
        start_time: When the batch started
        end_time: When the batch completed
    """

    resource_type: str = ""
    region: str = ""
    listed: int = 0
    total: int = 0
    deleted: int = 0
    failed: int = 0
    skipped: int = 0
    dry_run: int = 0
    results: List[DeleteResult] = field(default_factory=list)
    sweeten_results: List[SweetenResult] = field(default_factory=list)
    errors: List[CleanerError] = field(default_factory=list)
    start_time: datetime = field(default_factory=_utcnow)
    end_time: Optional[datetime] = None

    def add_result(self, result: DeleteResult) -> None:
        """Add a delete result and update counts."""
        self.results.append(result)
        self.total += 1

        if result.status == DeleteStatus.SUCCESS:
            self.deleted += 1
        elif result.status == DeleteStatus.FAILED:
            self.failed += 1
            if result.error is not None:
                self.errors.append(result.error)
        elif result.status == DeleteStatus.SKIPPED:
            self.skipped += 1
        elif result.status == DeleteStatus.DRY_RUN:
            self.dry_run += 1

    def add_sweeten_result(self, result: SweetenResult) -> None:
        """Add a sweeten result; failures join the error list."""
        self.sweeten_results.append(result)
        if result.error is not None:
            self.errors.append(result.error)

    @property
    def snapshots(self) -> List[str]:
        return [r.snapshot_id for r in self.sweeten_results if r.snapshot_id]

    @property
    def success(self) -> bool:
        return not self.errors

    def error(self) -> Optional[BatchCleanupError]:
        """The aggregate failure of the batch, or None when all went well."""
        if not self.errors:
            return None
        return BatchCleanupError(self.errors)

    def raise_for_errors(self) -> None:
        """Raise the aggregate failure, if any."""
        error = self.error()
        if error is not None:
            raise error

    def complete(self) -> None:
        """Mark the operation as complete."""
        self.end_time = _utcnow()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "resource_type": self.resource_type,
            "region": self.region,
            "listed": self.listed,
            "total": self.total,
            "deleted": self.deleted,
            "failed": self.failed,
            "skipped": self.skipped,
            "dry_run": self.dry_run,
            "success": self.success,
            "results": [r.to_dict() for r in self.results],
            "snapshots": [r.to_dict() for r in self.sweeten_results],
            "errors": [e.to_dict() for e in self.errors],
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
        }


class CleanupPipeline:
    """
    Lists, prepares and deletes the unused resources of one kind.

    Parameters
    ----------
    context : CleanupContext
        Run configuration (client, dry-run, sweet-clean, wait settings).
    on_listed : callable, optional
        Called with ``(kind, resources)`` once the listing is done.
    on_intent : callable, optional
        Called with the resource before each deletion attempt
        (also in dry-run mode).
    on_result : callable, optional
        Called with each :class:`DeleteResult`.
    on_sweetened : callable, optional
        Called with each :class:`SweetenResult`.

    Example
    -------
    >>> context = CleanupContext(aws_client=client, dry_run=True)
    >>> summary = CleanupPipeline(context).run(get_kind("volume"))
    >>> summary.dry_run
    3
    """

    def __init__(
        self,
        context: CleanupContext,
        on_listed: Optional[Callable[[ResourceKind, Sequence[Deletable]], None]] = None,
        on_intent: Optional[Callable[[Deletable], None]] = None,
        on_result: Optional[Callable[[DeleteResult], None]] = None,
        on_sweetened: Optional[Callable[[SweetenResult], None]] = None,
    ) -> None:
        self.context = context
        self.on_listed = on_listed
        self.on_intent = on_intent
        self.on_result = on_result
        self.on_sweetened = on_sweetened

    @property
    def region(self) -> str:
        return self.context.region

    def run(
        self,
        kind: ResourceKind,
        ids: Optional[Sequence[str]] = None,
    ) -> CleanupSummary:
        """
        Run the full cleanup for ``kind``.

        Parameters
        ----------
        kind : ResourceKind
            The kind to clean.
        ids : sequence of str, optional
            Restrict the listing to these IDs (instances only).

        Returns
        -------
        CleanupSummary
            Every result and failure cause of the batch.

        Raises
        ------
        ListingError
            If the candidates cannot be listed. Nothing is mutated.
        SnapshotCancelledError
            If the run is cancelled while waiting for a snapshot.
        """
        logger.info(
            f"Cleaning {kind.name} in {self.region} "
            f"(dry_run={self.context.dry_run}, sweet_clean={self.context.sweet_clean})"
        )
        logger.debug(f"Run settings: {self.context.to_dict()}")
        resources = kind.list(self.context.aws_client, ids=ids)
        if self.on_listed:
            self.on_listed(kind, resources)

        summary = CleanupSummary(
            resource_type=kind.label,
            region=self.region,
            listed=len(resources),
        )
        items = self.build_items(resources)

        if self.context.sweet_clean and not self.context.dry_run:
            self.sweeten_items(items, summary)
        elif self.context.dry_run:
            logger.debug("Dry run: skipping sweetening")

        self.delete_items(items, summary)
        summary.complete()

        logger.info(
            f"{kind.name} cleanup done: {summary.deleted} deleted, "
            f"{summary.failed} failed, {summary.skipped} skipped, "
            f"{summary.dry_run} dry-run"
        )
        return summary

    @staticmethod
    def build_items(resources: Sequence[Deletable]) -> List[CleanupItem]:
        """Pair every resource with the resources to sweeten before it."""
        return [CleanupItem.for_resource(resource) for resource in resources]

    def sweeten_items(
        self,
        items: Sequence[CleanupItem],
        summary: Optional[CleanupSummary] = None,
    ) -> CleanupSummary:
        """
        Sweeten every item, collecting failures.

        An item stops at its first failing sweetener and is marked so
        that :meth:`delete_items` skips it. Other items carry on.
        Nothing happens in dry-run mode.
        """
        summary = summary if summary is not None else CleanupSummary(region=self.region)
        if self.context.dry_run:
            return summary

        for item in items:
            for sweetener in item.sweeteners:
                result = self._sweeten_one(item.resource, sweetener)
                summary.add_sweeten_result(result)
                if self.on_sweetened:
                    self.on_sweetened(result)
                if result.error is not None:
                    item.sweeten_error = result.error
                    break

        return summary

    def _sweeten_one(self, owner: Deletable, sweetener: Sweetener) -> SweetenResult:
        resource_id = getattr(sweetener, "id", "")
        resource_type = getattr(sweetener, "resource_type", "")
        try:
            outcome = sweetener.sweeten(self.context)
        except SnapshotCancelledError:
            raise
        except SweetenError as e:
            return SweetenResult(
                resource_id,
                resource_type,
                owner.id,
                snapshot_id=getattr(e, "snapshot_id", None),
                error=e,
            )
        except Exception as e:
            logger.exception(f"Unexpected error while sweetening {resource_id}")
            error = SweetenError(
                f"Couldn't prepare {resource_type} [{resource_id}]: {e}",
                resource_id=resource_id,
                resource_type=resource_type,
            )
            return SweetenResult(resource_id, resource_type, owner.id, error=error)

        return SweetenResult(
            resource_id,
            resource_type,
            owner.id,
            snapshot_id=getattr(outcome, "id", None),
        )

    def delete_items(
        self,
        items: Sequence[CleanupItem],
        summary: Optional[CleanupSummary] = None,
    ) -> CleanupSummary:
        """
        Delete every item, collecting failures.

        Every item is attempted regardless of earlier failures, except
        items whose sweetening failed, which are skipped.
        """
        summary = summary if summary is not None else CleanupSummary(region=self.region)

        for item in items:
            result = self._delete_one(item)
            summary.add_result(result)
            if self.on_result:
                self.on_result(result)

        return summary

    def _delete_one(self, item: CleanupItem) -> DeleteResult:
        resource = item.resource

        def result(status: DeleteStatus, error: Optional[CleanerError] = None):
            return DeleteResult(
                resource_id=resource.id,
                resource_name=resource.name,
                resource_type=resource.resource_type,
                region=self.region,
                status=status,
                error=error,
            )

        if item.sweeten_error is not None:
            logger.warning(
                f"Not deleting {resource}: preparation failed ({item.sweeten_error})"
            )
            return result(DeleteStatus.SKIPPED, item.sweeten_error)

        if self.on_intent:
            self.on_intent(resource)

        if self.context.dry_run:
            return result(DeleteStatus.DRY_RUN)

        try:
            resource.delete(self.context)
        except DeleteError as e:
            logger.error(str(e))
            return result(DeleteStatus.FAILED, e)
        except Exception as e:
            logger.exception(f"Unexpected error while deleting {resource}")
            error = DeleteError(
                f"Couldn't delete {resource.resource_type} [{resource.name}]: {e}",
                resource_id=resource.id,
                resource_type=resource.resource_type,
            )
            return result(DeleteStatus.FAILED, error)

        return result(DeleteStatus.SUCCESS)

    def __repr__(self) -> str:
        return (
            f"CleanupPipeline(region='{self.region}', "
            f"dry_run={self.context.dry_run}, "
            f"sweet_clean={self.context.sweet_clean})"
        )
