"""
Cleanup run configuration.

A :class:`CleanupContext` is built once at startup from the command-line
options and passed explicitly into every listing, sweetening and
deletion call.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from awsugar.core.aws_client import AWSClient
from awsugar.core.waiter import DEFAULT_POLL_INTERVAL, ProgressCallback, SnapshotWaiter

# Four hours
DEFAULT_SNAPSHOT_TIMEOUT = 4 * 60 * 60.0


@dataclass
class CleanupContext:
    """
    Settings shared by every operation of one cleanup run.

    Attributes:
        aws_client: Authenticated client for the selected region
        dry_run: List and report only; never issue a mutating call
        sweet_clean: Snapshot volumes before they are destroyed
        poll_interval: Seconds between snapshot status queries
        snapshot_timeout: Wait budget per snapshot in seconds (None or 0 = unbounded)
        cancel_event: Set to stop an in-flight snapshot wait
        progress_callback: Receives (snapshot_id, percent) on progress changes
    """

    aws_client: AWSClient
    dry_run: bool = False
    sweet_clean: bool = True
    poll_interval: float = DEFAULT_POLL_INTERVAL
    snapshot_timeout: Optional[float] = DEFAULT_SNAPSHOT_TIMEOUT
    cancel_event: threading.Event = field(default_factory=threading.Event)
    progress_callback: Optional[ProgressCallback] = None

    @property
    def region(self) -> str:
        return self.aws_client.region

    def make_waiter(self) -> SnapshotWaiter:
        """Create a snapshot waiter configured for this run."""
        return SnapshotWaiter(
            self.aws_client,
            poll_interval=self.poll_interval,
            timeout=self.snapshot_timeout,
            cancel_event=self.cancel_event,
            progress_callback=self.progress_callback,
        )

    def cancel(self) -> None:
        """Stop any snapshot wait at its next poll boundary."""
        self.cancel_event.set()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "region": self.region,
            "profile": self.aws_client.profile,
            "dry_run": self.dry_run,
            "sweet_clean": self.sweet_clean,
            "poll_interval": self.poll_interval,
            "snapshot_timeout": self.snapshot_timeout,
        }
