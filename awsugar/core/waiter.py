"""
Snapshot Waiter Module
======================

Blocks until an EBS snapshot reaches a terminal state, reporting
progress along the way.

Snapshots of large volumes take tens of minutes, so the provider is
only polled on a long, fixed interval. Each :meth:`SnapshotWaiter.wait`
call runs its own small state machine::

    IN_PROGRESS(percent) ──► COMPLETED
            │
            └──────────────► ERROR   (query failure, provider error state,
                                      timeout or cancellation)

Classes
-------
SnapshotState
    States of one wait.
SnapshotWaiter
    Polls DescribeSnapshots until the snapshot is done.

Example
-------
>>> waiter = SnapshotWaiter(client, poll_interval=60, timeout=3600)
>>> snapshot = waiter.wait(snapshot)
>>> snapshot.state
'completed'
"""

from __future__ import annotations

import logging
import threading
import time
from enum import Enum
from typing import Callable, Optional

from botocore.exceptions import BotoCoreError, ClientError

from awsugar.core.exceptions import (
    SnapshotCancelledError,
    SnapshotError,
    SnapshotTimeoutError,
    describe_client_error,
)
from awsugar.resources.snapshot import Snapshot

# Module logger
logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 60.0

ProgressCallback = Callable[[str, int], None]


class SnapshotState(Enum):
    """State of a snapshot wait."""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ERROR = "error"


def parse_progress(progress: Optional[str]) -> Optional[int]:
    """
    Parse a provider progress string such as ``"55%"``.

    Parameters
    ----------
    progress : str or None
        Raw progress value.

    Returns
    -------
    int or None
        The percentage, or None when the value is missing or malformed.

    Examples
    --------
    >>> parse_progress("55%")
    55
    >>> parse_progress("n/a") is None
    True
    """
    if not progress:
        return None
    text = progress.strip()
    if text.endswith("%"):
        text = text[:-1].strip()
    try:
        percent = int(text)
    except ValueError:
        return None
    if not 0 <= percent <= 100:
        return None
    return percent


class SnapshotWaiter:
    """
    Polls a snapshot until it completes.

    Parameters
    ----------
    aws_client : AWSClient
        Client used for DescribeSnapshots.
    poll_interval : float, default=60
        Seconds between two status queries.
    timeout : float, optional
        Total wait budget in seconds. None or 0 waits forever.
    cancel_event : threading.Event, optional
        Setting it stops the wait at the next poll boundary.
    progress_callback : callable, optional
        Called with ``(snapshot_id, percent)`` each time the parsed
        progress changes.
    clock : callable, default=time.monotonic
        Time source used for the timeout budget.

    Attributes
    ----------
    state : SnapshotState
        State of the current (or last) wait.
    percent : int
        Last valid progress percentage observed.
    polls : int
        Number of status queries issued by the current (or last) wait.
    """

    def __init__(
        self,
        aws_client,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
        progress_callback: Optional[ProgressCallback] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.aws_client = aws_client
        self.poll_interval = poll_interval
        self.timeout = timeout or None
        self.cancel_event = cancel_event or threading.Event()
        self.progress_callback = progress_callback
        self.clock = clock

        self.state = SnapshotState.IN_PROGRESS
        self.percent = 0
        self.polls = 0
        self._last_progress: Optional[str] = None
        self._last_percent: Optional[int] = None

    def wait(self, snapshot: Snapshot) -> Snapshot:
        """
        Block until ``snapshot`` is completed.

        Parameters
        ----------
        snapshot : Snapshot
            The freshly created snapshot.

        Returns
        -------
        Snapshot
            The snapshot as last described by the provider.

        Raises
        ------
        SnapshotError
            If the status query fails or the provider reports the
            snapshot in the 'error' state. No further polling happens.
        SnapshotTimeoutError
            If the wait budget is exhausted.
        SnapshotCancelledError
            If ``cancel_event`` is set.
        """
        self.state = SnapshotState.IN_PROGRESS
        self.percent = 0
        self.polls = 0
        self._last_progress = None
        self._last_percent = None

        deadline = self.clock() + self.timeout if self.timeout else None
        logger.info(
            f"Starting to monitor snapshot [{snapshot.id}]. "
            "This can take a few minutes..."
        )

        while True:
            if self.cancel_event.wait(self.poll_interval):
                raise self._fail(
                    SnapshotCancelledError,
                    snapshot,
                    f"Wait for snapshot [{snapshot.id}] was cancelled",
                )

            current = self._describe(snapshot)

            if current.is_completed:
                self.state = SnapshotState.COMPLETED
                logger.info(f"Snapshot [{snapshot.id}] completed")
                return current

            if current.is_failed:
                reason = current.state_message or "provider reported state 'error'"
                raise self._fail(
                    SnapshotError,
                    snapshot,
                    f"Snapshot [{snapshot.id}] failed: {reason}",
                )

            self._observe_progress(snapshot.id, current.progress)

            if deadline is not None and self.clock() >= deadline:
                raise self._fail(
                    SnapshotTimeoutError,
                    snapshot,
                    f"Snapshot [{snapshot.id}] still pending after "
                    f"{self.timeout:g} seconds ({self.percent}% done)",
                )

    def _describe(self, snapshot: Snapshot) -> Snapshot:
        """Query the provider for the current status of the snapshot."""
        self.polls += 1
        logger.debug(f"Polling snapshot [{snapshot.id}] (query #{self.polls})")
        try:
            response = self.aws_client.get_ec2_client().describe_snapshots(
                SnapshotIds=[snapshot.id]
            )
        except (ClientError, BotoCoreError) as e:
            raise self._fail(
                SnapshotError,
                snapshot,
                f"Couldn't wait for snapshot [{snapshot.id}]: "
                f"{describe_client_error(e)}",
            ) from e

        snapshots = response.get("Snapshots", [])
        if not snapshots:
            raise self._fail(
                SnapshotError,
                snapshot,
                f"Couldn't wait for snapshot [{snapshot.id}]: snapshot not found",
            )
        return Snapshot.from_api(snapshots[0])

    def _observe_progress(self, snapshot_id: str, progress: Optional[str]) -> None:
        if progress is None or progress == self._last_progress:
            return
        self._last_progress = progress

        percent = parse_progress(progress)
        if percent is None:
            logger.debug(
                f"Ignoring malformed progress {progress!r} for snapshot "
                f"[{snapshot_id}], keeping {self.percent}%"
            )
            return
        if percent == self._last_percent:
            return

        self._last_percent = percent
        self.percent = percent
        logger.debug(f"Snapshot [{snapshot_id}] at {percent}%")
        if self.progress_callback:
            self.progress_callback(snapshot_id, percent)

    def _fail(self, error_class, snapshot: Snapshot, message: str) -> SnapshotError:
        self.state = SnapshotState.ERROR
        if snapshot.volume_id:
            message = f"{message} (EBS volume [{snapshot.volume_id}])"
        logger.error(message)
        return error_class(
            message,
            resource_id=snapshot.volume_id,
            resource_type="EBS",
            snapshot_id=snapshot.id,
        )

    def __repr__(self) -> str:
        return (
            f"SnapshotWaiter(poll_interval={self.poll_interval}, "
            f"timeout={self.timeout})"
        )
