"""
Exceptions raised by awsugar.

Everything awsugar raises on purpose derives from :class:`AwsugarError`
and carries a ``details`` mapping, so a failure can be printed for a
human or dumped into the JSON report unchanged.

::

    AwsugarError
    ├── AWSClientError            session, credentials, region, service client
    │   ├── CredentialsError
    │   ├── RegionError
    │   └── ServiceError
    ├── ListingError              candidates could not be listed (fatal)
    ├── UnsupportedKindError      unknown resource kind name
    └── CleanerError              one resource could not be cleaned
        ├── DeleteError
        ├── SweetenError
        │   └── SnapshotError
        │       ├── SnapshotTimeoutError
        │       └── SnapshotCancelledError
        └── BatchCleanupError     every failure of one batch

Example
-------
>>> try:
...     summary.raise_for_errors()
... except BatchCleanupError as e:
...     for cause in e.errors:
...         print(cause)
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from botocore.exceptions import ClientError


def _with_fields(details: Optional[Dict[str, Any]], **fields: Any) -> Dict[str, Any]:
    """Copy ``details`` and add every field that is set."""
    merged = dict(details or {})
    merged.update({key: value for key, value in fields.items() if value})
    return merged


class AwsugarError(Exception):
    """
    Root of the awsugar exception tree.

    Parameters
    ----------
    message : str
        What went wrong, ready to show to the user.
    details : dict, optional
        Machine-readable context (IDs, region, provider error code).
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form used by the JSON report."""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "details": self.details,
        }


# =============================================================================
# Session and credentials
# =============================================================================


class AWSClientError(AwsugarError):
    """The AWS session or a service client is unusable."""

    def __init__(
        self,
        message: str,
        service: Optional[str] = None,
        region: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.service = service
        self.region = region
        super().__init__(message, _with_fields(details, service=service, region=region))


class CredentialsError(AWSClientError):
    """Credentials are missing, expired, or rejected by STS."""


class RegionError(AWSClientError):
    """No valid region could be determined."""


class ServiceError(AWSClientError):
    """A boto3 service client could not be created."""


# =============================================================================
# Listing
# =============================================================================


class ListingError(AwsugarError):
    """
    The candidates of a kind could not be listed.

    Fatal for the run: nothing has been touched yet and there is no
    partial list to work from.

    Example
    -------
    >>> raise ListingError(
    ...     "Couldn't list EBS volumes: access denied",
    ...     resource_type="EBS",
    ...     region="us-west-2",
    ... )
    """

    def __init__(
        self,
        message: str,
        resource_type: Optional[str] = None,
        region: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.resource_type = resource_type
        self.region = region
        super().__init__(
            message,
            _with_fields(details, resource_type=resource_type, region=region),
        )


class UnsupportedKindError(AwsugarError):
    """Raised when a resource kind name is not one awsugar can clean."""

    def __init__(self, kind: str, supported: Sequence[str]) -> None:
        self.kind = kind
        self.supported = list(supported)
        super().__init__(
            f"Resource type not supported: {kind!r} "
            f"(choose from {', '.join(self.supported)})",
            details={"kind": kind, "supported": self.supported},
        )


# =============================================================================
# Cleaning
# =============================================================================


class CleanerError(AwsugarError):
    """
    A single resource could not be prepared or deleted.

    Parameters
    ----------
    message : str
        Message naming the resource type and display name.
    resource_id : str, optional
        Provider ID of the resource.
    resource_type : str, optional
        Type label, e.g. "EBS".
    details : dict, optional
        Extra context.
    """

    def __init__(
        self,
        message: str,
        resource_id: Optional[str] = None,
        resource_type: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.resource_id = resource_id
        self.resource_type = resource_type
        super().__init__(
            message,
            _with_fields(details, resource_id=resource_id, resource_type=resource_type),
        )


class DeleteError(CleanerError):
    """
    The provider refused a deletion.

    Example
    -------
    >>> raise DeleteError(
    ...     "Couldn't delete EBS [vol-123]: Volume is in use",
    ...     resource_id="vol-123",
    ...     resource_type="EBS",
    ... )
    """


class SweetenError(CleanerError):
    """The preparation step before a deletion failed."""


class SnapshotError(SweetenError):
    """
    A volume snapshot could not be created or never completed.

    ``snapshot_id`` is set when the snapshot was created before the
    failure.
    """

    def __init__(
        self,
        message: str,
        resource_id: Optional[str] = None,
        resource_type: Optional[str] = None,
        snapshot_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.snapshot_id = snapshot_id
        super().__init__(
            message,
            resource_id,
            resource_type,
            _with_fields(details, snapshot_id=snapshot_id),
        )


class SnapshotTimeoutError(SnapshotError):
    """The snapshot was still pending when the wait budget ran out."""


class SnapshotCancelledError(SnapshotError):
    """The snapshot wait was cancelled before completion."""


class BatchCleanupError(CleanerError):
    """
    Every individual failure of one cleanup batch, in order.

    Example
    -------
    >>> err = BatchCleanupError([DeleteError("a"), DeleteError("b")])
    >>> len(err)
    2
    """

    def __init__(self, errors: Sequence[CleanerError]) -> None:
        self.errors: List[CleanerError] = list(errors)
        count = len(self.errors)
        lines = [f"{count} error{'s' if count != 1 else ''} occurred:"]
        lines.extend(f"  * {error}" for error in self.errors)
        super().__init__(
            "\n".join(lines),
            details={"errors": [e.to_dict() for e in self.errors]},
        )

    def __len__(self) -> int:
        return len(self.errors)


# =============================================================================
# Helpers
# =============================================================================

# Common provider error codes and user-friendly messages
ERROR_MESSAGES = {
    "DependencyViolation": "Resource is still in use by another resource",
    "UnauthorizedOperation": "Insufficient permissions for this operation",
    "AccessDenied": "Insufficient permissions for this operation",
    "InvalidVolume.NotFound": "Volume no longer exists",
    "VolumeInUse": "Volume is attached to an instance",
    "InvalidInstanceID.NotFound": "Instance no longer exists",
    "InvalidNetworkInterfaceID.NotFound": "Network interface no longer exists",
    "InvalidNetworkInterface.InUse": "Network interface is attached",
    "LoadBalancerNotFound": "Load balancer no longer exists",
    "InvalidSnapshot.NotFound": "Snapshot no longer exists",
}


def describe_client_error(error: Exception) -> str:
    """
    Turn a provider exception into a short, readable message.

    Parameters
    ----------
    error : Exception
        Usually a botocore ``ClientError``; anything else is rendered
        with ``str()``.

    Returns
    -------
    str
        Friendly message for known error codes, otherwise the provider's
        own message.
    """
    if isinstance(error, ClientError):
        error_info = error.response.get("Error", {})
        code = error_info.get("Code", "Unknown")
        message = error_info.get("Message") or str(error)
        friendly = ERROR_MESSAGES.get(code)
        if friendly:
            return f"{friendly} ({code})"
        return f"{message} ({code})"
    return str(error)


def error_code(error: Exception) -> Optional[str]:
    """Return the provider error code of a ``ClientError``, if any."""
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code")
    return None
