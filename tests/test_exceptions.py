"""
Tests for the exception hierarchy and error helpers.
"""

from awsugar.core.exceptions import (
    AwsugarError,
    BatchCleanupError,
    CleanerError,
    DeleteError,
    SnapshotError,
    SnapshotTimeoutError,
    SweetenError,
    describe_client_error,
    error_code,
)
from helpers import client_error


class TestExceptions:
    """Tests for the exception classes."""

    def test_hierarchy(self):
        assert issubclass(SnapshotTimeoutError, SnapshotError)
        assert issubclass(SnapshotError, SweetenError)
        assert issubclass(SweetenError, CleanerError)
        assert issubclass(BatchCleanupError, CleanerError)
        assert issubclass(CleanerError, AwsugarError)

    def test_details(self):
        error = SnapshotError(
            "Snapshot failed",
            resource_id="vol-1",
            resource_type="EBS",
            snapshot_id="snap-1",
        )
        assert error.to_dict() == {
            "error_type": "SnapshotError",
            "message": "Snapshot failed",
            "details": {
                "snapshot_id": "snap-1",
                "resource_id": "vol-1",
                "resource_type": "EBS",
            },
        }

    def test_batch_error_keeps_every_cause(self):
        causes = [DeleteError("first"), SnapshotError("second")]

        error = BatchCleanupError(causes)

        assert error.errors == causes
        assert len(error) == 2
        assert str(error) == "2 errors occurred:\n  * first\n  * second"
        assert [d["message"] for d in error.details["errors"]] == ["first", "second"]

    def test_batch_error_single_cause(self):
        assert str(BatchCleanupError([DeleteError("only")])).startswith("1 error occurred:")


class TestClientErrorHelpers:
    """Tests for describe_client_error and error_code."""

    def test_known_code(self):
        error = client_error("DependencyViolation", "has dependencies")
        assert describe_client_error(error) == (
            "Resource is still in use by another resource (DependencyViolation)"
        )

    def test_unknown_code(self):
        error = client_error("Throttling", "Rate exceeded")
        assert describe_client_error(error) == "Rate exceeded (Throttling)"

    def test_other_exception(self):
        assert describe_client_error(ValueError("bad")) == "bad"

    def test_error_code(self):
        assert error_code(client_error("VolumeInUse")) == "VolumeInUse"
        assert error_code(ValueError("bad")) is None
