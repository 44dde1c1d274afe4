"""
EBS snapshot value type.

Snapshots are not cleaned by awsugar; they are produced when a volume is
sweetened and tracked by :class:`~awsugar.core.waiter.SnapshotWaiter`
until they are durable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional

from awsugar.core.base_resource import Resource, tags_to_dict

STATE_PENDING = "pending"
STATE_COMPLETED = "completed"
STATE_ERROR = "error"


@dataclass
class Snapshot(Resource):
    """
    An EBS snapshot.

    Attributes:
        volume_id: Volume the snapshot was taken from
        state: Provider state ('pending', 'completed', 'error', ...)
        progress: Provider progress string, e.g. '55%'
        description: Snapshot description
        state_message: Provider explanation when the state is 'error'
    """

    resource_type: ClassVar[str] = "Snapshot"

    volume_id: Optional[str] = None
    state: str = STATE_PENDING
    progress: Optional[str] = None
    description: str = ""
    state_message: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> Snapshot:
        """Build from a CreateSnapshot response or DescribeSnapshots item."""
        return cls(
            id=data["SnapshotId"],
            tags=tags_to_dict(data.get("Tags")),
            volume_id=data.get("VolumeId"),
            state=data.get("State", STATE_PENDING),
            progress=data.get("Progress"),
            description=data.get("Description", ""),
            state_message=data.get("StateMessage"),
        )

    @property
    def is_completed(self) -> bool:
        return self.state == STATE_COMPLETED

    @property
    def is_failed(self) -> bool:
        return self.state == STATE_ERROR

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(
            {
                "volume_id": self.volume_id,
                "state": self.state,
                "progress": self.progress,
                "description": self.description,
            }
        )
        return data
