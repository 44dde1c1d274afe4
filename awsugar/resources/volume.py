"""
EBS Volume Resource
===================

Unattached ("available") EBS volumes keep costing money after the
instance they belonged to is gone. They are deleted, but only after a
snapshot of their content has completed, so no data is lost.

Sweetening a volume:

1. Describe the snapshot as ``<volume-id>_<Name tag>`` (or the bare
   volume ID when the volume has no Name tag).
2. Create the snapshot with every volume tag attached at creation time.
3. Block on :class:`~awsugar.core.waiter.SnapshotWaiter` until the
   snapshot is completed or the wait fails.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, Dict, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from awsugar.core.base_resource import (
    NAME_TAG,
    Deletable,
    Resource,
    Sweetener,
    dict_to_tags,
    tags_to_dict,
)
from awsugar.core.exceptions import ListingError, SnapshotError, describe_client_error
from awsugar.resources.snapshot import Snapshot

if TYPE_CHECKING:
    from awsugar.core.context import CleanupContext

# Module logger
logger = logging.getLogger(__name__)

MOUNT_POINT_TAG = "mount_point"

# Tag keys with this prefix are reserved by AWS and rejected on create
RESERVED_TAG_PREFIX = "aws:"


@dataclass
class EBSVolume(Resource, Deletable, Sweetener):
    """
    An EBS volume.

    Attributes:
        status: Provider status ('available', 'in-use', ...)
        size: Size in GiB
        availability_zone: Zone the volume lives in
        mount_point: Device name when derived from an instance mapping
    """

    resource_type: ClassVar[str] = "EBS"

    status: Optional[str] = None
    size: Optional[int] = None
    availability_zone: Optional[str] = None
    mount_point: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> EBSVolume:
        """Build from a DescribeVolumes item."""
        return cls(
            id=data["VolumeId"],
            tags=tags_to_dict(data.get("Tags")),
            status=data.get("State"),
            size=data.get("Size"),
            availability_zone=data.get("AvailabilityZone"),
        )

    @classmethod
    def from_mapping(
        cls,
        volume_id: str,
        device_name: str,
        tags: Dict[str, str],
    ) -> EBSVolume:
        """
        Build the volume behind an instance block-device mapping.

        The volume inherits the instance tags plus a ``mount_point``
        tag naming the device.
        """
        volume_tags = dict(tags)
        volume_tags[MOUNT_POINT_TAG] = device_name
        return cls(
            id=volume_id,
            tags=volume_tags,
            status="in-use",
            mount_point=device_name,
        )

    # =========================================================================
    # Deletable / Sweetener
    # =========================================================================

    def delete(self, context: CleanupContext) -> None:
        ec2 = context.aws_client.get_ec2_client()
        try:
            ec2.delete_volume(VolumeId=self.id)
        except (ClientError, BotoCoreError) as e:
            raise self._delete_failed(e) from e
        logger.info(f"Deleted EBS volume {self.id}")

    def snapshot_description(self) -> str:
        """Description given to the snapshot taken before deletion."""
        name = self.tags.get(NAME_TAG)
        if name:
            return f"{self.id}_{name}"
        return self.id

    def snapshot_tags(self) -> Dict[str, str]:
        """Tags copied onto the snapshot."""
        return {
            key: value
            for key, value in self.tags.items()
            if not key.startswith(RESERVED_TAG_PREFIX)
        }

    def sweeten(self, context: CleanupContext) -> Snapshot:
        """
        Snapshot the volume and wait until the snapshot is completed.

        Returns
        -------
        Snapshot
            The completed snapshot.

        Raises
        ------
        SnapshotError
            If the snapshot cannot be created or the wait fails.
        """
        ec2 = context.aws_client.get_ec2_client()
        params: Dict[str, Any] = {
            "VolumeId": self.id,
            "Description": self.snapshot_description(),
        }
        tags = self.snapshot_tags()
        if tags:
            params["TagSpecifications"] = [
                {"ResourceType": "snapshot", "Tags": dict_to_tags(tags)}
            ]

        try:
            response = ec2.create_snapshot(**params)
        except (ClientError, BotoCoreError) as e:
            message = (
                f"Couldn't snapshot EBS volume [{self.id}]: "
                f"{describe_client_error(e)}"
            )
            logger.error(message)
            raise SnapshotError(
                message,
                resource_id=self.id,
                resource_type=self.resource_type,
            ) from e

        snapshot = Snapshot.from_api(response)
        if snapshot.volume_id is None:
            snapshot.volume_id = self.id
        logger.info(f"Created snapshot {snapshot.id} of EBS volume {self.id}")

        return context.make_waiter().wait(snapshot)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(
            {
                "status": self.status,
                "size": self.size,
                "availability_zone": self.availability_zone,
                "mount_point": self.mount_point,
            }
        )
        return data


def list_available_volumes(aws_client) -> List[EBSVolume]:
    """
    List EBS volumes that are not attached to any instance.

    Raises
    ------
    ListingError
        If the volumes cannot be described.
    """
    ec2 = aws_client.get_ec2_client()
    volumes: List[EBSVolume] = []

    logger.debug(f"Fetching available EBS volumes in {aws_client.region}")

    try:
        paginator = ec2.get_paginator("describe_volumes")
        for page in paginator.paginate(
            Filters=[{"Name": "status", "Values": ["available"]}]
        ):
            for volume in page.get("Volumes", []):
                volumes.append(EBSVolume.from_api(volume))
    except (ClientError, BotoCoreError) as e:
        raise ListingError(
            f"Couldn't list EBS volumes: {describe_client_error(e)}",
            resource_type=EBSVolume.resource_type,
            region=aws_client.region,
        ) from e

    logger.info(f"Found {len(volumes)} available EBS volumes in {aws_client.region}")
    return volumes
