"""
EC2 Instance Resource
=====================

Idle EC2 instances are terminated. Terminating an instance also
destroys the EBS volumes mapped on it, so sweetening an instance means
snapshotting each of those volumes first.

Listing
-------
- With explicit instance IDs: exactly those instances, as long as they
  are not already terminated or shutting down.
- Without IDs: every ``stopped`` instance in the region.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Dict, List, Optional, Sequence, Tuple

from botocore.exceptions import BotoCoreError, ClientError

from awsugar.core.base_resource import Deletable, Resource, tags_to_dict
from awsugar.core.exceptions import ListingError, describe_client_error
from awsugar.resources.volume import EBSVolume

if TYPE_CHECKING:
    from awsugar.core.base_resource import Sweetener
    from awsugar.core.context import CleanupContext

# Module logger
logger = logging.getLogger(__name__)

IDLE_STATES = ["stopped"]
LIVE_STATES = ["pending", "running", "stopping", "stopped"]


@dataclass
class EC2Instance(Resource, Deletable):
    """
    An EC2 instance.

    Attributes:
        state: Instance state name ('running', 'stopped', ...)
        instance_type: Instance type, e.g. 't3.micro'
        block_device_mappings: (device name, volume ID) for each EBS mapping
    """

    resource_type: ClassVar[str] = "EC2"

    state: Optional[str] = None
    instance_type: Optional[str] = None
    block_device_mappings: List[Tuple[str, str]] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> EC2Instance:
        """Build from a DescribeInstances item."""
        mappings = [
            (mapping["DeviceName"], mapping["Ebs"]["VolumeId"])
            for mapping in data.get("BlockDeviceMappings", [])
            if mapping.get("Ebs", {}).get("VolumeId")
        ]
        return cls(
            id=data["InstanceId"],
            tags=tags_to_dict(data.get("Tags")),
            state=data.get("State", {}).get("Name"),
            instance_type=data.get("InstanceType"),
            block_device_mappings=mappings,
        )

    def volumes_to_sweeten(self) -> List[EBSVolume]:
        """One volume per EBS block-device mapping of the instance."""
        return [
            EBSVolume.from_mapping(volume_id, device_name, self.tags)
            for device_name, volume_id in self.block_device_mappings
        ]

    def sweeteners(self) -> List[Sweetener]:
        return list(self.volumes_to_sweeten())

    def delete(self, context: CleanupContext) -> None:
        ec2 = context.aws_client.get_ec2_client()
        try:
            ec2.terminate_instances(InstanceIds=[self.id])
        except (ClientError, BotoCoreError) as e:
            raise self._delete_failed(e) from e
        logger.info(f"Terminated EC2 instance {self.id}")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(
            {
                "state": self.state,
                "instance_type": self.instance_type,
                "volumes": [
                    {"device": device, "volume_id": volume_id}
                    for device, volume_id in self.block_device_mappings
                ],
            }
        )
        return data


def list_instances(
    aws_client,
    ids: Optional[Sequence[str]] = None,
) -> List[EC2Instance]:
    """
    List the EC2 instances to clean.

    Parameters
    ----------
    aws_client : AWSClient
        Client for the target region.
    ids : sequence of str, optional
        Restrict the listing to these instance IDs.

    Raises
    ------
    ListingError
        If the instances cannot be described (including unknown IDs).
    """
    ec2 = aws_client.get_ec2_client()
    instances: List[EC2Instance] = []

    params: Dict[str, Any] = {}
    if ids:
        params["InstanceIds"] = list(ids)
        params["Filters"] = [{"Name": "instance-state-name", "Values": LIVE_STATES}]
    else:
        params["Filters"] = [{"Name": "instance-state-name", "Values": IDLE_STATES}]

    logger.debug(f"Fetching EC2 instances in {aws_client.region} ({params})")

    try:
        paginator = ec2.get_paginator("describe_instances")
        for page in paginator.paginate(**params):
            for reservation in page.get("Reservations", []):
                for instance in reservation.get("Instances", []):
                    instances.append(EC2Instance.from_api(instance))
    except (ClientError, BotoCoreError) as e:
        raise ListingError(
            f"Couldn't list instances: {describe_client_error(e)}",
            resource_type=EC2Instance.resource_type,
            region=aws_client.region,
        ) from e

    logger.info(f"Found {len(instances)} EC2 instances to clean in {aws_client.region}")
    return instances
