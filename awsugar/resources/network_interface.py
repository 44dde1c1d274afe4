"""
Network interfaces left behind in the ``available`` state, i.e. not
attached to any instance.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, Dict, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from awsugar.core.base_resource import Deletable, Resource, tags_to_dict
from awsugar.core.exceptions import ListingError, describe_client_error

if TYPE_CHECKING:
    from awsugar.core.context import CleanupContext

# Module logger
logger = logging.getLogger(__name__)


@dataclass
class NetworkInterface(Resource, Deletable):
    """
    An elastic network interface (ENI).

    Attributes:
        status: Provider status ('available', 'in-use', ...)
        description: Interface description
        subnet_id: Subnet the interface lives in
    """

    resource_type: ClassVar[str] = "Network Interface"

    status: Optional[str] = None
    description: str = ""
    subnet_id: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> NetworkInterface:
        """Build from a DescribeNetworkInterfaces item."""
        return cls(
            id=data["NetworkInterfaceId"],
            # ENIs expose their tags as TagSet
            tags=tags_to_dict(data.get("TagSet")),
            status=data.get("Status"),
            description=data.get("Description", ""),
            subnet_id=data.get("SubnetId"),
        )

    def delete(self, context: CleanupContext) -> None:
        ec2 = context.aws_client.get_ec2_client()
        try:
            ec2.delete_network_interface(NetworkInterfaceId=self.id)
        except (ClientError, BotoCoreError) as e:
            raise self._delete_failed(e) from e
        logger.info(f"Deleted network interface {self.id}")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(
            {
                "status": self.status,
                "description": self.description,
                "subnet_id": self.subnet_id,
            }
        )
        return data


def list_unattached_network_interfaces(aws_client) -> List[NetworkInterface]:
    """
    List network interfaces that are not attached to an instance.

    Raises
    ------
    ListingError
        If the interfaces cannot be described.
    """
    ec2 = aws_client.get_ec2_client()
    interfaces: List[NetworkInterface] = []

    try:
        paginator = ec2.get_paginator("describe_network_interfaces")
        for page in paginator.paginate(
            Filters=[{"Name": "status", "Values": ["available"]}]
        ):
            for eni in page.get("NetworkInterfaces", []):
                interfaces.append(NetworkInterface.from_api(eni))
    except (ClientError, BotoCoreError) as e:
        raise ListingError(
            f"Couldn't list network interfaces: {describe_client_error(e)}",
            resource_type=NetworkInterface.resource_type,
            region=aws_client.region,
        ) from e

    logger.info(
        f"Found {len(interfaces)} unattached network interfaces in {aws_client.region}"
    )
    return interfaces
