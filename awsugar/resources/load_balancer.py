"""
Classic load balancers with no registered instances.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Dict, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from awsugar.core.base_resource import Deletable, Resource
from awsugar.core.exceptions import ListingError, describe_client_error

if TYPE_CHECKING:
    from awsugar.core.context import CleanupContext

# Module logger
logger = logging.getLogger(__name__)


@dataclass
class LoadBalancer(Resource, Deletable):
    """
    A classic Elastic Load Balancer.

    The load balancer name is its identity.

    Attributes:
        dns_name: Public DNS name
        instance_ids: Registered instance IDs
    """

    resource_type: ClassVar[str] = "ELB"

    dns_name: Optional[str] = None
    instance_ids: List[str] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> LoadBalancer:
        """Build from a DescribeLoadBalancers item."""
        return cls(
            id=data["LoadBalancerName"],
            dns_name=data.get("DNSName"),
            instance_ids=[i["InstanceId"] for i in data.get("Instances", [])],
        )

    @property
    def is_inactive(self) -> bool:
        return not self.instance_ids

    def delete(self, context: CleanupContext) -> None:
        elb = context.aws_client.get_elb_client()
        try:
            elb.delete_load_balancer(LoadBalancerName=self.id)
        except (ClientError, BotoCoreError) as e:
            raise self._delete_failed(e) from e
        logger.info(f"Deleted load balancer {self.id}")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"dns_name": self.dns_name, "instance_ids": self.instance_ids})
        return data


def list_inactive_load_balancers(aws_client) -> List[LoadBalancer]:
    """
    List classic load balancers that have no instance attached.

    Raises
    ------
    ListingError
        If the load balancers cannot be described.
    """
    elb = aws_client.get_elb_client()
    inactive: List[LoadBalancer] = []
    total = 0

    try:
        paginator = elb.get_paginator("describe_load_balancers")
        for page in paginator.paginate():
            for description in page.get("LoadBalancerDescriptions", []):
                total += 1
                load_balancer = LoadBalancer.from_api(description)
                if load_balancer.is_inactive:
                    inactive.append(load_balancer)
    except (ClientError, BotoCoreError) as e:
        raise ListingError(
            f"Couldn't list load balancers: {describe_client_error(e)}",
            resource_type=LoadBalancer.resource_type,
            region=aws_client.region,
        ) from e

    logger.info(
        f"Found {len(inactive)}/{total} inactive load balancers in {aws_client.region}"
    )
    return inactive
