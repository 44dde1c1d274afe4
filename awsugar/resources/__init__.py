"""
Resource Kinds
==============

Value types and listing functions for every resource kind awsugar can
clean, plus the registry the CLI uses to resolve a kind name.

Available Kinds
---------------
instance (ec2)
    Idle EC2 instances. Their EBS volumes are snapshotted first.
load-balancer (elb)
    Classic load balancers without registered instances.
volume (ebs)
    Unattached EBS volumes. Each is snapshotted first.
network-interface (eni)
    Unattached network interfaces.

Example
-------
>>> from awsugar.resources import get_kind
>>>
>>> kind = get_kind("ebs")
>>> kind.name
'volume'
>>> volumes = kind.list(client)

Adding New Kinds
----------------
1. Create a module with a dataclass extending ``Resource`` and
   ``Deletable`` (and ``Sweetener`` when it needs preparation)
2. Write a listing function returning only unused resources
3. Register a :class:`ResourceKind` in ``KINDS``
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from awsugar.core.base_resource import Deletable
from awsugar.core.exceptions import UnsupportedKindError
from awsugar.resources.instance import EC2Instance, list_instances
from awsugar.resources.load_balancer import LoadBalancer, list_inactive_load_balancers
from awsugar.resources.network_interface import (
    NetworkInterface,
    list_unattached_network_interfaces,
)
from awsugar.resources.snapshot import Snapshot
from awsugar.resources.volume import EBSVolume, list_available_volumes

# Module logger
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceKind:
    """
    A cleanable resource kind.

    Attributes:
        name: Canonical CLI name
        label: Resource type label shown in reports
        description: One-line summary of what gets cleaned
        lister: Function returning the unused resources of the kind
        aliases: Alternative CLI names
        accepts_ids: Whether the lister can be restricted to explicit IDs
    """

    name: str
    label: str
    description: str
    lister: Callable[..., Sequence[Deletable]]
    aliases: Tuple[str, ...] = ()
    accepts_ids: bool = False

    def list(
        self,
        aws_client,
        ids: Optional[Sequence[str]] = None,
    ) -> List[Deletable]:
        """
        List the cleanup candidates of this kind.

        Raises
        ------
        ListingError
            If the provider listing fails.
        """
        if self.accepts_ids:
            return list(self.lister(aws_client, ids=ids))
        if ids:
            logger.warning(f"--ids only applies to instances; ignored for {self.name}")
        return list(self.lister(aws_client))


KINDS: Dict[str, ResourceKind] = {
    kind.name: kind
    for kind in (
        ResourceKind(
            name="instance",
            label=EC2Instance.resource_type,
            description="Stopped EC2 instances (or the given --ids), volumes snapshotted first",
            lister=list_instances,
            aliases=("ec2",),
            accepts_ids=True,
        ),
        ResourceKind(
            name="load-balancer",
            label=LoadBalancer.resource_type,
            description="Classic load balancers without registered instances",
            lister=list_inactive_load_balancers,
            aliases=("elb",),
        ),
        ResourceKind(
            name="volume",
            label=EBSVolume.resource_type,
            description="Unattached EBS volumes, snapshotted first",
            lister=list_available_volumes,
            aliases=("ebs",),
        ),
        ResourceKind(
            name="network-interface",
            label=NetworkInterface.resource_type,
            description="Unattached network interfaces",
            lister=list_unattached_network_interfaces,
            aliases=("eni",),
        ),
    )
}


def get_kind(name: str) -> ResourceKind:
    """
    Resolve a kind by canonical name or alias (case-insensitive).

    Raises
    ------
    UnsupportedKindError
        If no kind matches.
    """
    wanted = name.strip().lower()
    for kind in KINDS.values():
        if wanted == kind.name or wanted in kind.aliases:
            return kind
    raise UnsupportedKindError(name, list(KINDS))


__all__ = [
    "EBSVolume",
    "EC2Instance",
    "KINDS",
    "LoadBalancer",
    "NetworkInterface",
    "ResourceKind",
    "Snapshot",
    "get_kind",
]
