"""
Base Resource Module
====================

Provides the value type and capability contracts shared by every
resource kind awsugar can clean.

Resource kinds are heterogeneous: each is backed by a different AWS API
and carries different fields. The cleanup pipeline still needs to treat
them uniformly, so two small, independent contracts are defined here:

- :class:`Deletable` - identity plus a ``delete`` operation
- :class:`Sweetener` - an optional preparation step run before deletion

A kind implements only the contracts it supports.

Classes
-------
Resource
    Base dataclass holding the provider ID and tag set.
Deletable
    Abstract contract for resources that can be deleted.
Sweetener
    Abstract contract for resources that need preparation first.

Example
-------
>>> from awsugar.core.base_resource import Deletable, Resource
>>>
>>> @dataclass
... class Widget(Resource, Deletable):
...     resource_type: ClassVar[str] = "Widget"
...
...     def delete(self, context) -> None:
...         context.aws_client.get_ec2_client().delete_widget(WidgetId=self.id)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Dict, List, Optional

from awsugar.core.exceptions import DeleteError, describe_client_error, error_code

if TYPE_CHECKING:
    from awsugar.core.context import CleanupContext

# Module logger
logger = logging.getLogger(__name__)

NAME_TAG = "Name"


def tags_to_dict(tags: Optional[List[Dict[str, str]]]) -> Dict[str, str]:
    """
    Convert an AWS tag list into an ordered mapping.

    Parameters
    ----------
    tags : list of dict, optional
        Tags as returned by AWS: ``[{"Key": ..., "Value": ...}]``.

    Returns
    -------
    dict
        Tag key to value, in the order AWS returned them.
    """
    return {tag["Key"]: tag.get("Value", "") for tag in tags or []}


def dict_to_tags(tags: Dict[str, str]) -> List[Dict[str, str]]:
    """Convert a tag mapping back into the AWS tag list shape."""
    return [{"Key": key, "Value": value} for key, value in tags.items()]


@dataclass
class Resource:
    """
    A cloud resource subject to cleanup.

    Parameters
    ----------
    id : str
        Provider-assigned identifier (opaque).
    tags : dict
        Ordered tag set attached to the resource.

    Attributes
    ----------
    resource_type : str
        Constant label identifying the kind (e.g. "EC2", "EBS").
    """

    resource_type: ClassVar[str] = "Resource"

    id: str
    tags: Dict[str, str] = field(default_factory=dict)

    @property
    def name(self) -> str:
        """
        Best-effort human-readable identity.

        Returns the value of the "Name" tag if present, else the
        provider ID.
        """
        name = self.tags.get(NAME_TAG)
        return name if name else self.id

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.resource_type,
            "tags": dict(self.tags),
        }

    def __str__(self) -> str:
        return f"{self.resource_type} [{self.name}]"


class Deletable(ABC):
    """
    Contract for resources that can be deleted.

    Implementations issue the deletion request to the API owning the
    kind and raise :class:`DeleteError` on failure.
    """

    @abstractmethod
    def delete(self, context: CleanupContext) -> None:
        """
        Delete the resource.

        Parameters
        ----------
        context : CleanupContext
            Run configuration holding the AWS client.

        Raises
        ------
        DeleteError
            If the provider rejects the deletion. The message embeds
            the resource type, name and the provider's error text.
        """

    def sweeteners(self) -> List[Sweetener]:
        """
        Resources to prepare before this one is deleted.

        By default a resource that is itself a :class:`Sweetener` is
        its own preparation target; other kinds have none.
        """
        if isinstance(self, Sweetener):
            return [self]
        return []

    def _delete_failed(self, error: Exception) -> DeleteError:
        """Build the DeleteError raised when the provider call fails."""
        return DeleteError(
            f"Couldn't delete {self.resource_type} [{self.name}]: "
            f"{describe_client_error(error)}",
            resource_id=self.id,
            resource_type=self.resource_type,
            details={"error_code": error_code(error)},
        )


class Sweetener(ABC):
    """
    Contract for resources that need preparation before deletion.

    ``sweeten`` must complete (or fail) before the matching delete is
    attempted.
    """

    @abstractmethod
    def sweeten(self, context: CleanupContext) -> Any:
        """
        Run the preparation step.

        Raises
        ------
        SweetenError
            If the preparation fails; the owning resource must then
            not be deleted.
        """
