"""
Base provider interface for listing and deleting block-storage resources.
"""

from abc import ABC, abstractmethod
from typing import List

from ..models import ResourceKind, ResourceRecord, SweepTarget

DEFAULT_GROUP = "default"


class ResourceProvider(ABC):
    """Abstract base class for resource listers."""

    name = "base"

    def target_groups(self) -> List[str]:
        """
        Ordered groups of targets. Each group is swept fully, volumes
        then snapshots, before the next one starts.
        """
        return [DEFAULT_GROUP]

    @abstractmethod
    def targets(self, kind: ResourceKind, group: str = DEFAULT_GROUP) -> List[SweepTarget]:
        """
        Return the clouds or regions of `group` holding resources of `kind`.

        Raises:
            ListingError: If the targets cannot be discovered
        """
        pass

    @abstractmethod
    def list_volumes(self, target: SweepTarget) -> List[ResourceRecord]:
        """
        List all volumes of a target as normalized records.

        Raises:
            ListingError: If the listing call fails
        """
        pass

    @abstractmethod
    def list_snapshots(self, target: SweepTarget) -> List[ResourceRecord]:
        """
        List all snapshots of a target as normalized records.

        Raises:
            ListingError: If the listing call fails
        """
        pass

    @abstractmethod
    def delete(self, record: ResourceRecord) -> None:
        """
        Delete a resource.

        Raises:
            DeletionError: If the remote call fails
        """
        pass

    def list_resources(self, target: SweepTarget, kind: ResourceKind) -> List[ResourceRecord]:
        if kind is ResourceKind.VOLUME:
            return self.list_volumes(target)
        return self.list_snapshots(target)
