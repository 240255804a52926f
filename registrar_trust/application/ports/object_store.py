"""Object store port definition.

Defines the abstract interface for fetching registrar objects, either as
they are now or as they were at a point in time. Infrastructure adapters
(registrar API client, in-memory snapshot store) implement this protocol.

The verifier never caches what it fetches; adapters may, but a cached
answer must be identical to what the store would return.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from registrar_trust.application.dtos.exports import RegistrarObjectExport
from registrar_trust.domain.models.registrar_object import ObjectType


class ObjectStoreProtocol(ABC):
    """Abstract protocol for registrar object retrieval."""

    @abstractmethod
    async def get_object(
        self,
        object_type: ObjectType,
        object_id: int,
    ) -> RegistrarObjectExport:
        """Fetch the current state of an object.

        Args:
            object_type: Kind of object to fetch.
            object_id: Identifier of the object.

        Returns:
            The export model matching object_type.

        Raises:
            ObjectNotFoundError: If the object does not exist.
            ObjectStoreError: If the store cannot answer.
        """
        ...

    @abstractmethod
    async def get_object_at(
        self,
        object_type: ObjectType,
        object_id: int,
        at_time: datetime,
    ) -> RegistrarObjectExport:
        """Fetch the state of an object as it was at a point in time.

        The returned state is the one whose validity window contains
        at_time. Lookups are at one-second resolution.

        Args:
            object_type: Kind of object to fetch.
            object_id: Identifier of the object.
            at_time: Point in time to look up. Naive values are UTC.

        Returns:
            The export model matching object_type.

        Raises:
            ObjectNotFoundError: If the object did not exist at at_time.
            ObjectStoreError: If the store cannot answer.
        """
        ...

    async def close(self) -> None:
        """Release resources held by the store. Default: nothing to release."""
        return None
