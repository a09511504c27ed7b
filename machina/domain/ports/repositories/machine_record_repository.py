"""Repository interface for durable machine records."""

from abc import ABC, abstractmethod


class MachineRecordRepository(ABC):
    """Durable store for machine records.

    Records are opaque byte payloads; implementations must store and return
    them unchanged. Retry policy, if any, belongs to the implementation.
    """

    @abstractmethod
    async def save(self, resource_id: str, payload: bytes) -> None:
        """Create or replace the record stored under ``resource_id``.

        Args:
            resource_id: Record key
            payload: Serialized machine record
        """
        pass

    @abstractmethod
    async def load(self, resource_id: str) -> bytes:
        """Load the record stored under ``resource_id``.

        Args:
            resource_id: Record key

        Returns:
            The serialized machine record

        Raises:
            EntityNotFoundError: If no record is stored under the key
        """
        pass
