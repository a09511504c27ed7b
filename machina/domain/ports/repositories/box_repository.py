"""Repository interface for the box collection."""

from abc import ABC, abstractmethod
from typing import Optional

from machina.domain.model.machine.box import BoxReference


class BoxCollectionPort(ABC):
    """Collection of boxes already known to the host."""

    @abstractmethod
    async def find(
        self,
        name: str,
        provider: Optional[str] = None,
        version: Optional[str] = None,
    ) -> Optional[BoxReference]:
        """Find a box by name.

        Args:
            name: Box name
            provider: Optional provider filter
            version: Optional exact version filter

        Returns:
            The newest matching box, or None
        """
        pass

    @abstractmethod
    async def save(self, box: BoxReference) -> None:
        """Add a box to the collection (no-op if an identical box exists).

        Args:
            box: The box to add
        """
        pass
