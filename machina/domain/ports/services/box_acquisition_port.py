"""Port for acquiring boxes that are not yet known locally."""

from abc import ABC, abstractmethod
from typing import Optional

from machina.domain.model.machine.box import BoxReference
from machina.domain.model.project.project_context import HostContext


class BoxAcquisitionPort(ABC):
    """Adds a box to the host so machines can boot from it."""

    @abstractmethod
    async def ensure_box(
        self,
        name: str,
        provider: str,
        host: Optional[HostContext] = None,
    ) -> BoxReference:
        """Make box ``name`` for ``provider`` available on the host.

        Args:
            name: Box name
            provider: Provider the box must be built for
            host: Host the box is installed into

        Returns:
            Reference to the available box
        """
        pass
