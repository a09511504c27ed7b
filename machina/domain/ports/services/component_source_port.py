"""Port for capability discovery."""

from abc import ABC, abstractmethod
from typing import List

from machina.domain.model.capability.capability import CapabilityKind, NamedCandidate


class ComponentSourcePort(ABC):
    """Typed lookup of loaded plugin implementations.

    A pure lookup service: no detection or ranking happens here. Errors are
    reported as ``CandidateLookupError``.
    """

    @abstractmethod
    async def list(self, kind: CapabilityKind) -> List[NamedCandidate]:
        """Return every loaded candidate of ``kind``.

        The order of the returned list is the enumeration order used for
        tie-breaking during resolution.
        """
        pass

    @abstractmethod
    async def get(self, kind: CapabilityKind, name: str) -> NamedCandidate:
        """Return the candidate of ``kind`` registered under ``name``.

        Raises:
            CandidateNotFoundError: If no such candidate exists
        """
        pass
