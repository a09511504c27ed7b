"""Port for candidate specificity scoring."""

from abc import ABC, abstractmethod

from machina.domain.model.capability.capability import NamedCandidate


class SpecificityRankerPort(ABC):
    """Scores how specific a candidate is (e.g. ubuntu > debian > linux)."""

    @abstractmethod
    async def depth(self, candidate: NamedCandidate) -> int:
        """Return the ancestry depth of ``candidate``; higher is more specific."""
        pass
