"""In-process plugin component source.

Plugins register a factory per (kind, name). Every lookup calls the factory,
so each caller receives its own plugin instance. A plugin may name a parent
of the same kind; the parent chain drives specificity ranking.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from threading import RLock
from typing import Any, Callable, Dict, List, Optional, Tuple

from machina.domain.model.capability.capability import CapabilityKind, NamedCandidate
from machina.domain.model.capability.exceptions import (
    CandidateLookupError,
    CandidateNotFoundError,
)
from machina.domain.ports.services.component_source_port import ComponentSourcePort
from machina.domain.ports.services.specificity_ranker_port import SpecificityRankerPort

logger = logging.getLogger(__name__)

PluginFactory = Callable[[], Any]


@dataclass(frozen=True)
class PluginRegistration:
    """A registered plugin factory."""

    kind: CapabilityKind
    name: str
    factory: PluginFactory
    parent: Optional[str] = None


class PluginComponentSource(ComponentSourcePort):
    """Registry of plugin factories keyed by capability kind and name."""

    def __init__(self) -> None:
        self._registrations: Dict[Tuple[CapabilityKind, str], PluginRegistration] = {}
        self._lock = RLock()

    def register(
        self,
        kind: CapabilityKind | str,
        name: str,
        factory: PluginFactory,
        *,
        parent: Optional[str] = None,
        overwrite: bool = False,
    ) -> None:
        """Register a plugin factory.

        Args:
            kind: Capability kind the plugin implements
            name: Plugin name, unique within the kind
            factory: Zero-argument callable producing a plugin instance
            parent: Name of the less specific plugin this one refines
            overwrite: Replace an existing registration instead of failing
        """
        kind = CapabilityKind.parse(kind)
        normalized_name = (name or "").strip()
        if not normalized_name:
            raise ValueError("plugin name is required")
        if parent is not None and parent.strip() == normalized_name:
            raise ValueError(f"plugin {normalized_name} cannot be its own parent")

        with self._lock:
            key = (kind, normalized_name)
            if key in self._registrations and not overwrite:
                raise ValueError(f"{kind.value} plugin already registered: {normalized_name}")
            self._registrations[key] = PluginRegistration(
                kind=kind,
                name=normalized_name,
                factory=factory,
                parent=parent.strip() if parent else None,
            )
        logger.debug(f"Registered {kind.value} plugin {normalized_name} (parent={parent})")

    def unregister(self, kind: CapabilityKind | str, name: str) -> None:
        with self._lock:
            self._registrations.pop((CapabilityKind.parse(kind), name), None)

    def registration(self, kind: CapabilityKind | str, name: str) -> Optional[PluginRegistration]:
        with self._lock:
            return self._registrations.get((CapabilityKind.parse(kind), name))

    def registrations(self, kind: CapabilityKind | str) -> List[PluginRegistration]:
        """Return a snapshot of registrations for ``kind`` in registration order."""
        kind = CapabilityKind.parse(kind)
        with self._lock:
            return [reg for (k, _), reg in self._registrations.items() if k is kind]

    async def list(self, kind: CapabilityKind) -> List[NamedCandidate]:
        return [await self._load(reg) for reg in self.registrations(kind)]

    async def get(self, kind: CapabilityKind, name: str) -> NamedCandidate:
        reg = self.registration(kind, name)
        if reg is None:
            raise CandidateNotFoundError(CapabilityKind.parse(kind).value, name)
        return await self._load(reg)

    async def _load(self, reg: PluginRegistration) -> NamedCandidate:
        try:
            value = reg.factory()
            if inspect.isawaitable(value):
                value = await value
        except Exception as e:
            raise CandidateLookupError(
                f"failed to load {reg.kind.value} plugin {reg.name}: {e}",
                kind=reg.kind.value,
                candidate=reg.name,
                original_error=e,
            ) from e
        return NamedCandidate(name=reg.name, kind=reg.kind, value=value)


class PluginAncestryRanker(SpecificityRankerPort):
    """Scores a candidate by the length of its parent chain.

    With ``linux <- debian <- ubuntu`` registered, ``linux`` scores 0,
    ``debian`` 1 and ``ubuntu`` 2.
    """

    def __init__(self, source: PluginComponentSource) -> None:
        self._source = source

    async def depth(self, candidate: NamedCandidate) -> int:
        depth = 0
        seen = {candidate.name}
        reg = self._source.registration(candidate.kind, candidate.name)
        if reg is None:
            raise CandidateNotFoundError(candidate.kind.value, candidate.name)

        while reg.parent is not None:
            if reg.parent in seen:
                raise CandidateLookupError(
                    f"{candidate.kind.value} plugin {candidate.name} has a parent cycle",
                    kind=candidate.kind.value,
                    candidate=candidate.name,
                )
            seen.add(reg.parent)
            parent = self._source.registration(candidate.kind, reg.parent)
            if parent is None:
                raise CandidateLookupError(
                    f"{candidate.kind.value} plugin {reg.name} names unknown parent {reg.parent}",
                    kind=candidate.kind.value,
                    candidate=candidate.name,
                )
            depth += 1
            reg = parent
        return depth
