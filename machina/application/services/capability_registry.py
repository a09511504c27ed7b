"""Capability Registry.

Resolves which plugin implementation of a capability kind drives a machine:

1. Every candidate of the kind is asked to detect the target (concurrently,
   each probe bounded by a timeout). A failing or timed-out probe only
   removes that candidate.
2. Detected candidates are scored by ancestry depth; the deepest wins and
   ties go to the candidate listed first by the component source.
3. The winner is seeded with its owning machine when it supports seeding
   (mandatory for kinds configured as seeded).

Example:
    registry = CapabilityRegistry(component_source, ranker)
    guest = await registry.resolve(
        CapabilityKind.GUEST,
        machine.to_target(),
        owner=SeedContext(machine=machine, project=project),
    )
"""

import asyncio
import inspect
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from machina.domain.model.capability.capability import (
    CapabilityKind,
    DetectableCapability,
    NamedCandidate,
    Seeder,
)
from machina.domain.model.capability.exceptions import (
    CandidateLookupError,
    CapabilityError,
    NoApplicableCandidateError,
    NoCandidatesError,
    SeedFailedError,
    SeedingUnsupportedError,
)
from machina.domain.model.machine.target import TargetDescriptor
from machina.domain.model.project.project_context import ProjectContext
from machina.domain.ports.services.component_source_port import ComponentSourcePort
from machina.domain.ports.services.specificity_ranker_port import SpecificityRankerPort
from machina.infrastructure.telemetry import add_span_attributes, async_with_tracer

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class SeedContext:
    """Owner injected into a winning candidate that supports seeding."""

    machine: Any
    project: ProjectContext


@dataclass
class _Selection:
    """Running best candidate, guarded by the registry's selection lock."""

    candidate: Optional[NamedCandidate] = None
    score: int = 0
    index: int = -1
    probe_errors: Dict[str, str] = field(default_factory=dict)

    def offer(self, index: int, candidate: NamedCandidate, score: int) -> bool:
        # Equal scores keep the earlier candidate in enumeration order,
        # whatever order the probes complete in.
        if (
            self.candidate is None
            or score > self.score
            or (score == self.score and index < self.index)
        ):
            self.candidate = candidate
            self.score = score
            self.index = index
            return True
        return False


class CapabilityRegistry:
    """Detect-and-rank resolution of capability candidates.

    The registry holds no candidates itself; it borrows them from the
    component source for the duration of one ``resolve`` call. Caching the
    winner is the caller's job.
    """

    def __init__(
        self,
        component_source: ComponentSourcePort,
        ranker: SpecificityRankerPort,
        probe_timeout_seconds: float = DEFAULT_PROBE_TIMEOUT_SECONDS,
        seeded_kinds: Iterable[CapabilityKind | str] = (CapabilityKind.GUEST,),
        sort_candidates: bool = False,
    ) -> None:
        """Initialize the registry.

        Args:
            component_source: Source of loaded candidates
            ranker: Specificity scoring for detected candidates
            probe_timeout_seconds: Upper bound for a single detection probe
            seeded_kinds: Kinds whose winner must implement the seeder interface
            sort_candidates: Sort candidates by name before detection so that
                ties do not depend on the source's enumeration order
        """
        if probe_timeout_seconds <= 0:
            raise ValueError("probe_timeout_seconds must be positive")
        self._source = component_source
        self._ranker = ranker
        self._probe_timeout = probe_timeout_seconds
        self._seeded_kinds = frozenset(CapabilityKind.parse(kind) for kind in seeded_kinds)
        self._sort_candidates = sort_candidates

    @property
    def seeded_kinds(self) -> frozenset[CapabilityKind]:
        return self._seeded_kinds

    def requires_seeding(self, kind: CapabilityKind) -> bool:
        return kind in self._seeded_kinds

    @async_with_tracer("capability_registry")
    async def resolve(
        self,
        kind: CapabilityKind,
        target: TargetDescriptor,
        owner: Optional[SeedContext] = None,
    ) -> NamedCandidate:
        """Resolve the single best candidate of ``kind`` for ``target``.

        Args:
            kind: Capability kind to resolve
            target: Immutable snapshot of the machine being resolved
            owner: Machine and project injected into a seedable winner

        Returns:
            The winning candidate, already seeded when applicable

        Raises:
            NoCandidatesError: No candidates are registered for the kind
            NoApplicableCandidateError: No candidate detected the target
            SeedFailedError: The winner failed to seed
            SeedingUnsupportedError: The kind requires seeding and the winner cannot seed
            CandidateLookupError: The component source failed
        """
        kind = CapabilityKind.parse(kind)
        candidates = await self._list_candidates(kind)
        if not candidates:
            raise NoCandidatesError(kind.value)

        selection = _Selection()
        selection_lock = asyncio.Lock()

        async def evaluate(index: int, candidate: NamedCandidate) -> None:
            try:
                detected = await self._probe(candidate, target)
            except asyncio.TimeoutError:
                logger.warning(
                    f"{kind.value} detection timed out after {self._probe_timeout}s: "
                    f"plugin={candidate.name}"
                )
                async with selection_lock:
                    selection.probe_errors[candidate.name] = "timeout"
                return
            except Exception as e:
                logger.error(
                    f"{kind.value} error on detection check: plugin={candidate.name}, error={e}"
                )
                async with selection_lock:
                    selection.probe_errors[candidate.name] = str(e)
                return

            if not detected:
                return

            try:
                score = await self._ranker.depth(candidate)
            except Exception as e:
                logger.error(
                    f"failed to get parents from {kind.value}: plugin={candidate.name}, error={e}"
                )
                async with selection_lock:
                    selection.probe_errors[candidate.name] = str(e)
                return

            async with selection_lock:
                if selection.offer(index, candidate, score):
                    logger.debug(
                        f"{kind.value} candidate leads: plugin={candidate.name}, score={score}"
                    )

        await asyncio.gather(*(evaluate(i, c) for i, c in enumerate(candidates)))

        winner = selection.candidate
        if winner is None:
            raise NoApplicableCandidateError(
                kind.value,
                candidates=[c.name for c in candidates],
                probe_errors=dict(selection.probe_errors),
            )

        logger.info(f"{kind.value} detection complete: name={winner.name}")
        add_span_attributes(
            {
                "capability.kind": kind.value,
                "capability.name": winner.name,
                "capability.score": selection.score,
            }
        )

        await self._seed(kind, winner, target, owner)
        return winner

    async def _list_candidates(self, kind: CapabilityKind) -> List[NamedCandidate]:
        try:
            candidates = list(await self._source.list(kind))
        except CapabilityError:
            raise
        except Exception as e:
            raise CandidateLookupError(
                f"failed to list {kind.value} plugins", kind=kind.value, original_error=e
            ) from e
        if self._sort_candidates:
            candidates.sort(key=lambda c: c.name)
        return candidates

    async def _probe(self, candidate: NamedCandidate, target: TargetDescriptor) -> bool:
        """Run one detection probe under the configured timeout."""
        plugin = candidate.value
        if not isinstance(plugin, DetectableCapability):
            raise TypeError(f"plugin {candidate.name} does not implement detect()")

        if inspect.iscoroutinefunction(plugin.detect):
            result = await asyncio.wait_for(plugin.detect(target), timeout=self._probe_timeout)
        else:
            result = await asyncio.wait_for(
                asyncio.to_thread(plugin.detect, target), timeout=self._probe_timeout
            )
            if inspect.isawaitable(result):
                result = await asyncio.wait_for(result, timeout=self._probe_timeout)
        return bool(result)

    async def _seed(
        self,
        kind: CapabilityKind,
        winner: NamedCandidate,
        target: TargetDescriptor,
        owner: Optional[SeedContext],
    ) -> None:
        plugin = winner.value
        if not isinstance(plugin, Seeder):
            if self.requires_seeding(kind):
                raise SeedingUnsupportedError(kind.value, winner.name)
            return

        if owner is None:
            raise SeedFailedError(kind.value, winner.name, "no owning machine to seed with")

        try:
            result = plugin.seed(owner.machine, owner.project, target)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(f"{kind.value} plugin failed to seed: plugin={winner.name}, error={e}")
            raise SeedFailedError(kind.value, winner.name, str(e)) from e
