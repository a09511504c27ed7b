"""Capability kinds, candidates and the plugin-facing protocols.

A capability kind is a category of pluggable behavior (guest adapter,
synced-folder transport, ...). Plugins supply any number of candidates per
kind; the core picks one through detection or a type-keyed lookup.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from machina.domain.model.machine.target import TargetDescriptor
    from machina.domain.model.project.project_context import ProjectContext


class CapabilityKind(str, Enum):
    """Categories of pluggable behavior a machine can resolve."""

    GUEST = "guest"
    HOST = "host"
    PROVIDER = "provider"
    COMMUNICATOR = "communicator"
    SYNCED_FOLDER = "synced_folder"

    @classmethod
    def parse(cls, value: "str | CapabilityKind") -> "CapabilityKind":
        """Parse a kind from its value, tolerating case and surrounding whitespace."""
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


@dataclass(frozen=True)
class NamedCandidate:
    """One loaded implementation of a capability kind.

    The name is the stable identifier used in diagnostics and tie-breaking;
    ``value`` is the plugin object itself.
    """

    name: str
    kind: CapabilityKind
    value: Any

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.name}"


@runtime_checkable
class DetectableCapability(Protocol):
    """Capability that can report whether it applies to a target.

    ``detect`` may be a coroutine function or a plain function.
    """

    def detect(self, target: "TargetDescriptor") -> Any: ...


@runtime_checkable
class Seeder(Protocol):
    """Optional secondary interface for post-resolution initialization."""

    def seed(self, machine: Any, project: "ProjectContext", target: "TargetDescriptor") -> Any: ...
