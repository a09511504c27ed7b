"""Synced folder declarations and their resolved transports."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from machina.domain.shared_kernel import ValueObject


@dataclass(frozen=True, kw_only=True)
class SyncedFolderSpec(ValueObject):
    """Declared folder mapping between host and guest.

    Attributes:
        source: Path on the host
        destination: Path inside the guest
        type: Backing transport type; empty means "use the default type"
        disabled: Disabled folders are declared but never resolved
        options: Transport-specific options, passed through untouched
    """

    source: str
    destination: str
    type: Optional[str] = None
    disabled: bool = False
    options: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "destination": self.destination,
            "type": self.type,
            "disabled": self.disabled,
            "options": dict(self.options),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SyncedFolderSpec":
        return cls(
            source=data["source"],
            destination=data["destination"],
            type=data.get("type") or None,
            disabled=bool(data.get("disabled", False)),
            options=dict(data.get("options") or {}),
        )


@dataclass(frozen=True)
class SyncedFolderHandle:
    """A declared folder bound to its own transport instance."""

    spec: SyncedFolderSpec
    transport_type: str
    transport: Any
