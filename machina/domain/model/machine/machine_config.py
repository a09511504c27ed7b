"""Parsed machine configuration consumed by resolution."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from machina.domain.model.machine.synced_folder import SyncedFolderSpec
from machina.domain.shared_kernel import ValueObject


@dataclass(frozen=True, kw_only=True)
class MachineConfig(ValueObject):
    """Settings a machine was declared with.

    Attributes:
        box: Box name the machine boots from
        box_version: Box version constraint, if pinned
        provider: Provider pinned by configuration; None lets policy decide
        guest: Guest type hint, passed to guest probes
        communicator: Communicator used to talk to the guest
        synced_folders: Declared folder mappings, in declaration order
    """

    box: Optional[str] = None
    box_version: Optional[str] = None
    provider: Optional[str] = None
    guest: Optional[str] = None
    communicator: str = "ssh"
    synced_folders: List[SyncedFolderSpec] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MachineConfig":
        """Create from an already-parsed configuration mapping."""
        return cls(
            box=data.get("box"),
            box_version=data.get("box_version"),
            provider=data.get("provider"),
            guest=data.get("guest"),
            communicator=data.get("communicator", "ssh"),
            synced_folders=[
                SyncedFolderSpec.from_dict(folder) for folder in data.get("synced_folders", [])
            ],
        )
