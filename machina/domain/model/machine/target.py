"""Immutable target snapshot handed to detection probes."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, kw_only=True)
class TargetDescriptor:
    """What a plugin may inspect when deciding whether it applies.

    Probes for several kinds may run concurrently against the same
    descriptor, so it is frozen.
    """

    name: str
    resource_id: str
    project_name: str
    machine_id: str = ""
    provider: Optional[str] = None
    box_name: Optional[str] = None
    guest_hint: Optional[str] = None
    communicator: str = "ssh"
