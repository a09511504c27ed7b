"""Project and host context a machine is resolved within."""

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from machina.domain.ports.repositories.box_repository import BoxCollectionPort


@dataclass(frozen=True, kw_only=True)
class HostContext:
    """The host environment boxes are installed into.

    Attributes:
        name: Host name used in diagnostics
        data_path: Root directory for host-level data such as unpacked boxes
    """

    name: str
    data_path: Path

    @property
    def boxes_path(self) -> Path:
        return self.data_path / "boxes"


@dataclass(frozen=True, kw_only=True)
class ProjectContext:
    """The project owning a set of machines.

    Attributes:
        name: Project name
        path: Project root directory
        host: Host environment shared by all machines of the project
        boxes: Box collection visible to the project
    """

    name: str
    path: Path
    host: HostContext
    boxes: "BoxCollectionPort"
