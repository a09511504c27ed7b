"""Repository ports for machina."""

from machina.domain.ports.repositories.box_repository import BoxCollectionPort
from machina.domain.ports.repositories.machine_record_repository import MachineRecordRepository

__all__ = ["BoxCollectionPort", "MachineRecordRepository"]
