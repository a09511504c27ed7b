"""Machine domain models.

This module provides domain models for the machine lifecycle:
- MachineRecord: durable, opaque-serialized record of a machine
- MachineState: typed run state with a total decoder
- BoxReference: resolved box image
- SyncedFolderSpec / SyncedFolderHandle: folder declarations and transports
- TargetDescriptor: immutable snapshot for detection probes
"""

from machina.domain.model.machine.box import BoxReference
from machina.domain.model.machine.exceptions import (
    BoxNotConfiguredError,
    MachineError,
    RecordDecodeError,
    RecordEncodeError,
    StateDecodeError,
    StateEncodeError,
)
from machina.domain.model.machine.machine_config import MachineConfig
from machina.domain.model.machine.machine_record import MachineRecord
from machina.domain.model.machine.machine_state import MachineState, decode_state, encode_state
from machina.domain.model.machine.synced_folder import SyncedFolderHandle, SyncedFolderSpec
from machina.domain.model.machine.target import TargetDescriptor

__all__ = [
    "BoxNotConfiguredError",
    "BoxReference",
    "MachineConfig",
    "MachineError",
    "MachineRecord",
    "MachineState",
    "RecordDecodeError",
    "RecordEncodeError",
    "StateDecodeError",
    "StateEncodeError",
    "SyncedFolderHandle",
    "SyncedFolderSpec",
    "TargetDescriptor",
    "decode_state",
    "encode_state",
]
