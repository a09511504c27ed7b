"""Machine lifecycle exceptions.

State and record codec failures indicate data corruption or schema drift;
they are surfaced to the caller and never replaced by defaults.
"""

from typing import Any, Dict, List, Optional

from machina.domain.shared_kernel import DomainException


class MachineError(DomainException):
    """Base exception for machine lifecycle errors."""

    retryable = False

    def __init__(
        self,
        message: str,
        machine: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.machine = machine
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for diagnostics output."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "machine": self.machine,
            "details": self.details,
        }


class StateDecodeError(MachineError):
    """Raised when the stored state cannot be mapped onto MachineState."""

    def __init__(self, message: str, fields: Optional[List[str]] = None):
        super().__init__(
            f"failed to decode machine state: {message}",
            details={"fields": fields or []},
        )
        self.fields = fields or []


class StateEncodeError(MachineError):
    """Raised when a state value cannot be encoded into the record."""

    def __init__(self, message: str):
        super().__init__(f"failed to encode machine state: {message}")


class RecordEncodeError(MachineError):
    """Raised when the machine record cannot be serialized for the store."""

    def __init__(self, machine: str, message: str):
        super().__init__(f"failed to serialize machine record: {message}", machine=machine)


class RecordDecodeError(MachineError):
    """Raised when a stored payload is not a valid machine record."""

    def __init__(self, machine: str, message: str):
        super().__init__(f"failed to deserialize machine record: {message}", machine=machine)


class BoxNotConfiguredError(MachineError):
    """Raised when a box is requested for a machine that declares none."""

    def __init__(self, machine: str):
        super().__init__(f"machine {machine} has no box configured", machine=machine)
