"""Durable machine record.

The record is the only thing the store ever sees. It is serialized to an
opaque byte payload; the store must not interpret it.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from machina.domain.model.machine.exceptions import RecordDecodeError, RecordEncodeError
from machina.domain.shared_kernel import generate_id


class MachineRecord(BaseModel):
    """Persisted form of a machine.

    Attributes:
        resource_id: Store key of the record, assigned on creation
        name: Machine name within its project
        id: Provider-assigned machine identity, empty until set
        uid: Id of the user that created the machine
        provider: Provider name the machine runs under
        state: Encoded MachineState, None until first set
        box: Serialized BoxReference, None until first resolved
    """

    model_config = ConfigDict(extra="forbid")

    resource_id: str = Field(default_factory=generate_id)
    name: str
    id: str = ""
    uid: str = ""
    provider: Optional[str] = None
    state: Optional[Dict[str, Any]] = None
    box: Optional[Dict[str, Any]] = None

    def to_bytes(self) -> bytes:
        """Serialize the record into its opaque transport form."""
        try:
            return self.model_dump_json().encode("utf-8")
        except (TypeError, ValueError) as e:
            raise RecordEncodeError(self.name, str(e)) from e

    @classmethod
    def from_bytes(cls, payload: bytes, resource_id: str = "") -> "MachineRecord":
        """Deserialize a record produced by ``to_bytes``."""
        try:
            return cls.model_validate_json(payload)
        except ValidationError as e:
            raise RecordDecodeError(resource_id, str(e)) from e
