"""Typed machine state and its record encoding.

The durable record stores state as a plain mapping. Decoding is total:
a field the typed value does not know about is an error, never dropped.
"""

from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from machina.domain.model.machine.exceptions import StateDecodeError, StateEncodeError


class MachineState(BaseModel):
    """Run state reported by a provider.

    Attributes:
        id: Machine-readable state id (e.g. "running", "poweroff", "not_created")
        short_description: One-line human description
        long_description: Longer human description
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = ""
    short_description: str = ""
    long_description: str = ""


def encode_state(state: MachineState) -> Dict[str, Any]:
    """Encode a typed state into the record's state sub-structure."""
    if not isinstance(state, MachineState):
        raise StateEncodeError(f"expected MachineState, got {type(state).__name__}")
    try:
        return state.model_dump(mode="json")
    except (TypeError, ValueError) as e:
        raise StateEncodeError(str(e)) from e


def decode_state(raw: Optional[Mapping[str, Any]]) -> MachineState:
    """Decode the record's state sub-structure into a typed state.

    A record without state decodes to the zero state.
    """
    if raw is None:
        return MachineState()
    if not isinstance(raw, Mapping):
        raise StateDecodeError(f"state must be a mapping, got {type(raw).__name__}")
    try:
        return MachineState.model_validate(dict(raw))
    except ValidationError as e:
        fields = [".".join(map(str, err["loc"])) for err in e.errors()]
        raise StateDecodeError(str(e), fields=fields) from e
