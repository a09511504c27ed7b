import uuid
from abc import ABC
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


def generate_id() -> str:
    """Generate a unique UUID string for record identification."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for Value Objects.
    Value Objects are immutable and defined by their attributes.
    """

    pass


class CachedSlot(Generic[T]):
    """
    Explicit cache cell with a present/absent marker.

    A slot holding ``None`` is still present; absence is tracked separately
    so that resolution results are never confused with "not yet resolved".
    """

    __slots__ = ("_value", "_present")

    def __init__(self) -> None:
        self._value: Optional[T] = None
        self._present = False

    @property
    def is_present(self) -> bool:
        return self._present

    def get(self) -> T:
        if not self._present:
            raise LookupError("cache slot is empty")
        return self._value  # type: ignore[return-value]

    def fill(self, value: T) -> None:
        self._value = value
        self._present = True

    def invalidate(self) -> None:
        self._value = None
        self._present = False


class DomainException(Exception):
    """Base exception for all domain errors."""

    pass
