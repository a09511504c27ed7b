"""
Storage errors raised by the durable-store and box-collection adapters.

Machines never translate these: whatever the store raises reaches the caller
unchanged, and no layer retries on its own.
"""

from typing import Any, Dict, Optional

from machina.domain.shared_kernel import DomainException


class RepositoryError(DomainException):
    """A storage operation failed.

    ``retryable`` is True because storage failures (locked database, lost
    connection) may clear up; the caller decides whether to try again.
    """

    retryable = True

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error
        self.details = details or {}

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message} (caused by: {self.original_error})"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class EntityNotFoundError(RepositoryError):
    """Nothing is stored under the requested key."""

    retryable = False

    def __init__(self, entity_type: str, key: str) -> None:
        super().__init__(
            f"no {entity_type} stored under {key!r}",
            details={"entity_type": entity_type, "key": key},
        )
        self.entity_type = entity_type
        self.key = key


class DuplicateBoxError(RepositoryError):
    """A box with the same name, provider and version is already in the collection."""

    retryable = False

    def __init__(self, name: str, provider: str, version: str, original_error=None) -> None:
        super().__init__(
            f"box {name} ({provider}, {version}) already exists",
            original_error=original_error,
            details={"name": name, "provider": provider, "version": version},
        )
