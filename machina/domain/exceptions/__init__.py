"""Storage exceptions shared by the persistence ports and adapters."""

from machina.domain.exceptions.repository_exceptions import (
    DuplicateBoxError,
    EntityNotFoundError,
    RepositoryError,
)

__all__ = [
    "DuplicateBoxError",
    "EntityNotFoundError",
    "RepositoryError",
]
