"""
SQLAlchemy implementation of MachineRecordRepository.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from machina.domain.exceptions import EntityNotFoundError, RepositoryError
from machina.domain.ports.repositories.machine_record_repository import MachineRecordRepository
from machina.infrastructure.adapters.secondary.persistence.models import MachineRecordModel

logger = logging.getLogger(__name__)


class SqlMachineRecordRepository(MachineRecordRepository):
    """Stores machine records as opaque payloads in ``machine_records``."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def save(self, resource_id: str, payload: bytes) -> None:
        """Create or replace the record stored under ``resource_id``."""
        try:
            existing = await self._session.get(MachineRecordModel, resource_id)
            if existing:
                existing.payload = payload
            else:
                self._session.add(MachineRecordModel(resource_id=resource_id, payload=payload))
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            logger.error(f"Failed to save machine record {resource_id}: {e}")
            raise RepositoryError(
                f"Failed to save machine record {resource_id}",
                original_error=e,
                details={"resource_id": resource_id},
            ) from e

    async def load(self, resource_id: str) -> bytes:
        """Load the record stored under ``resource_id``."""
        try:
            orm = await self._session.get(MachineRecordModel, resource_id)
        except SQLAlchemyError as e:
            raise RepositoryError(
                f"Failed to load machine record {resource_id}",
                original_error=e,
                details={"resource_id": resource_id},
            ) from e
        if orm is None:
            raise EntityNotFoundError("MachineRecord", resource_id)
        return bytes(orm.payload)
