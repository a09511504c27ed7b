"""
SQLAlchemy implementation of BoxCollectionPort.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from machina.domain.exceptions import DuplicateBoxError, RepositoryError
from machina.domain.model.machine.box import BoxReference
from machina.domain.ports.repositories.box_repository import BoxCollectionPort
from machina.infrastructure.adapters.secondary.persistence.models import BoxModel

logger = logging.getLogger(__name__)


class SqlBoxRepository(BoxCollectionPort):
    """Box collection backed by the ``boxes`` table."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    def _to_domain(self, orm: BoxModel) -> BoxReference:
        """Convert ORM model to domain value object."""
        return BoxReference(
            name=orm.name,
            provider=orm.provider,
            version=orm.version,
            directory=orm.directory,
            metadata_url=orm.metadata_url,
        )

    def _to_orm(self, box: BoxReference) -> BoxModel:
        """Convert domain value object to ORM model."""
        return BoxModel(
            id=BoxModel.generate_id(),
            name=box.name,
            provider=box.provider,
            version=box.version,
            directory=box.directory,
            metadata_url=box.metadata_url,
        )

    async def find(
        self,
        name: str,
        provider: Optional[str] = None,
        version: Optional[str] = None,
    ) -> Optional[BoxReference]:
        """Find the most recently added box matching the filters.

        Version strings are never compared, so "10" is not ordered against "9".
        """
        query = select(BoxModel).where(BoxModel.name == name)
        if provider:
            query = query.where(BoxModel.provider == provider)
        if version:
            query = query.where(BoxModel.version == version)
        query = query.order_by(BoxModel.created_at.desc()).limit(1)

        try:
            result = await self._session.execute(query)
        except SQLAlchemyError as e:
            raise RepositoryError(f"Failed to look up box {name}", original_error=e) from e
        orm = result.scalar_one_or_none()
        return self._to_domain(orm) if orm else None

    async def save(self, box: BoxReference) -> None:
        """Add a box unless the same name/provider/version is already present."""
        if await self.find(box.name, box.provider, box.version) is not None:
            return
        self._session.add(self._to_orm(box))
        try:
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            raise DuplicateBoxError(box.name, box.provider, box.version, original_error=e) from e
        except SQLAlchemyError as e:
            await self._session.rollback()
            raise RepositoryError(f"Failed to save box {box.name}", original_error=e) from e
        logger.info(f"Added box {box.name} ({box.provider}, {box.version})")
