import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Index, LargeBinary, String, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    pass


class IdGeneratorMixin:
    """Mixin providing a class method to generate unique IDs for database entities."""

    @classmethod
    def generate_id(cls) -> str:
        """Generate a unique UUID string for entity identification."""
        return str(uuid.uuid4())


class MachineRecordModel(Base):
    """Opaque machine record payload keyed by resource id."""

    __tablename__ = "machine_records"

    resource_id: Mapped[str] = mapped_column(String, primary_key=True)
    payload: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=func.now(), nullable=True
    )


class BoxModel(IdGeneratorMixin, Base):
    """A box known to the host."""

    __tablename__ = "boxes"
    __table_args__ = (
        UniqueConstraint("name", "provider", "version", name="uq_boxes_name_provider_version"),
        Index("ix_boxes_name_provider", "name", "provider"),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False, index=True)
    provider: Mapped[str] = mapped_column(String(64), nullable=False)
    version: Mapped[str] = mapped_column(String(64), nullable=False, default="0")
    directory: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    metadata_url: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    # Set client-side so boxes added within the same second still order by insertion
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )
