"""
Tests for the SQL machine record and box repositories (in-memory SQLite).
"""

import pytest

from machina.domain.exceptions import EntityNotFoundError
from machina.domain.model.machine import BoxReference, MachineRecord
from machina.infrastructure.adapters.secondary.persistence.sql_box_repository import (
    SqlBoxRepository,
)
from machina.infrastructure.adapters.secondary.persistence.sql_machine_record_repository import (
    SqlMachineRecordRepository,
)


@pytest.mark.unit
class TestSqlMachineRecordRepository:
    """Test record storage as opaque payloads."""

    async def test_save_and_load(self, test_db):
        repo = SqlMachineRecordRepository(test_db)
        record = MachineRecord(name="web", provider="virtualbox")

        await repo.save(record.resource_id, record.to_bytes())
        payload = await repo.load(record.resource_id)

        assert MachineRecord.from_bytes(payload) == record

    async def test_save_replaces_payload(self, test_db):
        repo = SqlMachineRecordRepository(test_db)

        await repo.save("res-1", b"first")
        await repo.save("res-1", b"second")

        assert await repo.load("res-1") == b"second"

    async def test_load_missing(self, test_db):
        repo = SqlMachineRecordRepository(test_db)

        with pytest.raises(EntityNotFoundError) as exc_info:
            await repo.load("missing")

        assert exc_info.value.key == "missing"


@pytest.mark.unit
class TestSqlBoxRepository:
    """Test box collection lookups."""

    async def test_find_by_name_and_provider(self, test_db):
        repo = SqlBoxRepository(test_db)
        await repo.save(BoxReference(name="centos/7", provider="virtualbox"))
        await repo.save(BoxReference(name="centos/7", provider="libvirt"))

        box = await repo.find("centos/7", "libvirt")

        assert box == BoxReference(name="centos/7", provider="libvirt")

    async def test_find_missing(self, test_db):
        repo = SqlBoxRepository(test_db)
        await repo.save(BoxReference(name="centos/7", provider="virtualbox"))

        assert await repo.find("centos/8") is None
        assert await repo.find("centos/7", "docker") is None

    async def test_find_by_version(self, test_db):
        repo = SqlBoxRepository(test_db)
        await repo.save(BoxReference(name="alpine", provider="docker", version="1"))
        await repo.save(BoxReference(name="alpine", provider="docker", version="2"))

        box = await repo.find("alpine", "docker", "1")

        assert box.version == "1"

    async def test_find_returns_most_recently_added_version(self, test_db):
        """Version strings are not compared: "10" added after "9" is the latest."""
        repo = SqlBoxRepository(test_db)
        await repo.save(BoxReference(name="alpine", provider="docker", version="9"))
        await repo.save(BoxReference(name="alpine", provider="docker", version="10"))

        box = await repo.find("alpine", "docker")

        assert box.version == "10"

    async def test_save_is_idempotent(self, test_db):
        repo = SqlBoxRepository(test_db)
        box = BoxReference(name="alpine", provider="docker", directory="/boxes/alpine")

        await repo.save(box)
        await repo.save(box)

        assert await repo.find("alpine") == box
