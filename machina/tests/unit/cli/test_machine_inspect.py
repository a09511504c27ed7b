"""
Tests for the machine record inspection CLI.
"""

import asyncio
import json

import pytest

from machina.cli.machine_inspect import describe, main
from machina.domain.model.machine import MachineRecord, StateDecodeError
from machina.infrastructure.adapters.secondary.persistence.database import (
    create_engine,
    create_session_factory,
    initialize_database,
)
from machina.infrastructure.adapters.secondary.persistence.sql_machine_record_repository import (
    SqlMachineRecordRepository,
)


@pytest.mark.unit
class TestDescribe:
    """Test record summaries."""

    def test_describe(self):
        record = MachineRecord(
            name="web",
            id="vm-1",
            provider="virtualbox",
            state={"id": "running"},
        )

        summary = describe(record)

        assert summary["name"] == "web"
        assert summary["state"]["id"] == "running"
        assert summary["box"] is None

    def test_describe_corrupt_state(self):
        record = MachineRecord(name="web", state={"id": "running", "pid": 1})

        with pytest.raises(StateDecodeError):
            describe(record)


@pytest.mark.integration
class TestMain:
    """Test the CLI entry point against a SQLite file."""

    @pytest.fixture
    def database_url(self, tmp_path, test_settings):
        url = f"sqlite+aiosqlite:///{tmp_path / 'machina.db'}"
        settings = test_settings.model_copy(update={"database_url": url})

        async def seed():
            engine = create_engine(settings)
            await initialize_database(engine)
            record = MachineRecord(resource_id="res-1", name="web", provider="docker")
            async with create_session_factory(engine)() as session:
                await SqlMachineRecordRepository(session).save("res-1", record.to_bytes())
            await engine.dispose()

        asyncio.run(seed())
        return url

    def test_prints_record(self, database_url, capsys):
        assert main(["--database-url", database_url, "res-1"]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["name"] == "web"
        assert output["provider"] == "docker"

    def test_missing_record(self, database_url):
        assert main(["--database-url", database_url, "missing"]) == 1
