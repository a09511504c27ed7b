#!/usr/bin/env python3
"""
Machine record inspection CLI tool.

Prints the identity, state and box of a stored machine record.

Usage:
    python -m machina.cli.machine_inspect <resource-id>
    python -m machina.cli.machine_inspect --database-url sqlite+aiosqlite:///./machina.db <resource-id>
"""

import argparse
import asyncio
import json
import logging
import sys

from machina.configuration.config import get_settings
from machina.domain.exceptions import RepositoryError
from machina.domain.model.machine.exceptions import MachineError
from machina.domain.model.machine.machine_record import MachineRecord
from machina.domain.model.machine.machine_state import decode_state
from machina.infrastructure.adapters.secondary.persistence.database import (
    create_engine,
    create_session_factory,
)
from machina.infrastructure.adapters.secondary.persistence.sql_machine_record_repository import (
    SqlMachineRecordRepository,
)
from machina.infrastructure.telemetry import async_with_tracer, shutdown_telemetry

logger = logging.getLogger("machina.cli.machine_inspect")


def describe(record: MachineRecord) -> dict:
    """Build the printable summary of a record."""
    state = decode_state(record.state)
    return {
        "resource_id": record.resource_id,
        "name": record.name,
        "id": record.id,
        "uid": record.uid,
        "provider": record.provider,
        "state": state.model_dump(),
        "box": record.box,
    }


@async_with_tracer("machine_inspect")
async def inspect_record(database_url: str | None, resource_id: str) -> dict:
    settings = get_settings()
    if database_url:
        settings = settings.model_copy(update={"database_url": database_url})
    engine = create_engine(settings)
    try:
        async with create_session_factory(engine)() as session:
            payload = await SqlMachineRecordRepository(session).load(resource_id)
        return describe(MachineRecord.from_bytes(payload, resource_id=resource_id))
    finally:
        await engine.dispose()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Inspect a stored machine record")
    parser.add_argument("resource_id", help="Resource id of the machine record")
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(level=settings.log_level, format=settings.log_format)

    try:
        summary = asyncio.run(inspect_record(args.database_url, args.resource_id))
    except (RepositoryError, MachineError) as e:
        logger.error(str(e))
        return 1
    finally:
        shutdown_telemetry()

    print(json.dumps(summary, indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    sys.exit(main())
