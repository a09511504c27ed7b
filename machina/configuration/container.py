"""DI container for machine resolution services."""

from __future__ import annotations

from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncSession

from machina.application.services.capability_registry import CapabilityRegistry
from machina.application.services.machine import Machine
from machina.application.services.resource_resolver import ResourceResolver
from machina.configuration.config import Settings, get_settings
from machina.domain.model.machine.machine_config import MachineConfig
from machina.domain.model.machine.machine_record import MachineRecord
from machina.domain.model.project.project_context import HostContext, ProjectContext
from machina.infrastructure.adapters.secondary.box.catalog_box_acquisition import (
    CatalogBoxAcquisition,
)
from machina.infrastructure.adapters.secondary.persistence.sql_box_repository import (
    SqlBoxRepository,
)
from machina.infrastructure.adapters.secondary.persistence.sql_machine_record_repository import (
    SqlMachineRecordRepository,
)
from machina.infrastructure.plugins.component_source import (
    PluginAncestryRanker,
    PluginComponentSource,
)


class MachineContainer:
    """Container wiring machines to their collaborators.

    The component source is shared: plugins registered on it are visible to
    every registry and resolver the container builds.

    A container wraps one ``AsyncSession`` and is meant to live for one unit
    of work, like a request-scoped container. Every repository it builds
    shares that session, and a session must not be used by two tasks at
    once, so machines that save concurrently need containers of their own.
    """

    def __init__(
        self,
        db: AsyncSession,
        settings: Settings | None = None,
        component_source: PluginComponentSource | None = None,
    ) -> None:
        self._db = db
        self._settings = settings or get_settings()
        self._component_source = component_source or PluginComponentSource()

    @property
    def component_source(self) -> PluginComponentSource:
        return self._component_source

    def machine_record_repository(self) -> SqlMachineRecordRepository:
        return SqlMachineRecordRepository(self._db)

    def box_repository(self) -> SqlBoxRepository:
        return SqlBoxRepository(self._db)

    def box_acquisition(self) -> CatalogBoxAcquisition:
        return CatalogBoxAcquisition(
            self.box_repository(), default_version=self._settings.default_box_version
        )

    def capability_registry(self) -> CapabilityRegistry:
        return CapabilityRegistry(
            self._component_source,
            PluginAncestryRanker(self._component_source),
            probe_timeout_seconds=self._settings.capability_probe_timeout_seconds,
            seeded_kinds=self._settings.seeded_capability_kinds,
            sort_candidates=self._settings.capability_sort_candidates,
        )

    def resource_resolver(self) -> ResourceResolver:
        return ResourceResolver(
            self._component_source,
            self.box_acquisition(),
            default_box_provider=self._settings.default_box_provider,
            default_synced_folder_type=self._settings.default_synced_folder_type,
        )

    def host_context(self) -> HostContext:
        return HostContext(name=self._settings.host_name, data_path=self._settings.data_path)

    def project_context(self, name: str, path: Path) -> ProjectContext:
        return ProjectContext(
            name=name,
            path=path,
            host=self.host_context(),
            boxes=self.box_repository(),
        )

    def new_machine(
        self, name: str, config: MachineConfig, project: ProjectContext, uid: str = ""
    ) -> Machine:
        """Build a machine with a fresh, not yet saved record."""
        record = MachineRecord(name=name, uid=uid, provider=config.provider)
        return Machine(
            record,
            config,
            project,
            registry=self.capability_registry(),
            resolver=self.resource_resolver(),
            store=self.machine_record_repository(),
        )

    async def load_machine(
        self, resource_id: str, config: MachineConfig, project: ProjectContext
    ) -> Machine:
        return await Machine.load(
            resource_id,
            config,
            project,
            registry=self.capability_registry(),
            resolver=self.resource_resolver(),
            store=self.machine_record_repository(),
        )
