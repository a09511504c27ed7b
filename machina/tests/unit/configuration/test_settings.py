"""
Unit tests for Settings and the machine DI container.
"""

from pathlib import Path

import pytest

from machina.application.services.capability_registry import CapabilityRegistry
from machina.configuration.config import Settings, get_settings
from machina.configuration.container import MachineContainer
from machina.domain.model.capability.capability import CapabilityKind
from machina.domain.model.machine import MachineConfig, MachineState
from machina.infrastructure.adapters.secondary.persistence.sql_box_repository import (
    SqlBoxRepository,
)


@pytest.mark.unit
class TestSettings:
    """Test settings parsing."""

    def test_defaults(self, monkeypatch):
        for name in ("LOG_LEVEL", "DEFAULT_BOX_PROVIDER", "SEEDED_CAPABILITY_KINDS"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.log_level == "INFO"
        assert settings.default_box_provider == "virtualbox"
        assert settings.seeded_capability_kinds == ["guest"]
        assert settings.capability_probe_timeout_seconds == 10.0

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("DEFAULT_BOX_PROVIDER", "libvirt")
        monkeypatch.setenv("CAPABILITY_SORT_CANDIDATES", "true")

        settings = get_settings()

        assert settings.log_level == "DEBUG"
        assert settings.default_box_provider == "libvirt"
        assert settings.capability_sort_candidates is True

    def test_seeded_kinds_from_comma_separated_env(self, monkeypatch):
        monkeypatch.setenv("SEEDED_CAPABILITY_KINDS", "Guest, host")

        settings = Settings(_env_file=None)

        assert settings.seeded_capability_kinds == ["guest", "host"]

    def test_seeded_kinds_from_json_env(self, monkeypatch):
        monkeypatch.setenv("SEEDED_CAPABILITY_KINDS", '["guest", "communicator"]')

        settings = Settings(_env_file=None)

        assert settings.seeded_capability_kinds == ["guest", "communicator"]

    def test_probe_timeout_must_be_positive(self):
        with pytest.raises(ValueError):
            Settings(CAPABILITY_PROBE_TIMEOUT_SECONDS=0)


@pytest.mark.unit
class TestMachineContainer:
    """Test container wiring."""

    def test_capability_registry_uses_settings(self, test_db, test_settings):
        settings = test_settings.model_copy(
            update={"seeded_capability_kinds": ["guest", "communicator"]}
        )
        container = MachineContainer(test_db, settings=settings)

        registry = container.capability_registry()

        assert isinstance(registry, CapabilityRegistry)
        assert registry.requires_seeding(CapabilityKind.COMMUNICATOR)

    def test_repositories_share_the_unit_of_work_session(self, test_db, test_settings):
        container = MachineContainer(test_db, settings=test_settings)

        assert container.machine_record_repository()._session is test_db
        assert container.box_repository()._session is test_db
        assert container.project_context("demo", Path(".")).boxes._session is test_db

    def test_project_context(self, test_db, test_settings, tmp_path):
        container = MachineContainer(test_db, settings=test_settings)

        project = container.project_context("demo", tmp_path)

        assert project.host.boxes_path == tmp_path / "data" / "boxes"
        assert isinstance(project.boxes, SqlBoxRepository)

    async def test_new_machine_round_trip(self, test_db, test_settings, tmp_path):
        container = MachineContainer(test_db, settings=test_settings)
        project = container.project_context("demo", Path(tmp_path))
        config = MachineConfig(box="alpine", provider="docker")

        machine = container.new_machine("web", config, project, uid="1000")
        await machine.set_state(MachineState(id="running"))
        box = await machine.box()

        loaded = await container.load_machine(machine.resource_id, config, project)
        assert loaded.get_state().id == "running"
        assert loaded.uid == "1000"
        assert await loaded.box() == box
        assert box.directory == str(tmp_path / "data" / "boxes" / "alpine" / "0" / "docker")
