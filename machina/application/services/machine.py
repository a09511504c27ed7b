"""Machine entity and its state lifecycle.

A ``Machine`` wraps a durable ``MachineRecord`` together with the services
needed to resolve its capabilities. Every mutation goes through ``save``:

- ``set_id`` / ``set_state`` / box resolution update the record and save it
  under a per-machine lock; when the save fails the previous record value is
  restored, so an unsaved mutation is never observable.
- Resolved capabilities are cached per kind in explicit slots. Each kind has
  its own lock, so different kinds resolve concurrently while a single kind
  resolves at most once.

Usage:
    machine = Machine(record, config, project, registry=registry,
                      resolver=resolver, store=store)
    guest = await machine.guest()
    await machine.set_state(MachineState(id="running"))
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from machina.application.services.capability_registry import CapabilityRegistry, SeedContext
from machina.application.services.resource_resolver import ResourceResolver
from machina.domain.model.capability.capability import CapabilityKind, NamedCandidate
from machina.domain.model.machine.box import BoxReference
from machina.domain.model.machine.exceptions import BoxNotConfiguredError
from machina.domain.model.machine.machine_config import MachineConfig
from machina.domain.model.machine.machine_record import MachineRecord
from machina.domain.model.machine.machine_state import MachineState, decode_state, encode_state
from machina.domain.model.machine.synced_folder import SyncedFolderHandle
from machina.domain.model.machine.target import TargetDescriptor
from machina.domain.model.project.project_context import ProjectContext
from machina.domain.ports.repositories.machine_record_repository import MachineRecordRepository
from machina.domain.shared_kernel import CachedSlot

logger = logging.getLogger(__name__)


class Machine:
    """A provisionable machine within a project."""

    def __init__(
        self,
        record: MachineRecord,
        config: MachineConfig,
        project: ProjectContext,
        *,
        registry: CapabilityRegistry,
        resolver: ResourceResolver,
        store: MachineRecordRepository,
    ) -> None:
        self._record = record
        self._config = config
        self._project = project
        self._registry = registry
        self._resolver = resolver
        self._store = store

        # Serializes save-triggering mutations
        self._lock = asyncio.Lock()

        self._box: CachedSlot[BoxReference] = CachedSlot()
        if record.box is not None:
            self._box.fill(BoxReference.from_dict(record.box))

        self._capabilities: Dict[CapabilityKind, CachedSlot[NamedCandidate]] = {}
        self._capability_locks: Dict[CapabilityKind, asyncio.Lock] = {}
        self._synced_folders: CachedSlot[List[SyncedFolderHandle]] = CachedSlot()
        self._synced_folders_lock = asyncio.Lock()

    @classmethod
    async def load(
        cls,
        resource_id: str,
        config: MachineConfig,
        project: ProjectContext,
        *,
        registry: CapabilityRegistry,
        resolver: ResourceResolver,
        store: MachineRecordRepository,
    ) -> "Machine":
        """Rebuild a machine from its durable record.

        Raises:
            EntityNotFoundError: No record is stored under ``resource_id``
            RecordDecodeError: The stored payload is not a machine record
        """
        payload = await store.load(resource_id)
        record = MachineRecord.from_bytes(payload, resource_id=resource_id)
        return cls(record, config, project, registry=registry, resolver=resolver, store=store)

    # -- identity -------------------------------------------------------

    @property
    def name(self) -> str:
        return self._record.name

    @property
    def resource_id(self) -> str:
        return self._record.resource_id

    @property
    def id(self) -> str:
        """Provider-assigned identity; empty until set."""
        return self._record.id

    @property
    def uid(self) -> str:
        return self._record.uid

    @property
    def provider_name(self) -> str:
        return self._record.provider or self._config.provider or self._resolver.default_box_provider

    @property
    def project(self) -> ProjectContext:
        return self._project

    @property
    def config(self) -> MachineConfig:
        return self._config

    @property
    def record(self) -> MachineRecord:
        """A copy of the current record; mutate through the machine instead."""
        return self._record.model_copy(deep=True)

    async def set_id(self, value: str) -> None:
        """Assign the machine identity and persist it."""
        async with self._lock:
            previous = self._record.id
            self._record.id = value
            try:
                await self._save_locked()
            except BaseException:
                self._record.id = previous
                raise

    # -- state ----------------------------------------------------------

    def get_state(self) -> MachineState:
        """Decode the record's state.

        Raises:
            StateDecodeError: The stored state has fields MachineState does not know
        """
        return decode_state(self._record.state)

    async def set_state(self, state: MachineState) -> None:
        """Encode ``state`` into the record and persist it.

        Raises:
            StateEncodeError: ``state`` cannot be encoded
        """
        encoded = encode_state(state)
        async with self._lock:
            previous = self._record.state
            self._record.state = encoded
            try:
                await self._save_locked()
            except BaseException:
                self._record.state = previous
                raise

    # -- persistence ----------------------------------------------------

    async def save(self) -> None:
        """Serialize the full record and hand it to the durable store."""
        async with self._lock:
            await self._save_locked()

    async def _save_locked(self) -> None:
        logger.debug(f"saving machine to store: machine={self._record.id or self.name}")
        payload = self._record.to_bytes()
        await self._store.save(self._record.resource_id, payload)

    # -- resources ------------------------------------------------------

    async def box(self) -> BoxReference:
        """Return the machine's box, resolving and persisting it on first use."""
        if self._box.is_present:
            return self._box.get()

        async with self._lock:
            if self._box.is_present:
                return self._box.get()
            if not self._config.box:
                raise BoxNotConfiguredError(self.name)

            box = await self._resolver.resolve_box(
                self._project.boxes,
                self._config.box,
                self._config.provider,
                host=self._project.host,
            )
            previous = self._record.box
            self._record.box = box.to_dict()
            try:
                await self._save_locked()
            except BaseException:
                self._record.box = previous
                raise
            self._box.fill(box)
            return box

    def invalidate_box(self) -> None:
        """Forget the resolved box so the next ``box()`` call resolves again."""
        self._box.invalidate()

    async def synced_folders(self) -> List[SyncedFolderHandle]:
        """Return one transport handle per enabled synced folder."""
        async with self._synced_folders_lock:
            if not self._synced_folders.is_present:
                handles = await self._resolver.resolve_synced_folders(self._config.synced_folders)
                self._synced_folders.fill(handles)
            return list(self._synced_folders.get())

    # -- capabilities ---------------------------------------------------

    async def capability(self, kind: CapabilityKind) -> NamedCandidate:
        """Resolve the candidate of ``kind`` driving this machine, once."""
        kind = CapabilityKind.parse(kind)
        slot = self._capabilities.setdefault(kind, CachedSlot())
        if slot.is_present:
            return slot.get()

        lock = self._capability_locks.setdefault(kind, asyncio.Lock())
        async with lock:
            if slot.is_present:
                return slot.get()
            winner = await self._registry.resolve(
                kind,
                self.to_target(),
                owner=SeedContext(machine=self, project=self._project),
            )
            slot.fill(winner)
            return winner

    async def guest(self) -> Any:
        """Return the guest adapter plugin for this machine."""
        return (await self.capability(CapabilityKind.GUEST)).value

    def invalidate(self, kind: Optional[CapabilityKind] = None) -> None:
        """Drop cached resolutions for ``kind``, or for every kind.

        Synced folders are dropped together with the ``SYNCED_FOLDER`` kind.
        """
        if kind is None:
            for slot in self._capabilities.values():
                slot.invalidate()
            self._synced_folders.invalidate()
            return
        kind = CapabilityKind.parse(kind)
        if kind in self._capabilities:
            self._capabilities[kind].invalidate()
        if kind is CapabilityKind.SYNCED_FOLDER:
            self._synced_folders.invalidate()

    def is_resolved(self, kind: CapabilityKind) -> bool:
        slot = self._capabilities.get(CapabilityKind.parse(kind))
        return slot is not None and slot.is_present

    # -- misc -----------------------------------------------------------

    def to_target(self) -> TargetDescriptor:
        """Snapshot the machine for detection probes."""
        box_name = self._box.get().name if self._box.is_present else self._config.box
        return TargetDescriptor(
            name=self.name,
            resource_id=self.resource_id,
            project_name=self._project.name,
            machine_id=self._record.id,
            provider=self.provider_name,
            box_name=box_name,
            guest_hint=self._config.guest,
            communicator=self._config.communicator,
        )

    def inspect(self) -> str:
        return f"#<Machine: {self.name} ({self.provider_name})>"

    async def close(self) -> None:
        """Release cached plugin references."""
        self.invalidate()

    def __repr__(self) -> str:
        return self.inspect()
