"""Resource Resolver.

Resolves the concrete resources a machine declares by name or type:
- Box images: looked up in the box collection, acquired when missing
- Synced folders: one transport instance per declared folder, selected by
  the folder's declared type (a direct lookup, no detection)
"""

import logging
from collections.abc import Sequence
from typing import List, Optional

from machina.domain.model.capability.capability import CapabilityKind
from machina.domain.model.capability.exceptions import (
    CandidateNotFoundError,
    UnknownTransportTypeError,
)
from machina.domain.model.machine.box import BoxReference
from machina.domain.model.machine.synced_folder import SyncedFolderHandle, SyncedFolderSpec
from machina.domain.model.project.project_context import HostContext
from machina.domain.ports.repositories.box_repository import BoxCollectionPort
from machina.domain.ports.services.box_acquisition_port import BoxAcquisitionPort
from machina.domain.ports.services.component_source_port import ComponentSourcePort
from machina.infrastructure.telemetry import async_with_tracer

logger = logging.getLogger(__name__)

DEFAULT_BOX_PROVIDER = "virtualbox"
DEFAULT_SYNCED_FOLDER_TYPE = "virtualbox"


class ResourceResolver:
    """Resolves box images and synced-folder transports for machines.

    The resolver never touches machine records; persisting a resolved box is
    the owning machine's responsibility.
    """

    def __init__(
        self,
        component_source: ComponentSourcePort,
        box_acquisition: BoxAcquisitionPort,
        default_box_provider: str = DEFAULT_BOX_PROVIDER,
        default_synced_folder_type: str = DEFAULT_SYNCED_FOLDER_TYPE,
    ) -> None:
        """Initialize the resolver.

        Args:
            component_source: Source of synced-folder transport plugins
            box_acquisition: Collaborator that adds missing boxes
            default_box_provider: Provider used when configuration pins none
            default_synced_folder_type: Transport used for folders without a type
        """
        if not default_box_provider:
            raise ValueError("default_box_provider must not be empty")
        if not default_synced_folder_type:
            raise ValueError("default_synced_folder_type must not be empty")
        self._source = component_source
        self._acquisition = box_acquisition
        self._default_box_provider = default_box_provider
        self._default_synced_folder_type = default_synced_folder_type

    @property
    def default_box_provider(self) -> str:
        return self._default_box_provider

    @async_with_tracer("resource_resolver")
    async def resolve_box(
        self,
        boxes: BoxCollectionPort,
        name_hint: str,
        provider_hint: Optional[str] = None,
        host: Optional[HostContext] = None,
    ) -> BoxReference:
        """Find the box named ``name_hint``, acquiring it when unknown.

        The provider hint is best-effort during lookup: a box of the same
        name for another provider still counts as existing.

        Args:
            boxes: Box collection to search
            name_hint: Box name from machine configuration
            provider_hint: Provider pinned by configuration, if any
            host: Host the box is installed into when acquired

        Returns:
            The resolved box reference
        """
        box = await boxes.find(name_hint, provider_hint)
        if box is None and provider_hint is not None:
            box = await boxes.find(name_hint)
        if box is not None:
            logger.debug(f"Found box {box.name} ({box.provider}, {box.version})")
            return box

        provider = provider_hint or self._default_box_provider
        logger.info(f"Box {name_hint} not found, adding it for provider {provider}")
        return await self._acquisition.ensure_box(name_hint, provider, host)

    @async_with_tracer("resource_resolver")
    async def resolve_synced_folders(
        self, specs: Sequence[SyncedFolderSpec]
    ) -> List[SyncedFolderHandle]:
        """Resolve a transport for every enabled synced folder.

        All-or-nothing: an unknown transport type aborts the whole batch.

        Args:
            specs: Declared folders, in declaration order

        Returns:
            One handle per enabled folder, each with its own transport instance

        Raises:
            UnknownTransportTypeError: A folder declares a type nobody provides
        """
        handles: List[SyncedFolderHandle] = []
        for spec in specs:
            if spec.disabled:
                logger.debug(f"Skipping disabled synced folder {spec.destination}")
                continue
            folder_type = spec.type or self._default_synced_folder_type
            try:
                candidate = await self._source.get(CapabilityKind.SYNCED_FOLDER, folder_type)
            except CandidateNotFoundError as e:
                raise UnknownTransportTypeError(folder_type, spec.destination) from e
            handles.append(
                SyncedFolderHandle(spec=spec, transport_type=folder_type, transport=candidate.value)
            )
        return handles
