"""Box acquisition that registers boxes in the local collection.

Downloading and unpacking images belongs to the box installation pipeline;
this adapter only records where the box will live on the host.
"""

import logging
from typing import Optional

from machina.domain.model.machine.box import BoxReference
from machina.domain.model.project.project_context import HostContext
from machina.domain.ports.repositories.box_repository import BoxCollectionPort
from machina.domain.ports.services.box_acquisition_port import BoxAcquisitionPort

logger = logging.getLogger(__name__)


class CatalogBoxAcquisition(BoxAcquisitionPort):
    """Adds boxes to a box collection, idempotently."""

    def __init__(
        self,
        boxes: BoxCollectionPort,
        default_version: str = "0",
        metadata_url: Optional[str] = None,
    ) -> None:
        self._boxes = boxes
        self._default_version = default_version
        self._metadata_url = metadata_url

    async def ensure_box(
        self,
        name: str,
        provider: str,
        host: Optional[HostContext] = None,
    ) -> BoxReference:
        existing = await self._boxes.find(name, provider)
        if existing is not None:
            return existing

        directory = None
        if host is not None:
            # Box names may contain "/", which maps to a nested directory otherwise
            safe_name = name.replace("/", "-SLASH-")
            directory = str(host.boxes_path / safe_name / self._default_version / provider)

        box = BoxReference(
            name=name,
            provider=provider,
            version=self._default_version,
            directory=directory,
            metadata_url=self._metadata_url,
        )
        await self._boxes.save(box)
        logger.info(f"Registered box {name} for provider {provider}")
        return box
