"""Application services for machine resolution and lifecycle."""

from machina.application.services.capability_registry import CapabilityRegistry, SeedContext
from machina.application.services.machine import Machine
from machina.application.services.resource_resolver import ResourceResolver

__all__ = ["CapabilityRegistry", "Machine", "ResourceResolver", "SeedContext"]
