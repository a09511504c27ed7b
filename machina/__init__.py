"""machina - capability resolution and lifecycle for provisioned machines."""

__version__ = "0.1.0"
