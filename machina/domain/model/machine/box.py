"""Box image reference value object."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from machina.domain.shared_kernel import ValueObject


@dataclass(frozen=True, kw_only=True)
class BoxReference(ValueObject):
    """A resolved box image.

    Attributes:
        name: Box name as referenced by machine configuration (e.g. "hashicorp/bionic64")
        provider: Provider the image is built for (e.g. "virtualbox")
        version: Box version string
        directory: Local directory holding the unpacked image, if known
        metadata_url: Catalog URL the box was registered from, if any
    """

    name: str
    provider: str
    version: str = "0"
    directory: Optional[str] = None
    metadata_url: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("box name must not be empty")
        if not self.provider:
            raise ValueError("box provider must not be empty")

    def matches(self, name: str, provider: Optional[str] = None) -> bool:
        """Check whether this box satisfies a name and optional provider filter."""
        if self.name != name:
            return False
        return provider is None or self.provider == provider

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "provider": self.provider,
            "version": self.version,
            "directory": self.directory,
            "metadata_url": self.metadata_url,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BoxReference":
        """Create from dictionary."""
        return cls(
            name=data["name"],
            provider=data["provider"],
            version=data.get("version", "0"),
            directory=data.get("directory"),
            metadata_url=data.get("metadata_url"),
        )
