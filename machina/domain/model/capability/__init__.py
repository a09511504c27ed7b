"""Capability domain models.

- CapabilityKind: categories of pluggable behavior
- NamedCandidate: one loaded implementation of a kind
- DetectableCapability / Seeder: plugin-facing protocols
"""

from machina.domain.model.capability.capability import (
    CapabilityKind,
    DetectableCapability,
    NamedCandidate,
    Seeder,
)
from machina.domain.model.capability.exceptions import (
    CandidateLookupError,
    CandidateNotFoundError,
    CapabilityError,
    NoApplicableCandidateError,
    NoCandidatesError,
    SeedFailedError,
    SeedingUnsupportedError,
    UnknownTransportTypeError,
)

__all__ = [
    "CandidateLookupError",
    "CandidateNotFoundError",
    "CapabilityError",
    "CapabilityKind",
    "DetectableCapability",
    "NamedCandidate",
    "NoApplicableCandidateError",
    "NoCandidatesError",
    "SeedFailedError",
    "Seeder",
    "SeedingUnsupportedError",
    "UnknownTransportTypeError",
]
