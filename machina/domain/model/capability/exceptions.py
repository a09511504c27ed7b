"""Capability resolution exceptions.

Every error raised while resolving a capability derives from
``CapabilityError`` so callers can handle resolution failures as one class.
None of them is retryable: retrying without a changed environment or
configuration yields the same outcome.
"""

from typing import Any, Dict, List, Optional

from machina.domain.shared_kernel import DomainException


class CapabilityError(DomainException):
    """Base exception for capability resolution failures."""

    retryable = False

    def __init__(
        self,
        message: str,
        kind: Optional[str] = None,
        candidate: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.candidate = candidate
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for diagnostics output."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "kind": self.kind,
            "candidate": self.candidate,
            "details": self.details,
        }


class NoCandidatesError(CapabilityError):
    """Raised when a kind has zero registered implementations."""

    def __init__(self, kind: str):
        super().__init__(f"no {kind} plugins are registered", kind=kind)


class NoApplicableCandidateError(CapabilityError):
    """Raised when every candidate declined (or failed) detection."""

    def __init__(
        self,
        kind: str,
        candidates: List[str],
        probe_errors: Optional[Dict[str, str]] = None,
    ):
        super().__init__(
            f"failed to detect {kind} plugin for current platform",
            kind=kind,
            details={"candidates": candidates, "probe_errors": probe_errors or {}},
        )
        self.candidates = candidates
        self.probe_errors = probe_errors or {}


class SeedFailedError(CapabilityError):
    """Raised when the winning candidate could not be seeded."""

    def __init__(self, kind: str, candidate: str, reason: str):
        super().__init__(
            f"{kind} plugin {candidate} failed to seed: {reason}",
            kind=kind,
            candidate=candidate,
        )
        self.reason = reason


class SeedingUnsupportedError(CapabilityError):
    """Raised when a kind requires seeding but the winner cannot be seeded."""

    def __init__(self, kind: str, candidate: str):
        super().__init__(
            f"{kind} plugin {candidate} does not support seeder interface",
            kind=kind,
            candidate=candidate,
        )


class CandidateLookupError(CapabilityError):
    """Raised when the component source fails to produce candidates."""

    def __init__(
        self,
        message: str,
        kind: Optional[str] = None,
        candidate: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message, kind=kind, candidate=candidate)
        self.original_error = original_error


class CandidateNotFoundError(CandidateLookupError):
    """Raised when no candidate is registered under the requested name."""

    def __init__(self, kind: str, candidate: str):
        super().__init__(f"no {kind} plugin named {candidate!r}", kind=kind, candidate=candidate)


class UnknownTransportTypeError(CapabilityError):
    """Raised when a synced folder declares a transport type nobody provides."""

    def __init__(self, folder_type: str, destination: Optional[str] = None):
        super().__init__(
            f"unknown synced folder type {folder_type!r}",
            kind="synced_folder",
            candidate=folder_type,
            details={"destination": destination},
        )
        self.folder_type = folder_type
        self.destination = destination
