"""
Exceptions for the safe-hash package.
"""
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Mismatch


class SafeHashError(Exception):
    """Base exception for all safe-hash errors."""
    pass


class EncodingError(SafeHashError):
    """Raised when a value cannot be ABI-encoded for its declared type."""
    pass


class DecodingError(SafeHashError):
    """Raised when hex, ABI or typed-data input is malformed."""
    pass


class VersionUnsupportedError(SafeHashError):
    """Raised when the Safe contract version is below the supported minimum."""
    pass


class UnsupportedChainError(SafeHashError, ValueError):
    """Raised when a chain name or id is not in the registry."""
    pass


class LookupUnavailableError(SafeHashError):
    """
    Raised when a remote lookup (Safe API, signature directory, contract
    verification) fails or returns no usable data.

    Callers are expected to fall back to locally supplied values.
    """
    pass


class MismatchError(SafeHashError):
    """Raised when locally supplied values disagree with a fetched record."""

    def __init__(self, mismatches: List["Mismatch"]):
        self.mismatches = list(mismatches)
        fields = ", ".join(m.field for m in self.mismatches)
        super().__init__(f"Mismatched fields: {fields}")
