"""
Exception classes for the domain lookup system.

All exceptions inherit from DomainLookupError and provide structured
error information with codes, messages, and optional details.
"""

from typing import Optional


class DomainLookupError(Exception):
    """Base exception for all domain lookup errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(DomainLookupError):
    """Raised when a search term fails validation."""

    pass


class FetchError(DomainLookupError):
    """Raised when the TLD catalog cannot be loaded."""

    pass


class QueryError(DomainLookupError):
    """Raised when a single availability query fails (network, non-2xx, timeout, bad body)."""

    pass
