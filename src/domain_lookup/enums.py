"""
Enumeration types for the domain lookup system.

These enums provide type-safe constants for TLD kinds, run states,
error codes, and logging levels throughout the system.
"""

from enum import Enum


class TldKind(Enum):
    """Classification of a top-level domain, as reported by the catalog endpoint."""

    GENERIC = "GENERIC"
    COUNTRY_CODE = "COUNTRY_CODE"


class RunState(Enum):
    """Lifecycle state of a search run."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        """True for states a run never leaves."""
        return self in (RunState.COMPLETED, RunState.CANCELLED, RunState.FAILED)


class LogLevel(Enum):
    """Logging severity levels."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


class TermValidationErrorCode(Enum):
    """Error codes for search term validation failures."""

    EMPTY_INPUT = "empty_input"
    FORBIDDEN_CHARS = "forbidden_chars"
    INVALID_LENGTH = "invalid_length"
    IDNA_ERROR = "idna_error"


class ApiErrorCode(Enum):
    """Error codes for remote API operations."""

    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    HTTP_ERROR = "http_error"
    PARSE_ERROR = "parse_error"
