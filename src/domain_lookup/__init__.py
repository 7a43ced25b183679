"""
Domain Lookup - paced, cancellable multi-TLD availability search.

This package checks a single domain label across a catalog of TLDs served
by a rate-limited lookup API, issuing one request at a time with a fixed
delay between requests and streaming results as they arrive.
"""

__version__ = "0.1.0"
__author__ = "Domain Lookup Team"

from domain_lookup.exceptions import (
    DomainLookupError,
    ValidationError,
    FetchError,
    QueryError,
)
from domain_lookup.enums import (
    TldKind,
    RunState,
    LogLevel,
    TermValidationErrorCode,
    ApiErrorCode,
)
from domain_lookup.models import (
    Tld,
    AvailabilityResult,
)
from domain_lookup.config import (
    ApiConfig,
    PacingConfig,
    LoggingConfig,
    SystemConfig,
    create_default_config,
    load_config_from_env,
    load_config_from_file,
    save_config_to_file,
)
from domain_lookup.term_validator import (
    TermValidator,
    TermValidationResult,
    TermValidationError,
)
from domain_lookup.audit_logger import (
    AuditLogger,
    LogEntry,
)
from domain_lookup.api_client import (
    DomainApiClient,
)
from domain_lookup.tld_catalog import (
    TldCatalog,
)
from domain_lookup.cancellation import (
    CancellationToken,
)
from domain_lookup.pacer import (
    Pacer,
    PaceStatus,
)
from domain_lookup.orchestrator import (
    AvailabilityOrchestrator,
    SearchRun,
)
from domain_lookup.cli import (
    main as cli_main,
    create_parser,
)

__all__ = [
    # Exceptions
    "DomainLookupError",
    "ValidationError",
    "FetchError",
    "QueryError",
    # Enums
    "TldKind",
    "RunState",
    "LogLevel",
    "TermValidationErrorCode",
    "ApiErrorCode",
    # Models
    "Tld",
    "AvailabilityResult",
    # Configuration
    "ApiConfig",
    "PacingConfig",
    "LoggingConfig",
    "SystemConfig",
    "create_default_config",
    "load_config_from_env",
    "load_config_from_file",
    "save_config_to_file",
    # Term Validator
    "TermValidator",
    "TermValidationResult",
    "TermValidationError",
    # Audit Logger
    "AuditLogger",
    "LogEntry",
    # API Client
    "DomainApiClient",
    # Catalog
    "TldCatalog",
    # Cancellation / Pacing
    "CancellationToken",
    "Pacer",
    "PaceStatus",
    # Orchestrator
    "AvailabilityOrchestrator",
    "SearchRun",
    # CLI
    "cli_main",
    "create_parser",
]
