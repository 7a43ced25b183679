"""
Data models for the domain lookup system.

This module defines the TLD catalog entry and the per-query result that
search runs accumulate.
"""

from dataclasses import dataclass

from .enums import TldKind


@dataclass(frozen=True)
class Tld:
    """A top-level domain together with its classification."""

    name: str  # Without leading dot, lowercase
    kind: TldKind

    @property
    def is_country_code(self) -> bool:
        return self.kind == TldKind.COUNTRY_CODE


@dataclass(frozen=True)
class AvailabilityResult:
    """Outcome of one availability query within a search run."""

    full_domain: str  # term + "." + tld.name
    available: bool
    tld: Tld
    response_time_ms: float = 0.0

    def to_dict(self) -> dict:
        return {
            "domain": self.full_domain,
            "available": self.available,
            "tld": self.tld.name,
            "type": self.tld.kind.value,
            "response_time_ms": round(self.response_time_ms, 1),
        }
