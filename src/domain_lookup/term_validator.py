"""
Search term validation and normalization module.

A search term is a single domain label (the part in front of the TLD).
Terms are normalized to their canonical form (stripped, lowercase, IDNA
encoded for international characters) and then checked against the label
pattern accepted by the lookup API.
"""

import re
from dataclasses import dataclass
from typing import Optional

import idna

from domain_lookup.enums import TermValidationErrorCode
from domain_lookup.exceptions import ValidationError


# 3-63 characters, letters/digits/hyphens, no hyphen at either end
LABEL_PATTERN = re.compile(r"^[a-z0-9][a-z0-9-]{1,61}[a-z0-9]$")
ALLOWED_CHARS_PATTERN = re.compile(r"^[a-z0-9-]+$")

MIN_LABEL_LENGTH = 3
MAX_LABEL_LENGTH = 63


@dataclass
class TermValidationError:
    """Structured error information for term validation failures."""

    code: TermValidationErrorCode
    message: str
    details: dict


@dataclass
class TermValidationResult:
    """Result of a term validation operation."""

    valid: bool
    canonical_term: Optional[str]
    error: Optional[TermValidationError]


class TermValidator:
    """
    Validates and normalizes search terms.

    Handles:
    - Conversion to lowercase canonical form
    - IDNA encoding for international characters
    - Rejection of dots, whitespace and other forbidden characters
    - Length and hyphen placement rules of a DNS label
    """

    def validate(self, raw_term: Optional[str]) -> TermValidationResult:
        """
        Validate and normalize a search term.

        Args:
            raw_term: The raw term as typed by the user

        Returns:
            TermValidationResult with validation status and canonical form or error
        """
        if not raw_term or not raw_term.strip():
            return self._invalid(
                TermValidationErrorCode.EMPTY_INPUT,
                "Search term is empty",
                {"raw_input": raw_term},
            )

        try:
            canonical = self.normalize_to_canonical(raw_term.strip())
        except ValidationError as e:
            return self._invalid(TermValidationErrorCode.IDNA_ERROR, e.message, e.details)

        if not ALLOWED_CHARS_PATTERN.match(canonical):
            forbidden = sorted({c for c in canonical if not ALLOWED_CHARS_PATTERN.match(c)})
            return self._invalid(
                TermValidationErrorCode.FORBIDDEN_CHARS,
                "Search term contains forbidden characters",
                {"raw_input": raw_term, "forbidden_chars": forbidden},
            )

        if not MIN_LABEL_LENGTH <= len(canonical) <= MAX_LABEL_LENGTH:
            return self._invalid(
                TermValidationErrorCode.INVALID_LENGTH,
                f"Search term must be {MIN_LABEL_LENGTH}-{MAX_LABEL_LENGTH} characters long",
                {"raw_input": raw_term, "length": len(canonical)},
            )

        if not LABEL_PATTERN.match(canonical):
            return self._invalid(
                TermValidationErrorCode.FORBIDDEN_CHARS,
                "Search term must start and end with a letter or digit",
                {"raw_input": raw_term, "canonical": canonical},
            )

        return TermValidationResult(valid=True, canonical_term=canonical, error=None)

    def validate_or_raise(self, raw_term: Optional[str]) -> str:
        """
        Validate a term and return its canonical form.

        Raises:
            ValidationError: If the term is invalid
        """
        result = self.validate(raw_term)
        if not result.valid:
            raise ValidationError(
                code=result.error.code.value,
                message=result.error.message,
                details=result.error.details,
            )
        return result.canonical_term

    def is_valid(self, raw_term: Optional[str]) -> bool:
        return self.validate(raw_term).valid

    def normalize_to_canonical(self, term: str) -> str:
        """
        Convert a term to canonical form (lowercase, IDNA-encoded).

        Args:
            term: Term to normalize

        Returns:
            Canonical form of the term

        Raises:
            ValidationError: If IDNA encoding fails
        """
        term_lower = term.lower()

        if not any(ord(c) > 127 for c in term_lower):
            return term_lower

        try:
            return idna.encode(term_lower, uts46=True).decode("ascii")
        except idna.IDNAError as e:
            raise ValidationError(
                code=TermValidationErrorCode.IDNA_ERROR.value,
                message=f"IDNA encoding failed: {e}",
                details={"term": term, "idna_error": str(e)},
            )

    @staticmethod
    def _invalid(
        code: TermValidationErrorCode, message: str, details: dict
    ) -> TermValidationResult:
        return TermValidationResult(
            valid=False,
            canonical_term=None,
            error=TermValidationError(code=code, message=message, details=details),
        )
