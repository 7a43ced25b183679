"""
Property-based tests for the Term Validator module.
"""

import string

from hypothesis import given, settings, assume
from hypothesis import strategies as st

from domain_lookup.enums import TermValidationErrorCode
from domain_lookup.exceptions import ValidationError
from domain_lookup.term_validator import TermValidator, LABEL_PATTERN


LABEL_CHARS = string.ascii_lowercase + string.digits


@st.composite
def valid_label_strategy(draw):
    """Generate labels of 3-63 chars that do not start or end with a hyphen."""
    first = draw(st.sampled_from(LABEL_CHARS))
    middle = draw(st.text(alphabet=LABEL_CHARS + "-", min_size=1, max_size=61))
    last = draw(st.sampled_from(LABEL_CHARS))
    return first + middle + last


class TestCanonicalFormProperty:
    """
    Property-based tests for term normalization.
    """

    @given(label=valid_label_strategy())
    @settings(max_examples=100)
    def test_valid_labels_are_accepted_as_is(self, label: str) -> None:
        """
        *For any* well-formed lowercase label, validate() SHALL accept it and
        return it unchanged as the canonical term.
        """
        result = TermValidator().validate(label)

        assert result.valid
        assert result.canonical_term == label
        assert result.error is None

    @given(label=valid_label_strategy(), padding=st.sampled_from(["", " ", "  ", "\t"]))
    @settings(max_examples=100)
    def test_case_and_surrounding_whitespace_are_ignored(self, label: str, padding: str) -> None:
        """
        *For any* valid label, upper-casing it and padding it with whitespace
        SHALL produce the same canonical term.
        """
        validator = TermValidator()

        result = validator.validate(f"{padding}{label.upper()}{padding}")

        assert result.valid
        assert result.canonical_term == label

    @given(label=valid_label_strategy())
    @settings(max_examples=50)
    def test_canonical_form_is_idempotent(self, label: str) -> None:
        validator = TermValidator()
        canonical = validator.validate_or_raise(label.upper())

        assert validator.validate_or_raise(canonical) == canonical

    def test_international_term_is_idna_encoded(self) -> None:
        result = TermValidator().validate("Bücher")

        assert result.valid
        assert result.canonical_term == "xn--bcher-kva"
        assert LABEL_PATTERN.match(result.canonical_term)


class TestRejectionProperty:
    """
    Property-based tests for rejected terms.
    """

    @given(raw=st.text(alphabet=" \t\n", max_size=5))
    @settings(max_examples=20)
    def test_blank_terms_are_empty_input(self, raw: str) -> None:
        """*For any* blank term, validate() SHALL report EMPTY_INPUT."""
        result = TermValidator().validate(raw)

        assert not result.valid
        assert result.canonical_term is None
        assert result.error.code == TermValidationErrorCode.EMPTY_INPUT

    def test_none_is_empty_input(self) -> None:
        result = TermValidator().validate(None)

        assert result.error.code == TermValidationErrorCode.EMPTY_INPUT

    @given(
        label=valid_label_strategy(),
        bad=st.sampled_from([".", "_", "/", "@", "!", " ", "*"]),
    )
    @settings(max_examples=100)
    def test_forbidden_characters_are_rejected(self, label: str, bad: str) -> None:
        """
        *For any* label with a dot, space or symbol inside it, validate() SHALL
        report FORBIDDEN_CHARS and name the offending character.
        """
        middle = len(label) // 2
        raw = label[:middle] + bad + label[middle:]

        result = TermValidator().validate(raw)

        assert not result.valid
        assert result.error.code == TermValidationErrorCode.FORBIDDEN_CHARS
        assert bad in result.error.details["forbidden_chars"]

    @given(label=st.text(alphabet=LABEL_CHARS, min_size=1, max_size=2))
    @settings(max_examples=50)
    def test_short_terms_are_rejected(self, label: str) -> None:
        result = TermValidator().validate(label)

        assert result.error.code == TermValidationErrorCode.INVALID_LENGTH

    @given(label=st.text(alphabet=LABEL_CHARS, min_size=64, max_size=80))
    @settings(max_examples=20)
    def test_long_terms_are_rejected(self, label: str) -> None:
        result = TermValidator().validate(label)

        assert result.error.code == TermValidationErrorCode.INVALID_LENGTH
        assert result.error.details["length"] == len(label)

    @given(label=valid_label_strategy(), leading=st.booleans())
    @settings(max_examples=50)
    def test_edge_hyphens_are_rejected(self, label: str, leading: bool) -> None:
        """*For any* label starting or ending with a hyphen, validate() SHALL reject it."""
        raw = f"-{label[1:]}" if leading else f"{label[:-1]}-"
        assume(len(raw) >= 3)

        result = TermValidator().validate(raw)

        assert not result.valid
        assert result.error.code == TermValidationErrorCode.FORBIDDEN_CHARS

    def test_validate_or_raise_raises_validation_error(self) -> None:
        try:
            TermValidator().validate_or_raise("foo.com")
        except ValidationError as e:
            assert e.code == TermValidationErrorCode.FORBIDDEN_CHARS.value
            assert e.details["forbidden_chars"] == ["."]
        else:
            raise AssertionError("validate_or_raise should raise for 'foo.com'")

    def test_is_valid(self) -> None:
        validator = TermValidator()

        assert validator.is_valid("example")
        assert not validator.is_valid("ex ample")
        assert not validator.is_valid("")
