"""Tests for provisional rejection rules."""

from decimal import Decimal

import pytest

from variant_engine.application.rejection import (
    RejectionReason,
    decide_rejection,
    decide_variant_rejection,
    is_valid_ean,
    normalize_ean,
    validate_ean,
    validate_identifiers,
)
from variant_engine.domain.value_objects import Gs1Status

VALID_EAN = "8901234567890"


class TestEanFormat:
    """Tests for EAN normalization and format checks."""

    def test_normalize_strips_separators(self) -> None:
        """Spaces and hyphens are removed."""
        assert normalize_ean(" 8901-2345 67890 ") == VALID_EAN
        assert normalize_ean(None) == ""

    def test_valid_lengths(self) -> None:
        """8 and 13 digit EANs are valid."""
        assert validate_ean("12345678") is None
        assert validate_ean(VALID_EAN) is None
        assert validate_ean("8901-2345-67890") is None

    def test_non_digits(self) -> None:
        """Letters are rejected."""
        assert validate_ean("12345A78") == "EAN Number must contain only digits"

    def test_wrong_length(self) -> None:
        """Other lengths are rejected with the current length."""
        assert validate_ean("123456789") == "EAN Number must be 8 or 13 digits (currently 9)"

    def test_empty_is_not_a_format_error(self) -> None:
        """Empty input has no format error."""
        assert validate_ean("") is None
        assert not is_valid_ean("")


class TestDecideRejection:
    """Truth table for the rejection decision."""

    @pytest.mark.parametrize(
        "ean,ran,hsn,tax,status,rejected,reason",
        [
            ("", "RAN-1", "6109", 18, Gs1Status.NOT_CHECKED, False, RejectionReason.RAN_COMPLETE),
            ("", "RAN-1", "6109", 0, Gs1Status.NOT_CHECKED, False, RejectionReason.RAN_COMPLETE),
            ("", "RAN-1", "", 18, Gs1Status.NOT_CHECKED, True, RejectionReason.RAN_MISSING_TAX_DETAILS),
            ("", "RAN-1", "6109", None, Gs1Status.NOT_CHECKED, True, RejectionReason.RAN_MISSING_TAX_DETAILS),
            ("", "RAN-1", "6109", " ", Gs1Status.NOT_CHECKED, True, RejectionReason.RAN_MISSING_TAX_DETAILS),
            (VALID_EAN, "RAN-1", "6109", 18, Gs1Status.INVALID, False, RejectionReason.RAN_COMPLETE),
            ("abc", "RAN-1", "", None, Gs1Status.VALID, True, RejectionReason.RAN_MISSING_TAX_DETAILS),
            ("12345", "", "", None, Gs1Status.NOT_CHECKED, True, RejectionReason.EAN_FORMAT_INVALID),
            (VALID_EAN, "", "", None, Gs1Status.VALID, False, RejectionReason.GS1_VALID),
            (VALID_EAN, "", "", None, Gs1Status.INVALID, True, RejectionReason.GS1_NOT_FOUND),
            (VALID_EAN, "", "", None, Gs1Status.PENDING, False, RejectionReason.GS1_UNRESOLVED),
            (VALID_EAN, "", "", None, Gs1Status.NOT_CHECKED, False, RejectionReason.GS1_UNRESOLVED),
            ("", "", "6109", 18, Gs1Status.NOT_CHECKED, True, RejectionReason.MISSING_IDENTIFIER),
            ("  ", "  ", "", None, Gs1Status.NOT_CHECKED, True, RejectionReason.MISSING_IDENTIFIER),
        ],
    )
    def test_truth_table(self, ean, ran, hsn, tax, status, rejected, reason) -> None:
        """Each input combination maps to its documented outcome."""
        decision = decide_rejection(ean, ran, hsn, tax, status)
        assert decision.is_rejected is rejected
        assert decision.reason is reason

    def test_format_error_message(self) -> None:
        """Format rejections carry the field message."""
        decision = decide_rejection("12AB5678", "", "", None)
        assert decision.message == "EAN Number must contain only digits"

    def test_pending_is_provisional(self) -> None:
        """Unresolved lookups are provisional accepts."""
        decision = decide_rejection(VALID_EAN, "", "", None, Gs1Status.PENDING)
        assert decision.is_provisional

    def test_variant_fields(self, make_variant) -> None:
        """Decision reads the variant's identifier fields."""
        variant = make_variant(ran_number="RAN-1", hsn_code="6109", tax_percentage=Decimal("12"))
        assert not decide_variant_rejection(variant).is_rejected


class TestValidateIdentifiers:
    """Tests for save-time identifier validation."""

    def test_missing_both(self, make_variant) -> None:
        """A variant needs an EAN or a RAN."""
        errors = validate_identifiers(make_variant())
        assert errors == {"ean_number": "EAN or RAN number is required"}

    def test_ran_requires_hsn_and_tax(self, make_variant) -> None:
        """RAN without EAN requires HSN and tax."""
        errors = validate_identifiers(make_variant(ran_number="RAN-1"))
        assert errors == {
            "hsn_code": "HSN Code is required when RAN is provided",
            "tax_percentage": "Tax % is required when RAN is provided",
        }

    def test_ean_format(self, make_variant) -> None:
        """Malformed EANs are reported."""
        errors = validate_identifiers(make_variant(ean_number="123"))
        assert errors == {"ean_number": "EAN Number must be 8 or 13 digits (currently 3)"}

    def test_valid(self, make_variant) -> None:
        """Well-formed EAN passes."""
        assert validate_identifiers(make_variant(ean_number=VALID_EAN)) == {}
