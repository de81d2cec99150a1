"""Provisional rejection of variants.

A variant needs either a GS1-registered EAN or an internal RAN backed by
an HSN code and a tax rate. RAN always takes precedence over EAN. The
decision is recomputed from the variant's identifier fields and the
latest resolved GS1 status of its normalized EAN.
"""

import re
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

from variant_engine.domain.entities import Variant
from variant_engine.domain.value_objects import Gs1Status

EAN_LENGTHS = (8, 13)

_EAN_SEPARATORS = re.compile(r"[\s-]")


# ============================================================================
# EAN Format
# ============================================================================


def normalize_ean(ean: str | None) -> str:
    """Strip whitespace and hyphens from an EAN.

    Args:
        ean: Raw EAN as typed by the user.

    Returns:
        Normalized EAN (possibly empty).
    """
    if not ean:
        return ""
    return _EAN_SEPARATORS.sub("", str(ean))


def validate_ean(ean: str | None) -> str | None:
    """Validate the format of an EAN.

    Args:
        ean: Raw EAN.

    Returns:
        Field error message, or None when the EAN is empty or well formed.
    """
    normalized = normalize_ean(ean)
    if not normalized:
        return None
    if not normalized.isdigit() or not normalized.isascii():
        return "EAN Number must contain only digits"
    if len(normalized) not in EAN_LENGTHS:
        return f"EAN Number must be 8 or 13 digits (currently {len(normalized)})"
    return None


def is_valid_ean(ean: str | None) -> bool:
    """Check if an EAN is non-empty and well formed."""
    return bool(normalize_ean(ean)) and validate_ean(ean) is None


# ============================================================================
# Rejection Decision
# ============================================================================


class RejectionReason(str, Enum):
    """Why a variant was accepted or rejected."""

    RAN_COMPLETE = "ran_complete"
    RAN_MISSING_TAX_DETAILS = "ran_missing_tax_details"
    EAN_FORMAT_INVALID = "ean_format_invalid"
    GS1_VALID = "gs1_valid"
    GS1_NOT_FOUND = "gs1_not_found"
    GS1_UNRESOLVED = "gs1_unresolved"
    MISSING_IDENTIFIER = "missing_identifier"


@dataclass(frozen=True)
class RejectionDecision:
    """Derived rejection state of a variant.

    Attributes:
        is_rejected: Whether the variant is provisionally rejected.
        reason: Rule that decided the outcome.
        message: Field-level message for format errors.
    """

    is_rejected: bool
    reason: RejectionReason
    message: str | None = None

    @property
    def is_provisional(self) -> bool:
        """Check if acceptance still waits on a GS1 lookup."""
        return self.reason is RejectionReason.GS1_UNRESOLVED


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (int, float, Decimal)):
        return False
    return not str(value).strip()


def decide_rejection(
    ean: str | None,
    ran: str | None,
    hsn: str | None,
    tax_percentage: Any,
    gs1_status: Gs1Status = Gs1Status.NOT_CHECKED,
) -> RejectionDecision:
    """Decide whether a variant is provisionally rejected.

    Args:
        ean: EAN as entered.
        ran: RAN as entered.
        hsn: HSN code.
        tax_percentage: Tax rate (number, numeric string or empty).
        gs1_status: Latest GS1 lookup status for the normalized EAN.

    Returns:
        RejectionDecision.
    """
    ran_value = (ran or "").strip()
    ean_value = (ean or "").strip()

    if ran_value:
        if _is_blank(hsn) or _is_blank(tax_percentage):
            return RejectionDecision(True, RejectionReason.RAN_MISSING_TAX_DETAILS)
        return RejectionDecision(False, RejectionReason.RAN_COMPLETE)

    if ean_value:
        message = validate_ean(ean_value)
        if message:
            return RejectionDecision(True, RejectionReason.EAN_FORMAT_INVALID, message)
        status = Gs1Status(gs1_status)
        if status is Gs1Status.VALID:
            return RejectionDecision(False, RejectionReason.GS1_VALID)
        if status is Gs1Status.INVALID:
            return RejectionDecision(True, RejectionReason.GS1_NOT_FOUND)
        return RejectionDecision(False, RejectionReason.GS1_UNRESOLVED)

    return RejectionDecision(True, RejectionReason.MISSING_IDENTIFIER)


def decide_variant_rejection(
    variant: Variant,
    gs1_status: Gs1Status = Gs1Status.NOT_CHECKED,
) -> RejectionDecision:
    """Decide rejection from a variant's identifier fields."""
    return decide_rejection(
        variant.ean_number,
        variant.ran_number,
        variant.hsn_code,
        variant.tax_percentage,
        gs1_status,
    )


# ============================================================================
# Save-time Field Validation
# ============================================================================


def validate_identifiers(variant: Variant) -> dict[str, str]:
    """Collect field errors blocking a save.

    Args:
        variant: Variant to check.

    Returns:
        Mapping of field name to error message (empty when valid).
    """
    errors: dict[str, str] = {}
    has_ean = bool(variant.ean_number and variant.ean_number.strip())
    has_ran = bool(variant.ran_number and variant.ran_number.strip())

    if not has_ean and not has_ran:
        errors["ean_number"] = "EAN or RAN number is required"
    if has_ean:
        message = validate_ean(variant.ean_number)
        if message:
            errors["ean_number"] = message
    if has_ran and not has_ean:
        if _is_blank(variant.hsn_code):
            errors["hsn_code"] = "HSN Code is required when RAN is provided"
        if _is_blank(variant.tax_percentage):
            errors["tax_percentage"] = "Tax % is required when RAN is provided"
    return errors
