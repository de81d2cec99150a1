"""Outbound variant payload.

Serializes the edited variant list into the shape the product update
endpoint expects: empty identifiers are dropped, the rest trimmed, and
every variant carries its derived ``is_rejected`` flag.
"""

from decimal import Decimal
from typing import Any, Iterable, Mapping

from variant_engine.application.rejection import decide_variant_rejection, normalize_ean
from variant_engine.domain.entities import Variant
from variant_engine.domain.value_objects import Gs1Status

_IDENTIFIER_FIELDS = ("ean_number", "ran_number")
_TRIMMED_FIELDS = ("hsn_code", "sku", "name", "customTitle")


def _json_safe(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    return value


def sanitize_variant(variant: Variant) -> dict[str, Any]:
    """Serialize a variant with cleaned identifier fields.

    Args:
        variant: Variant to serialize.

    Returns:
        Dictionary without empty EAN/RAN keys; Decimals rendered as strings.
    """
    data = {key: _json_safe(value) for key, value in variant.to_dict().items()}
    for key in _IDENTIFIER_FIELDS:
        cleaned = (data.get(key) or "").strip()
        if cleaned:
            data[key] = cleaned
        else:
            data.pop(key, None)
    for key in _TRIMMED_FIELDS:
        if isinstance(data.get(key), str):
            data[key] = data[key].strip()
    return data


def build_variant_payload(
    variants: Iterable[Variant],
    gs1_statuses: Mapping[str, Gs1Status] | None = None,
) -> list[dict[str, Any]]:
    """Build the outbound variant list.

    Args:
        variants: Variants to send.
        gs1_statuses: Latest GS1 status keyed by normalized EAN.

    Returns:
        Variant dictionaries with ``is_rejected`` set.
    """
    statuses = gs1_statuses or {}
    payload = []
    for variant in variants:
        status = statuses.get(normalize_ean(variant.ean_number), Gs1Status.NOT_CHECKED)
        data = sanitize_variant(variant)
        data["is_rejected"] = decide_variant_rejection(variant, status).is_rejected
        payload.append(data)
    return payload
