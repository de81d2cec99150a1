"""GS1 barcode registry client.

Looks up an EAN in the GS1 product registry exposed by the catalog
backend. A lookup that finds at least one item marks the EAN valid and
its first item can prefill the variant form.
"""

from dataclasses import dataclass, field, replace
from typing import Any

import httpx
import structlog

from variant_engine.domain.entities import Variant, to_decimal
from variant_engine.domain.value_objects import Gs1Status
from variant_engine.infrastructure.config import Settings, settings

logger = structlog.get_logger()


# ============================================================================
# Response Models
# ============================================================================


@dataclass
class Gs1Product:
    """Product record returned by the GS1 registry."""

    name: str | None = None
    brand: str | None = None
    description: str | None = None
    hs_code: str | None = None
    igst: str | None = None
    mrp: str | None = None
    net_weight: str | None = None
    net_content: str | None = None
    attributes: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "Gs1Product":
        """Create from GS1 API item data."""
        measures = data.get("weights_and_measures") or {}
        mrp_entries = data.get("mrp") or []
        mrp = None
        if isinstance(mrp_entries, list) and mrp_entries:
            first = mrp_entries[0] or {}
            mrp = first.get("mrp") if isinstance(first, dict) else None
        return cls(
            name=data.get("name"),
            brand=data.get("brand"),
            description=data.get("description") or data.get("derived_description"),
            hs_code=data.get("hs_code"),
            igst=str(data["igst"]) if data.get("igst") not in (None, "") else None,
            mrp=str(mrp) if mrp not in (None, "") else None,
            net_weight=measures.get("net_weight"),
            net_content=measures.get("net_content"),
            attributes=data.get("attributes") or {},
        )

    def prefill(self, variant: Variant) -> Variant:
        """Copy registry data onto a variant, keeping fields the registry lacks.

        Args:
            variant: Variant being edited.

        Returns:
            Variant copy with registry data applied.
        """
        return replace(
            variant,
            name=self.name or variant.name,
            description=self.description or variant.description,
            weight=to_decimal(self.net_weight, default=variant.weight),
            net_qty=self.net_content or variant.net_qty,
            hsn_code=self.hs_code or variant.hsn_code,
            tax_percentage=to_decimal(self.igst, default=variant.tax_percentage),
            mrp=to_decimal(self.mrp, default=variant.mrp),
        )


@dataclass
class Gs1LookupResult:
    """Outcome of a GS1 lookup."""

    found: bool
    message: str = ""
    items: list[Gs1Product] = field(default_factory=list)

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "Gs1LookupResult":
        """Create from GS1 API response data."""
        items = [Gs1Product.from_api_response(i) for i in data.get("items") or []]
        return cls(
            found=bool(data.get("status")) and bool(items),
            message=data.get("message") or "",
            items=items,
        )

    @classmethod
    def failed(cls, message: str) -> "Gs1LookupResult":
        """Result standing in for a lookup that errored."""
        return cls(found=False, message=message)

    @property
    def status(self) -> Gs1Status:
        """Resolved GS1 status of the looked-up EAN."""
        return Gs1Status.VALID if self.found else Gs1Status.INVALID

    @property
    def product(self) -> Gs1Product | None:
        """First registry item, used for prefill."""
        return self.items[0] if self.items else None


class Gs1ClientError(Exception):
    """Error from GS1 API call."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(f"[gs1] {message}")


# ============================================================================
# GS1 HTTP Client
# ============================================================================


class Gs1Client:
    """HTTP client for the GS1 registry lookup endpoint."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        api_token: str | None = None,
        app_settings: Settings | None = None,
    ) -> None:
        """Initialize GS1 client.

        Args:
            base_url: Registry base URL (defaults from settings).
            timeout: Request timeout in seconds (defaults from settings).
            api_token: Bearer token (defaults from settings).
            app_settings: Settings to read defaults from.
        """
        source = app_settings or settings
        self.base_url = base_url or source.gs1_base_url
        self.timeout = timeout if timeout is not None else source.gs1_timeout_seconds
        self.api_token = api_token or source.gs1_api_token
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            headers = {"Content-Type": "application/json"}
            if self.api_token:
                headers["Authorization"] = f"Bearer {self.api_token}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def lookup_by_ean(self, ean: str) -> Gs1LookupResult:
        """Look up an EAN in the GS1 registry.

        Args:
            ean: Normalized EAN (8 or 13 digits).

        Returns:
            Lookup result.

        Raises:
            Gs1ClientError: On non-200 responses, malformed bodies or transport errors.
        """
        try:
            client = await self._get_client()
            response = await client.get("/cms/gs1", params={"ean": ean})

            if response.status_code != 200:
                raise Gs1ClientError(
                    f"GS1 lookup failed: {response.text}",
                    response.status_code,
                )

            try:
                result = Gs1LookupResult.from_api_response(response.json())
            except (AttributeError, TypeError, ValueError) as e:
                logger.error("Invalid GS1 response", ean=ean, error=str(e))
                raise Gs1ClientError(
                    f"Invalid GS1 response: {str(e)}",
                    response.status_code,
                ) from e

            logger.info(
                "GS1 lookup completed",
                ean=ean,
                found=result.found,
                item_count=len(result.items),
            )
            return result

        except httpx.RequestError as e:
            logger.error("GS1 API request failed", ean=ean, error=str(e))
            raise Gs1ClientError(f"Request failed: {str(e)}") from e
