"""Tests for the GS1 registry client."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from variant_engine.domain.entities import Variant
from variant_engine.domain.value_objects import Gs1Status, VariantId
from variant_engine.infrastructure.gs1_client import (
    Gs1Client,
    Gs1ClientError,
    Gs1LookupResult,
    Gs1Product,
)

GS1_ITEM = {
    "name": "Cotton Tee",
    "brand": "Acme",
    "description": "Crew neck tee",
    "hs_code": "6109",
    "igst": "12",
    "mrp": [{"mrp": "499.00"}],
    "weights_and_measures": {"net_weight": "0.25", "net_content": "1 N"},
}


class TestGs1LookupResult:
    """Tests for GS1 response parsing."""

    def test_found(self) -> None:
        """Status true with items is a match."""
        result = Gs1LookupResult.from_api_response({"status": True, "items": [GS1_ITEM]})
        assert result.found
        assert result.status is Gs1Status.VALID
        assert result.product.name == "Cotton Tee"
        assert result.product.mrp == "499.00"

    def test_status_true_without_items(self) -> None:
        """A positive status with no items is not a match."""
        result = Gs1LookupResult.from_api_response({"status": True, "items": []})
        assert result.status is Gs1Status.INVALID
        assert result.product is None

    def test_status_false(self) -> None:
        """A negative status is not a match."""
        result = Gs1LookupResult.from_api_response(
            {"status": False, "message": "Not found", "items": [GS1_ITEM]}
        )
        assert result.status is Gs1Status.INVALID
        assert result.message == "Not found"


class TestGs1Product:
    """Tests for GS1 prefill."""

    def test_prefill(self) -> None:
        """Registry data is copied onto the variant."""
        variant = Variant(id=VariantId("v1"), name="Draft", mrp=Decimal("1"))
        filled = Gs1Product.from_api_response(GS1_ITEM).prefill(variant)
        assert filled.name == "Cotton Tee"
        assert filled.description == "Crew neck tee"
        assert filled.hsn_code == "6109"
        assert filled.tax_percentage == Decimal("12")
        assert filled.mrp == Decimal("499.00")
        assert filled.weight == Decimal("0.25")
        assert filled.net_qty == "1 N"
        assert variant.name == "Draft"

    def test_prefill_keeps_missing_fields(self) -> None:
        """Fields absent from the registry keep their value."""
        variant = Variant(id=VariantId("v1"), name="Draft", hsn_code="1234")
        filled = Gs1Product.from_api_response({"name": ""}).prefill(variant)
        assert filled.name == "Draft"
        assert filled.hsn_code == "1234"
        assert filled.tax_percentage is None

    def test_derived_description_fallback(self) -> None:
        """The derived description is used when no description exists."""
        product = Gs1Product.from_api_response({"derived_description": "Auto text"})
        assert product.description == "Auto text"


class TestGs1Client:
    """Tests for Gs1Client."""

    @pytest.fixture
    def client(self) -> Gs1Client:
        """Create a test client."""
        return Gs1Client(base_url="http://localhost:8000", timeout=5.0, api_token="token")

    @pytest.mark.asyncio
    async def test_client_initialization(self, client) -> None:
        """Client keeps its configuration and creates HTTP lazily."""
        assert client.base_url == "http://localhost:8000"
        assert client.timeout == 5.0
        assert client._client is None

    @pytest.mark.asyncio
    async def test_lookup_success(self, client) -> None:
        """Successful lookups are parsed."""
        mock_response = MagicMock()
        mock_response.status_code = 200
        mock_response.json.return_value = {"status": True, "items": [GS1_ITEM]}

        with patch.object(client, "_get_client", new_callable=AsyncMock) as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.get = AsyncMock(return_value=mock_response)
            mock_get_client.return_value = mock_http_client

            result = await client.lookup_by_ean("8901234567890")

            assert result.status is Gs1Status.VALID
            mock_http_client.get.assert_called_once_with(
                "/cms/gs1", params={"ean": "8901234567890"}
            )

    @pytest.mark.asyncio
    async def test_lookup_http_error(self, client) -> None:
        """Non-200 responses raise with the status code."""
        mock_response = MagicMock()
        mock_response.status_code = 502
        mock_response.text = "Bad gateway"

        with patch.object(client, "_get_client", new_callable=AsyncMock) as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.get = AsyncMock(return_value=mock_response)
            mock_get_client.return_value = mock_http_client

            with pytest.raises(Gs1ClientError) as exc_info:
                await client.lookup_by_ean("12345678")

            assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [["unexpected"], {"status": True, "items": ["not-an-object"]}],
    )
    async def test_lookup_malformed_body(self, client, body) -> None:
        """Bodies of the wrong shape raise Gs1ClientError."""
        mock_response = MagicMock()
        mock_response.status_code = 200
        mock_response.json.return_value = body

        with patch.object(client, "_get_client", new_callable=AsyncMock) as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.get = AsyncMock(return_value=mock_response)
            mock_get_client.return_value = mock_http_client

            with pytest.raises(Gs1ClientError, match="Invalid GS1 response"):
                await client.lookup_by_ean("12345678")

    @pytest.mark.asyncio
    async def test_lookup_timeout(self, client) -> None:
        """Transport errors raise Gs1ClientError."""
        with patch.object(client, "_get_client", new_callable=AsyncMock) as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.get = AsyncMock(
                side_effect=httpx.TimeoutException("Connection timeout")
            )
            mock_get_client.return_value = mock_http_client

            with pytest.raises(Gs1ClientError, match="Request failed"):
                await client.lookup_by_ean("12345678")

    @pytest.mark.asyncio
    async def test_close(self, client) -> None:
        """Closing releases the HTTP client."""
        http_client = await client._get_client()
        assert http_client.headers["Authorization"] == "Bearer token"
        await client.close()
        assert client._client is None
