"""Attribute catalog client.

Fetches the product type configured for a category and normalizes its
attribute schema into an AttributeCatalog.
"""

import httpx
import structlog
from pydantic import ValidationError

from variant_engine.catalog.models import AttributeCatalog, ProductTypeListResponse
from variant_engine.infrastructure.config import Settings, settings

logger = structlog.get_logger()


class CatalogClientError(Exception):
    """Error from catalog API call."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(f"[catalog] {message}")


class CatalogClient:
    """HTTP client for the product-type endpoint of the catalog backend."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        api_token: str | None = None,
        app_settings: Settings | None = None,
    ) -> None:
        """Initialize catalog client.

        Args:
            base_url: Catalog base URL (defaults from settings).
            timeout: Request timeout in seconds (defaults from settings).
            api_token: Bearer token (defaults from settings).
            app_settings: Settings to read defaults from.
        """
        source = app_settings or settings
        self.base_url = base_url or source.catalog_base_url
        self.timeout = timeout if timeout is not None else source.catalog_timeout_seconds
        self.api_token = api_token or source.catalog_api_token
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

    async def get_attributes_for_category(self, category_id: int | str) -> AttributeCatalog:
        """Get the attribute catalog of a category.

        The first product type returned for the category supplies the
        attributes; a category without one has an empty catalog.

        Args:
            category_id: Category identifier.

        Returns:
            Normalized attribute catalog.

        Raises:
            CatalogClientError: On API error or an unparseable response.
        """
        try:
            client = await self._get_client()
            response = await client.get(
                "/cms/product-types/", params={"category": category_id}
            )

            if response.status_code != 200:
                raise CatalogClientError(
                    f"Failed to get product types: {response.text}",
                    response.status_code,
                )

            parsed = ProductTypeListResponse.model_validate(response.json())
            catalog = AttributeCatalog.from_payload(parsed.attributes)
            logger.info(
                "Loaded attribute catalog",
                category_id=category_id,
                attribute_count=len(catalog),
            )
            return catalog

        except ValidationError as e:
            logger.error(
                "Catalog response invalid",
                category_id=category_id,
                error=str(e),
            )
            raise CatalogClientError(f"Invalid product type response: {str(e)}") from e
        except httpx.RequestError as e:
            logger.error(
                "Catalog API request failed",
                category_id=category_id,
                error=str(e),
            )
            raise CatalogClientError(f"Request failed: {str(e)}") from e
