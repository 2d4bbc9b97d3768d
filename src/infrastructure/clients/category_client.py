"""HTTP implementation of CategoryLookupClient."""

from typing import Dict, Optional

import httpx
import structlog

from src.core.config import settings
from src.core.metrics import record_category_lookup_failure
from src.domain.entities import UNCATEGORIZED, CategoryInfo
from src.domain.interfaces import CategoryLookupClient

logger = structlog.get_logger(__name__)


class HttpCategoryClient(CategoryLookupClient):
    """
    HTTP client for the category collaborator.

    Never raises: a missing id, an unconfigured base URL, a 404, a timeout or
    any other failure resolves to the neutral fallback category. Successful
    lookups are cached for the lifetime of the client.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
    ):
        self._base_url = base_url or settings.category_api_url
        self._timeout = timeout or settings.category_api_timeout
        self._cache: Dict[str, CategoryInfo] = {}

    async def get_category(self, category_id: Optional[str]) -> CategoryInfo:
        if not category_id or not self._base_url:
            return UNCATEGORIZED
        if category_id in self._cache:
            return self._cache[category_id]

        url = f"{self._base_url}/categories/{category_id}"
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(url)
        except httpx.TimeoutException:
            record_category_lookup_failure("timeout")
            logger.warning("category_lookup_timeout", category_id=category_id)
            return UNCATEGORIZED
        except httpx.HTTPError as e:
            record_category_lookup_failure("error")
            logger.warning("category_lookup_error", category_id=category_id, error=str(e))
            return UNCATEGORIZED

        if response.status_code == 404:
            record_category_lookup_failure("not_found")
            return UNCATEGORIZED
        if response.status_code >= 400:
            record_category_lookup_failure("error")
            logger.warning(
                "category_lookup_error",
                category_id=category_id,
                status_code=response.status_code,
            )
            return UNCATEGORIZED

        try:
            category = self._parse_category(response.json())
        except (ValueError, AttributeError):
            record_category_lookup_failure("invalid_body")
            logger.warning("category_lookup_invalid_body", category_id=category_id)
            return UNCATEGORIZED
        self._cache[category_id] = category
        return category

    def _parse_category(self, data: dict) -> CategoryInfo:
        return CategoryInfo(
            name=data.get("name") or UNCATEGORIZED.name,
            color=data.get("color") or UNCATEGORIZED.color,
            icon=data.get("icon") or UNCATEGORIZED.icon,
        )
