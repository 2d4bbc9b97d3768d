"""External API client implementations."""

from .category_client import HttpCategoryClient

__all__ = [
    "HttpCategoryClient",
]
