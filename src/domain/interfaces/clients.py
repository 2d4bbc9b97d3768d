"""External client interfaces."""

from abc import ABC, abstractmethod
from typing import Optional

from src.domain.entities import CategoryInfo


class CategoryLookupClient(ABC):
    """
    Abstract client for the category collaborator.

    Resolves category ids to display information. Only used to enrich
    statement views; billing math never depends on it.
    """

    @abstractmethod
    async def get_category(self, category_id: Optional[str]) -> CategoryInfo:
        """
        Resolve a category for display.

        Args:
            category_id: The category's identifier, may be None

        Returns:
            The category, or a neutral fallback when unknown or unavailable
        """
        ...
