"""Category display information."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CategoryInfo:
    name: str
    color: str
    icon: str


UNCATEGORIZED = CategoryInfo(name="Sin categoría", color="#64748b", icon="tag")
