from __future__ import annotations

from dataclasses import dataclass

from tableside.domain.common.ids import CategoryId, MenuItemId


@dataclass(frozen=True)
class Category:
    category_id: CategoryId
    name: str
    description: str | None = None


@dataclass(frozen=True)
class MenuItem:
    item_id: MenuItemId
    name: str
    price: float
    description: str | None = None
    category_id: CategoryId | None = None
    is_available: bool = True
    is_vegetarian: bool = False

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must be non-empty")
        if self.price < 0:
            raise ValueError("price must be >= 0")

    def matches(self, category_id: str | None = None, search: str | None = None) -> bool:
        if category_id and self.category_id != category_id:
            return False
        if search and search.strip().lower() not in self.name.lower():
            return False
        return True
