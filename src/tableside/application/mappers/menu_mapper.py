from __future__ import annotations

from tableside.application.dto.backend import RawCategory, RawMenuItem
from tableside.domain.common.ids import CategoryId, MenuItemId
from tableside.domain.menu.entities import Category, MenuItem


def to_category(raw: RawCategory) -> Category:
    return Category(
        category_id=CategoryId(raw.id),
        name=raw.name,
        description=raw.description,
    )


def to_menu_item(raw: RawMenuItem) -> MenuItem:
    if isinstance(raw.categoryid, RawCategory):
        category_id: CategoryId | None = CategoryId(raw.categoryid.id)
    elif raw.categoryid:
        category_id = CategoryId(raw.categoryid)
    else:
        category_id = None

    return MenuItem(
        item_id=MenuItemId(raw.id),
        name=raw.name,
        price=raw.price,
        description=raw.description,
        category_id=category_id,
        is_available=(raw.status or "available").lower() == "available",
        is_vegetarian=raw.isVegetarian,
    )
