from __future__ import annotations

import logging

import httpx

from tableside.application.dto.backend import (
    CategoriesEnvelope,
    MenusEnvelope,
    RawCategory,
    RawMenuItem,
)
from tableside.application.errors import (
    AuthenticationRequiredError,
    http_error_message,
    require_token,
)
from tableside.application.mappers.menu_mapper import to_category, to_menu_item
from tableside.application.ports.backend import MenuBackend
from tableside.application.ports.token_store import TokenStore
from tableside.domain.menu.entities import Category, MenuItem

logger = logging.getLogger(__name__)

_MENU_STATUSES = {"available", "unavailable"}


class MenuCatalog:
    def __init__(self, backend: MenuBackend, token_store: TokenStore) -> None:
        self._backend = backend
        self._token_store = token_store
        self._categories: list[Category] = []
        self._items: list[MenuItem] = []
        self.error: str | None = None

    @property
    def categories(self) -> list[Category]:
        return list(self._categories)

    @property
    def items(self) -> list[MenuItem]:
        return list(self._items)

    def reset(self) -> None:
        self._categories = []
        self._items = []
        self.error = None

    def as_catalog(self) -> dict[str, MenuItem]:
        return {item.item_id: item for item in self._items}

    def find(self, menu_id: str) -> MenuItem | None:
        return self.as_catalog().get(menu_id)

    def filter_items(
        self,
        category_id: str | None = None,
        search: str | None = None,
    ) -> list[MenuItem]:
        return [item for item in self._items if item.matches(category_id, search)]

    def load_categories(self) -> bool:
        try:
            token = require_token(self._token_store)
            envelope = CategoriesEnvelope.model_validate(self._backend.get_categories(token))
        except AuthenticationRequiredError as exc:
            self.error = str(exc)
            return False
        except httpx.HTTPError as exc:
            logger.warning("categories_fetch_failed", exc_info=True)
            self.error = http_error_message(exc, "Network error while loading categories")
            return False
        except ValueError:
            self.error = "Unexpected response from server"
            return False

        if not envelope.success:
            self.error = envelope.message or "Failed to load categories"
            return False

        categories: list[Category] = []
        for record in envelope.categories:
            try:
                categories.append(to_category(RawCategory.model_validate(record)))
            except ValueError:
                logger.warning("category_normalization_failed", exc_info=True)
        self._categories = categories
        self.error = None
        return True

    def load_menu(
        self,
        category_id: str | None = None,
        status: str | None = None,
        search: str | None = None,
    ) -> bool:
        if status is not None and status not in _MENU_STATUSES:
            self.error = f"invalid menu status: {status}"
            return False
        try:
            token = require_token(self._token_store)
            body = self._backend.get_menu_items(
                token,
                category_id=category_id,
                status=status,
                search=search,
            )
            envelope = MenusEnvelope.model_validate(body)
        except AuthenticationRequiredError as exc:
            self.error = str(exc)
            return False
        except httpx.HTTPError as exc:
            logger.warning("menu_fetch_failed", exc_info=True)
            self.error = http_error_message(exc, "Network error while loading menu items")
            return False
        except ValueError:
            self.error = "Unexpected response from server"
            return False

        if not envelope.success:
            self.error = envelope.message or "Failed to load menu items"
            return False

        items: list[MenuItem] = []
        for record in envelope.menus:
            try:
                items.append(to_menu_item(RawMenuItem.model_validate(record)))
            except ValueError:
                logger.warning("menu_item_normalization_failed", exc_info=True)
        self._items = items
        self.error = None
        return True
