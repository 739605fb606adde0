from __future__ import annotations

from typing import Any, Protocol

JsonBody = dict[str, Any]


class AuthBackend(Protocol):
    def send_otp(self, email: str) -> JsonBody: ...

    def verify_otp(self, email: str, otp: str) -> JsonBody: ...

    def verify_token(self, token: str) -> JsonBody: ...

    def get_employee_profile(self, email: str, token: str) -> JsonBody: ...

    def update_employee_profile(self, data: dict[str, Any], token: str) -> JsonBody: ...


class TableBackend(Protocol):
    def get_all_tables(self, token: str) -> JsonBody: ...

    def get_tables_by_status(self, status: str, token: str) -> JsonBody: ...

    def get_table_status(self, table_id: str, token: str) -> JsonBody: ...

    def update_table_status(self, table_id: str, status: str, token: str) -> JsonBody: ...


class MenuBackend(Protocol):
    def get_categories(self, token: str) -> JsonBody: ...

    def get_menu_items(
        self,
        token: str,
        category_id: str | None = None,
        status: str | None = None,
        search: str | None = None,
    ) -> JsonBody: ...


class OrderBackend(Protocol):
    def create_order(self, token: str, order_data: dict[str, Any]) -> JsonBody: ...

    def update_order(self, token: str, order_data: dict[str, Any]) -> JsonBody: ...

    def get_orders(
        self,
        token: str,
        date: str | None = None,
        status: str | None = None,
    ) -> JsonBody: ...


class RestaurantBackend(AuthBackend, TableBackend, MenuBackend, OrderBackend, Protocol):
    pass
