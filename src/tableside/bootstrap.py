from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

import httpx

from tableside.application.order_store import OrderStore
from tableside.application.ports.token_store import TokenStore
from tableside.application.use_cases.edit_order import EditOrder
from tableside.application.use_cases.menu_catalog import MenuCatalog
from tableside.application.use_cases.session import StaffSession
from tableside.application.use_cases.table_board import TableBoard
from tableside.config import Settings, load_settings
from tableside.infrastructure.http.api_client import ApiClient
from tableside.infrastructure.observability.logging_config import configure_logging
from tableside.infrastructure.observability.otel import configure_otel
from tableside.infrastructure.storage.token_store import InMemoryTokenStore, RedisTokenStore


@dataclass
class StaffApp:
    settings: Settings
    api: ApiClient
    token_store: TokenStore
    session: StaffSession
    orders: OrderStore
    tables: TableBoard
    menu: MenuCatalog
    edit_order: EditOrder

    def close(self) -> None:
        self.api.close()


def _token_store(settings: Settings) -> TokenStore:
    if settings.redis_url:
        return RedisTokenStore(redis_url=settings.redis_url, key=settings.token_key)
    return InMemoryTokenStore()


def create_staff_app(
    settings: Settings | None = None,
    http_client: httpx.Client | None = None,
    token_store: TokenStore | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> StaffApp:
    resolved = settings or load_settings()
    configure_logging(resolved.log_level)

    api = ApiClient(
        http_client=http_client,
        base_url=resolved.api_base_url,
        timeout_seconds=resolved.http_timeout_seconds,
    )
    if resolved.enable_tracing:
        configure_otel(api.http_client)

    tokens = token_store or _token_store(resolved)
    orders = OrderStore(backend=api, token_store=tokens, sleep=sleep)
    tables = TableBoard(backend=api, token_store=tokens, order_store=orders)
    menu = MenuCatalog(backend=api, token_store=tokens)
    session = StaffSession(backend=api, token_store=tokens, scoped=[orders, tables, menu])

    return StaffApp(
        settings=resolved,
        api=api,
        token_store=tokens,
        session=session,
        orders=orders,
        tables=tables,
        menu=menu,
        edit_order=EditOrder(order_store=orders),
    )
