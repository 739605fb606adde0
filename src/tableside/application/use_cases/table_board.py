from __future__ import annotations

import logging

import httpx

from tableside.application.dto.backend import Envelope, RawTable, TablesEnvelope
from tableside.application.errors import (
    AuthenticationRequiredError,
    http_error_message,
    require_token,
)
from tableside.application.mappers.table_mapper import to_table
from tableside.application.order_store import OrderStore
from tableside.application.ports.backend import TableBackend
from tableside.application.ports.token_store import TokenStore
from tableside.domain.order.entities import Order
from tableside.domain.table.entities import (
    Table,
    TableNotAvailableError,
    TableStatus,
    dedupe_tables,
    derive_table_status,
    orders_for_table,
    parse_table_status,
    table_order_total,
)

logger = logging.getLogger(__name__)


class TableBoard:
    """Tables as staff see them: backend tables joined with the live orders."""

    def __init__(
        self,
        backend: TableBackend,
        token_store: TokenStore,
        order_store: OrderStore,
    ) -> None:
        self._backend = backend
        self._token_store = token_store
        self._order_store = order_store
        self._tables: list[Table] = []
        self.loading = False
        self.error: str | None = None

    @property
    def tables(self) -> list[Table]:
        return list(self._tables)

    def reset(self) -> None:
        self._tables = []
        self.loading = False
        self.error = None

    def load_tables(self) -> bool:
        return self._load(status=None)

    def load_tables_by_status(self, status: TableStatus | str) -> bool:
        return self._load(status=parse_table_status(status))

    def display_status(self, table: Table) -> TableStatus:
        return derive_table_status(table, self._order_store.orders)

    def table_orders(self, table: Table) -> list[Order]:
        return orders_for_table(table, self._order_store.orders)

    def table_total(self, table: Table) -> float:
        return table_order_total(table, self._order_store.orders)

    def occupied_tables(self) -> list[Table]:
        return [
            table for table in self._tables if self.display_status(table) == TableStatus.OCCUPIED
        ]

    def select_for_new_order(self, table: Table) -> bool:
        try:
            table.ensure_selectable()
        except TableNotAvailableError as exc:
            self.error = str(exc)
            return False
        self.error = None
        return True

    def update_table_status(self, table_id: str, status: TableStatus | str) -> bool:
        try:
            token = require_token(self._token_store)
            new_status = parse_table_status(status)
            body = self._backend.update_table_status(table_id, new_status.value, token)
            envelope = Envelope.model_validate(body)
        except AuthenticationRequiredError as exc:
            self.error = str(exc)
            return False
        except httpx.HTTPError as exc:
            logger.warning("table_status_update_failed", exc_info=True)
            self.error = http_error_message(exc, "Network error while updating table status")
            return False
        except ValueError as exc:
            self.error = str(exc)
            return False

        if not envelope.success:
            self.error = envelope.message or "Failed to update table status"
            return False

        self._tables = [
            Table(
                table_id=table.table_id,
                name=table.name,
                capacity=table.capacity,
                status=new_status,
            )
            if table.table_id == table_id
            else table
            for table in self._tables
        ]
        self.error = None
        return True

    def _load(self, status: TableStatus | None) -> bool:
        self.loading = True
        try:
            token = require_token(self._token_store)
            if status is None:
                body = self._backend.get_all_tables(token)
            else:
                body = self._backend.get_tables_by_status(status.value, token)
            envelope = TablesEnvelope.model_validate(body)
        except AuthenticationRequiredError as exc:
            self.error = str(exc)
            self._tables = []
            return False
        except httpx.HTTPError as exc:
            logger.warning("tables_fetch_failed", exc_info=True)
            self.error = http_error_message(exc, "Network error while loading tables")
            self._tables = []
            return False
        except ValueError:
            self.error = "Unexpected response from server"
            self._tables = []
            return False
        finally:
            self.loading = False

        if not envelope.success:
            self.error = envelope.message or "Failed to load tables"
            self._tables = []
            return False

        tables: list[Table] = []
        for record in envelope.tables:
            try:
                tables.append(to_table(RawTable.model_validate(record)))
            except ValueError:
                logger.warning("table_normalization_failed", exc_info=True)
        self._tables = dedupe_tables(tables)
        self.error = None
        return True
