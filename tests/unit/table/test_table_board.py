from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import httpx

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from tableside.application.order_store import OrderStore
from tableside.application.use_cases.table_board import TableBoard
from tableside.domain.table.entities import TableStatus
from tableside.infrastructure.storage.token_store import InMemoryTokenStore


class FakeBackend:
    def __init__(self) -> None:
        self.tables_body: dict[str, Any] | Exception = {
            "success": True,
            "tables": [
                {"_id": "a1", "tableid": "1", "name": "T1", "capacity": 2, "status": "available"},
                {"_id": "a5", "tableid": "5", "name": "T5", "capacity": 4, "status": "available"},
                {"_id": "dup", "name": "T5", "capacity": 6, "status": "reserved"},
                {"_id": "a7", "capacity": 4},
            ],
        }
        self.orders_body: dict[str, Any] = {
            "success": True,
            "orders": [
                {
                    "_id": "o1",
                    "orderid": "ORD1",
                    "tableNumber": "T5",
                    "status": "preparing",
                    "items": [{"menuid": "m1", "quantity": 2}],
                    "totalAmount": 360,
                }
            ],
        }
        self.status_calls: list[tuple[str | None, str]] = []
        self.update_body: dict[str, Any] = {"success": True}
        self.updated_statuses: list[tuple[str, str]] = []

    def get_all_tables(self, token: str) -> dict:
        self.status_calls.append((None, token))
        if isinstance(self.tables_body, Exception):
            raise self.tables_body
        return self.tables_body

    def get_tables_by_status(self, status: str, token: str) -> dict:
        self.status_calls.append((status, token))
        return self.tables_body  # type: ignore[return-value]

    def get_table_status(self, table_id: str, token: str) -> dict:
        return {"success": True}

    def update_table_status(self, table_id: str, status: str, token: str) -> dict:
        self.updated_statuses.append((table_id, status))
        return self.update_body

    def get_orders(self, token: str, date: str | None = None, status: str | None = None) -> dict:
        return self.orders_body

    def create_order(self, token: str, order_data: dict[str, Any]) -> dict:
        return {"success": False}

    def update_order(self, token: str, order_data: dict[str, Any]) -> dict:
        return {"success": False}


def _board(backend: FakeBackend, token: str | None = "tok-1") -> tuple[TableBoard, OrderStore]:
    tokens = InMemoryTokenStore(token)
    orders = OrderStore(backend=backend, token_store=tokens)
    return TableBoard(backend=backend, token_store=tokens, order_store=orders), orders


def test_load_tables_normalizes_and_dedupes_by_name() -> None:
    backend = FakeBackend()
    board, _ = _board(backend)

    assert board.load_tables() is True

    assert [(table.table_id, table.name) for table in board.tables] == [
        ("1", "T1"),
        ("5", "T5"),
        ("a7", "Table a7"),
    ]
    assert board.loading is False


def test_display_status_reflects_local_active_orders() -> None:
    backend = FakeBackend()
    board, orders = _board(backend)
    board.load_tables()
    orders.fetch_orders()

    by_name = {table.name: table for table in board.tables}

    assert board.display_status(by_name["T5"]) == TableStatus.OCCUPIED
    assert board.display_status(by_name["T1"]) == TableStatus.AVAILABLE
    assert board.occupied_tables() == [by_name["T5"]]
    assert board.table_total(by_name["T5"]) == 360
    assert [order.order_id for order in board.table_orders(by_name["T5"])] == ["o1"]


def test_load_failure_clears_tables() -> None:
    backend = FakeBackend()
    board, _ = _board(backend)
    board.load_tables()

    backend.tables_body = httpx.ConnectError("offline")
    assert board.load_tables() is False

    assert board.tables == []
    assert board.error == "Network error while loading tables"


def test_load_without_token_fails() -> None:
    backend = FakeBackend()
    board, _ = _board(backend, token=None)

    assert board.load_tables() is False
    assert board.error == "Authentication required"
    assert backend.status_calls == []


def test_load_tables_by_status_passes_filter() -> None:
    backend = FakeBackend()
    board, _ = _board(backend)

    assert board.load_tables_by_status("Reserved") is True
    assert backend.status_calls == [("reserved", "tok-1")]


def test_select_for_new_order_uses_backend_status() -> None:
    backend = FakeBackend()
    backend.tables_body = {
        "success": True,
        "tables": [{"_id": "a3", "name": "T3", "status": "reserved"}],
    }
    board, _ = _board(backend)
    board.load_tables()
    [table] = board.tables

    assert board.select_for_new_order(table) is False
    assert board.error == "T3 is currently reserved and cannot take a new order"


def test_update_table_status_patches_local_table() -> None:
    backend = FakeBackend()
    board, _ = _board(backend)
    board.load_tables()

    assert board.update_table_status("1", "occupied") is True

    assert backend.updated_statuses == [("1", "occupied")]
    assert board.tables[0].status == TableStatus.OCCUPIED


def test_update_table_status_rejected_by_backend() -> None:
    backend = FakeBackend()
    backend.update_body = {"success": False, "message": "Table has open orders"}
    board, _ = _board(backend)
    board.load_tables()

    assert board.update_table_status("1", TableStatus.RESERVED) is False

    assert board.error == "Table has open orders"
    assert board.tables[0].status == TableStatus.AVAILABLE


def test_null_capacity_falls_back_to_default() -> None:
    backend = FakeBackend()
    backend.tables_body = {
        "success": True,
        "tables": [{"_id": "a2", "tableid": "2", "name": "T2", "capacity": None, "status": None}],
    }
    board, _ = _board(backend)

    assert board.load_tables() is True

    [table] = board.tables
    assert table.capacity == 4
    assert table.status == TableStatus.AVAILABLE
