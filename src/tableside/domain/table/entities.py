from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from tableside.domain.common.amounts import round_amount
from tableside.domain.common.ids import TableId
from tableside.domain.order.entities import Order


class TableStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    RESERVED = "reserved"


def parse_table_status(value: str | TableStatus | None) -> TableStatus:
    if isinstance(value, TableStatus):
        return value
    if not value:
        return TableStatus.AVAILABLE
    try:
        return TableStatus(value.strip().lower())
    except ValueError as exc:
        raise ValueError(f"unknown table status: {value}") from exc


@dataclass(frozen=True)
class Table:
    table_id: TableId
    name: str
    capacity: int
    status: TableStatus

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must be non-empty")
        if self.capacity < 1:
            raise ValueError("capacity must be >= 1")

    def ensure_selectable(self) -> None:
        if self.status != TableStatus.AVAILABLE:
            raise TableNotAvailableError(self)


def orders_for_table(table: Table, orders: list[Order]) -> list[Order]:
    return [order for order in orders if order.table_number == table.name and order.is_active]


def derive_table_status(table: Table, orders: list[Order]) -> TableStatus:
    if orders_for_table(table, orders):
        return TableStatus.OCCUPIED
    return table.status


def table_order_total(table: Table, orders: list[Order]) -> float:
    return round_amount(sum(order.total for order in orders_for_table(table, orders)))


def dedupe_tables(tables: list[Table]) -> list[Table]:
    seen: set[str] = set()
    unique: list[Table] = []
    for table in tables:
        if table.name in seen:
            continue
        seen.add(table.name)
        unique.append(table)
    return unique


class TableNotAvailableError(Exception):
    def __init__(self, table: Table) -> None:
        super().__init__(
            f"{table.name} is currently {table.status.value} and cannot take a new order"
        )
        self.table = table
