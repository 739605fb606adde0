from __future__ import annotations

from tableside.application.dto.backend import RawTable
from tableside.domain.common.ids import TableId
from tableside.domain.table.entities import Table, parse_table_status

DEFAULT_TABLE_CAPACITY = 4


def to_table(raw: RawTable) -> Table:
    table_id = raw.tableid or raw.id
    return Table(
        table_id=TableId(table_id),
        name=raw.name or f"Table {table_id}",
        capacity=raw.capacity or DEFAULT_TABLE_CAPACITY,
        status=parse_table_status(raw.status),
    )
