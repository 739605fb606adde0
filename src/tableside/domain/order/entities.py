from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

from tableside.domain.common.amounts import amounts_match, round_amount
from tableside.domain.common.ids import MenuItemId, OrderId, OrderNumber, TableId


class OrderStatus(str, Enum):
    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    SERVED = "served"
    CANCELLED = "cancelled"
    DONE = "done"


TERMINAL_STATUSES = frozenset({OrderStatus.DONE, OrderStatus.CANCELLED})

_KITCHEN_FLOW: dict[OrderStatus, OrderStatus] = {
    OrderStatus.PENDING: OrderStatus.PREPARING,
    OrderStatus.PREPARING: OrderStatus.READY,
    OrderStatus.READY: OrderStatus.SERVED,
}


def parse_order_status(value: str | OrderStatus) -> OrderStatus:
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(value.strip().lower())
    except ValueError as exc:
        raise InvalidOrderStatusError(f"unknown order status: {value}") from exc


def next_kitchen_status(status: OrderStatus) -> OrderStatus:
    following = _KITCHEN_FLOW.get(status)
    if following is None:
        raise OrderTransitionError(f"cannot advance order from status={status.value}")
    return following


@dataclass(frozen=True)
class OrderItem:
    menu_id: MenuItemId
    quantity: int
    notes: str = ""
    name: str = "Unknown Item"
    price: float = 0.0

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError("quantity must be >= 1")
        if self.price < 0:
            raise ValueError("price must be >= 0")

    @property
    def line_total(self) -> float:
        return round_amount(self.price * self.quantity)


@dataclass(frozen=True)
class Order:
    order_id: OrderId
    order_number: OrderNumber
    table_id: TableId | None
    table_number: str
    items: list[OrderItem]
    subtotal: float
    tax: float
    discount: float
    total: float
    status: OrderStatus
    payment_status: str = "pending"
    customer_name: str = ""
    customer_phone: str = ""
    order_date: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    completed_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.items:
            raise ValueError("order must contain at least one item")
        if not amounts_match(self.total, self.subtotal + self.tax - self.discount):
            raise ValueError("order total must equal subtotal + tax - discount")

    @property
    def is_active(self) -> bool:
        return self.status not in TERMINAL_STATUSES

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def find_item(self, menu_id: str) -> OrderItem | None:
        for item in self.items:
            if item.menu_id == menu_id:
                return item
        return None

    def with_status(self, status: OrderStatus) -> Order:
        return replace(self, status=status)


@dataclass(frozen=True)
class GuestInfo:
    name: str = ""
    whatsapp: str = ""


@dataclass(frozen=True)
class DraftItem:
    menu_id: MenuItemId
    quantity: int
    price: float = 0.0
    instruction: str = ""
    name: str = ""


@dataclass(frozen=True)
class OrderDraft:
    table_number: str
    items: list[DraftItem] = field(default_factory=list)
    table_id: TableId | None = None
    guest_info: GuestInfo | None = None
    customer_name: str = ""
    customer_phone: str = ""

    def ensure_submittable(self) -> None:
        if not self.items:
            raise EmptyOrderError("Order must have at least one item")
        for item in self.items:
            if item.quantity < 1:
                raise EmptyOrderError(f"quantity must be >= 1 for menu item {item.menu_id}")

    @property
    def resolved_customer_name(self) -> str:
        if self.guest_info is not None and self.guest_info.name:
            return self.guest_info.name
        return self.customer_name

    @property
    def resolved_customer_phone(self) -> str:
        if self.guest_info is not None and self.guest_info.whatsapp:
            return self.guest_info.whatsapp
        return self.customer_phone

    @property
    def subtotal(self) -> float:
        return round_amount(sum(item.price * item.quantity for item in self.items))


def active_orders(orders: list[Order]) -> list[Order]:
    return [order for order in orders if order.is_active]


class OrderTransitionError(Exception):
    pass


class InvalidOrderStatusError(ValueError):
    pass


class EmptyOrderError(Exception):
    pass
