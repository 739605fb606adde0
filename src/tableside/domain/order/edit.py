from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from tableside.domain.common.amounts import round_amount
from tableside.domain.common.ids import MenuItemId
from tableside.domain.menu.entities import MenuItem
from tableside.domain.order.entities import EmptyOrderError, Order, OrderStatus


class MenuItemNotFoundError(Exception):
    def __init__(self, menu_id: str) -> None:
        super().__init__(f"Menu item not found: {menu_id}. Please refresh and try again.")
        self.menu_id = menu_id


class OrderEdit:
    """Quantities, instructions and guest fields tracked while staff edit an order.

    Quantities are keyed by menu item id. An item whose quantity reaches zero is
    removed from the tracked set together with its instruction, so it is never
    submitted with quantity 0.
    """

    def __init__(
        self,
        quantities: Mapping[str, int] | None = None,
        instructions: Mapping[str, str] | None = None,
        customer_name: str = "",
        customer_phone: str = "",
    ) -> None:
        self._quantities: dict[str, int] = {}
        self._instructions: dict[str, str] = dict(instructions or {})
        self.customer_name = customer_name
        self.customer_phone = customer_phone
        for menu_id, quantity in (quantities or {}).items():
            self.set_quantity(menu_id, quantity)

    @classmethod
    def from_order(cls, order: Order) -> OrderEdit:
        return cls(
            quantities={item.menu_id: item.quantity for item in order.items},
            instructions={item.menu_id: item.notes for item in order.items},
            customer_name=order.customer_name,
            customer_phone=order.customer_phone,
        )

    @property
    def quantities(self) -> dict[str, int]:
        return dict(self._quantities)

    @property
    def instructions(self) -> dict[str, str]:
        return dict(self._instructions)

    def quantity_of(self, menu_id: str) -> int:
        return self._quantities.get(menu_id, 0)

    def instruction_of(self, menu_id: str) -> str:
        return self._instructions.get(menu_id, "")

    def set_quantity(self, menu_id: str, quantity: int) -> None:
        if quantity <= 0:
            self._quantities.pop(menu_id, None)
            self._instructions.pop(menu_id, None)
            return
        self._quantities[menu_id] = quantity

    def adjust_quantity(self, menu_id: str, delta: int) -> int:
        new_quantity = max(0, self.quantity_of(menu_id) + delta)
        self.set_quantity(menu_id, new_quantity)
        return new_quantity

    def set_instruction(self, menu_id: str, instruction: str) -> None:
        self._instructions[menu_id] = instruction


@dataclass(frozen=True)
class EditedItem:
    menu_id: MenuItemId
    quantity: int
    notes: str
    price: float


@dataclass(frozen=True)
class OrderEditPlan:
    items: list[EditedItem]
    status: OrderStatus
    status_reset: bool
    subtotal: float
    tax: float
    discount: float
    total: float
    customer_name: str
    customer_phone: str


def has_new_items(order: Order, edit: OrderEdit) -> bool:
    return any(
        order.find_item(menu_id) is None and quantity > 0
        for menu_id, quantity in edit.quantities.items()
    )


def has_quantity_changes(order: Order, edit: OrderEdit) -> bool:
    return any(edit.quantity_of(item.menu_id) != item.quantity for item in order.items)


def _edited_items(order: Order, edit: OrderEdit) -> list[tuple[str, int, str]]:
    rows: list[tuple[str, int, str]] = []
    for existing in order.items:
        quantity = edit.quantity_of(existing.menu_id)
        if quantity > 0:
            notes = edit.instruction_of(existing.menu_id) or existing.notes
            rows.append((existing.menu_id, quantity, notes))

    for menu_id, quantity in edit.quantities.items():
        if order.find_item(menu_id) is None and quantity > 0:
            rows.append((menu_id, quantity, edit.instruction_of(menu_id)))
    return rows


def reconcile_order_edit(
    order: Order,
    edit: OrderEdit,
    catalog: Mapping[str, MenuItem],
) -> OrderEditPlan:
    rows = _edited_items(order, edit)
    if not rows:
        raise EmptyOrderError("Order must have at least one item")

    status_reset = has_new_items(order, edit) or has_quantity_changes(order, edit)
    status = OrderStatus.PENDING if status_reset else order.status

    items: list[EditedItem] = []
    for menu_id, quantity, notes in rows:
        menu_item = catalog.get(menu_id)
        if menu_item is None:
            raise MenuItemNotFoundError(menu_id)
        items.append(
            EditedItem(
                menu_id=MenuItemId(menu_id),
                quantity=quantity,
                notes=notes,
                price=menu_item.price,
            )
        )

    subtotal = round_amount(sum(item.price * item.quantity for item in items))
    return OrderEditPlan(
        items=items,
        status=status,
        status_reset=status_reset,
        subtotal=subtotal,
        tax=order.tax,
        discount=order.discount,
        total=round_amount(subtotal + order.tax - order.discount),
        customer_name=edit.customer_name,
        customer_phone=edit.customer_phone,
    )
