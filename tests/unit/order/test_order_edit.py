from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from tableside.domain.common.ids import MenuItemId, OrderId, OrderNumber
from tableside.domain.menu.entities import MenuItem
from tableside.domain.order.edit import (
    MenuItemNotFoundError,
    OrderEdit,
    has_new_items,
    has_quantity_changes,
    reconcile_order_edit,
)
from tableside.domain.order.entities import EmptyOrderError, Order, OrderItem, OrderStatus

CATALOG = {
    "m1": MenuItem(item_id=MenuItemId("m1"), name="Masala Dosa", price=180.0),
    "m2": MenuItem(item_id=MenuItemId("m2"), name="Filter Coffee", price=40.0),
}


def _order(status: OrderStatus = OrderStatus.READY) -> Order:
    return Order(
        order_id=OrderId("o1"),
        order_number=OrderNumber("ORD1"),
        table_id=None,
        table_number="T5",
        items=[OrderItem(menu_id=MenuItemId("m1"), quantity=2, notes="less spicy", price=180.0)],
        subtotal=360.0,
        tax=0.0,
        discount=0.0,
        total=360.0,
        status=status,
        customer_name="Asha",
    )


def test_edit_from_order_seeds_quantities_and_instructions() -> None:
    edit = OrderEdit.from_order(_order())

    assert edit.quantities == {"m1": 2}
    assert edit.instructions == {"m1": "less spicy"}
    assert edit.customer_name == "Asha"


def test_quantity_at_zero_removes_item_and_instruction() -> None:
    edit = OrderEdit.from_order(_order())

    assert edit.adjust_quantity("m1", -1) == 1
    assert edit.adjust_quantity("m1", -5) == 0

    assert "m1" not in edit.quantities
    assert "m1" not in edit.instructions


def test_instruction_only_change_keeps_status() -> None:
    order = _order(OrderStatus.READY)
    edit = OrderEdit.from_order(order)
    edit.set_instruction("m1", "no onion")

    plan = reconcile_order_edit(order, edit, CATALOG)

    assert plan.status == OrderStatus.READY
    assert plan.status_reset is False
    assert plan.items[0].notes == "no onion"


def test_quantity_increase_resets_status_to_pending() -> None:
    order = _order(OrderStatus.READY)
    edit = OrderEdit.from_order(order)
    edit.set_quantity("m1", 3)

    plan = reconcile_order_edit(order, edit, CATALOG)

    assert plan.status == OrderStatus.PENDING
    assert plan.status_reset is True
    assert plan.subtotal == 540.0
    assert plan.total == 540.0


def test_new_item_resets_status_and_is_appended() -> None:
    order = _order(OrderStatus.SERVED)
    edit = OrderEdit.from_order(order)
    edit.adjust_quantity("m2", 2)
    edit.set_instruction("m2", "extra hot")

    assert has_new_items(order, edit) is True

    plan = reconcile_order_edit(order, edit, CATALOG)

    assert plan.status == OrderStatus.PENDING
    assert [(item.menu_id, item.quantity, item.notes) for item in plan.items] == [
        ("m1", 2, "less spicy"),
        ("m2", 2, "extra hot"),
    ]
    assert plan.subtotal == 440.0


def test_removing_existing_item_counts_as_quantity_change() -> None:
    order = Order(
        order_id=OrderId("o1"),
        order_number=OrderNumber("ORD1"),
        table_id=None,
        table_number="T5",
        items=[
            OrderItem(menu_id=MenuItemId("m1"), quantity=1, price=180.0),
            OrderItem(menu_id=MenuItemId("m2"), quantity=1, price=40.0),
        ],
        subtotal=220.0,
        tax=0.0,
        discount=0.0,
        total=220.0,
        status=OrderStatus.PREPARING,
    )
    edit = OrderEdit.from_order(order)
    edit.set_quantity("m2", 0)

    assert has_quantity_changes(order, edit) is True
    plan = reconcile_order_edit(order, edit, CATALOG)

    assert [item.menu_id for item in plan.items] == ["m1"]
    assert plan.status == OrderStatus.PENDING


def test_blank_instruction_falls_back_to_original_notes() -> None:
    order = _order()
    edit = OrderEdit.from_order(order)
    edit.set_instruction("m1", "")

    plan = reconcile_order_edit(order, edit, CATALOG)

    assert plan.items[0].notes == "less spicy"


def test_tax_and_discount_are_carried_into_total() -> None:
    order = Order(
        order_id=OrderId("o1"),
        order_number=OrderNumber("ORD1"),
        table_id=None,
        table_number="T5",
        items=[OrderItem(menu_id=MenuItemId("m1"), quantity=1, price=180.0)],
        subtotal=180.0,
        tax=9.0,
        discount=20.0,
        total=169.0,
        status=OrderStatus.PENDING,
    )
    edit = OrderEdit.from_order(order)
    edit.set_quantity("m1", 2)

    plan = reconcile_order_edit(order, edit, CATALOG)

    assert plan.subtotal == 360.0
    assert plan.total == 349.0


def test_edit_removing_every_item_is_rejected() -> None:
    order = _order()
    edit = OrderEdit.from_order(order)
    edit.set_quantity("m1", 0)

    with pytest.raises(EmptyOrderError):
        reconcile_order_edit(order, edit, CATALOG)


def test_unknown_menu_item_is_rejected() -> None:
    order = _order()
    edit = OrderEdit.from_order(order)
    edit.set_quantity("m9", 1)

    with pytest.raises(MenuItemNotFoundError, match="Menu item not found: m9"):
        reconcile_order_edit(order, edit, CATALOG)
