from __future__ import annotations

from tableside.application.dto.backend import MenuRef, RawOrder, RawOrderItem, TableRef
from tableside.application.dto.requests import (
    CreateOrderPayload,
    OrderItemPayload,
    UpdateOrderPayload,
)
from tableside.domain.common.amounts import round_amount
from tableside.domain.common.ids import MenuItemId, OrderId, OrderNumber, TableId
from tableside.domain.order.edit import OrderEditPlan
from tableside.domain.order.entities import (
    Order,
    OrderDraft,
    OrderItem,
    OrderStatus,
    parse_order_status,
)


def _to_order_item(raw: RawOrderItem) -> OrderItem:
    if isinstance(raw.menuid, MenuRef):
        menu_id = raw.menuid.id
        name = raw.menuid.name or raw.name
        price = raw.menuid.price if raw.menuid.price is not None else raw.price
    else:
        menu_id = raw.menuid
        name = raw.name
        price = raw.price

    return OrderItem(
        menu_id=MenuItemId(menu_id),
        quantity=raw.quantity,
        notes=raw.notes or "",
        name=name or "Unknown Item",
        price=price or 0.0,
    )


def _table_fields(raw: RawOrder) -> tuple[TableId | None, str]:
    if isinstance(raw.tableid, TableRef):
        return TableId(raw.tableid.id), raw.tableNumber or raw.tableid.name or ""
    table_id = TableId(raw.tableid) if raw.tableid else None
    return table_id, raw.tableNumber or ""


def to_order(raw: RawOrder) -> Order:
    table_id, table_number = _table_fields(raw)
    tax = raw.tax or 0.0
    discount = raw.discount or 0.0
    subtotal = raw.subtotal
    if subtotal is None:
        subtotal = raw.totalAmount - tax + discount

    return Order(
        order_id=OrderId(raw.id),
        order_number=OrderNumber(raw.orderid),
        table_id=table_id,
        table_number=table_number,
        items=[_to_order_item(item) for item in raw.items],
        subtotal=subtotal,
        tax=tax,
        discount=discount,
        total=raw.totalAmount,
        status=parse_order_status(raw.status),
        payment_status=raw.paymentStatus or "pending",
        customer_name=raw.customerName or "",
        customer_phone=raw.customerPhone or "",
        order_date=raw.orderDate,
        created_at=raw.createdAt,
        updated_at=raw.updatedAt,
        completed_at=raw.completedAt,
    )


def to_create_payload(draft: OrderDraft) -> CreateOrderPayload:
    return CreateOrderPayload(
        table_id=draft.table_id,
        table_number=draft.table_number,
        customer_name=draft.resolved_customer_name,
        customer_phone=draft.resolved_customer_phone,
        items=[
            OrderItemPayload(
                menuid=item.menu_id,
                notes=item.instruction,
                quantity=item.quantity,
            )
            for item in draft.items
        ],
        subtotal=draft.subtotal,
    )


def to_update_payload(order: Order, status: OrderStatus | None = None) -> UpdateOrderPayload:
    return UpdateOrderPayload(
        table_id=order.table_id,
        table_number=order.table_number,
        customer_name=order.customer_name,
        customer_phone=order.customer_phone,
        order_number=order.order_number,
        items=[
            OrderItemPayload(menuid=item.menu_id, notes=item.notes, quantity=item.quantity)
            for item in order.items
        ],
        subtotal=order.subtotal,
        tax=order.tax,
        discount=order.discount,
        total_amount=order.total,
        status=(status or order.status).value,
    )


def plan_to_update_payload(order: Order, plan: OrderEditPlan) -> UpdateOrderPayload:
    return UpdateOrderPayload(
        table_id=order.table_id,
        table_number=order.table_number,
        customer_name=plan.customer_name,
        customer_phone=plan.customer_phone,
        order_number=order.order_number,
        items=[
            OrderItemPayload(menuid=item.menu_id, notes=item.notes, quantity=item.quantity)
            for item in plan.items
        ],
        subtotal=round_amount(plan.subtotal),
        tax=plan.tax,
        discount=plan.discount,
        total_amount=plan.total,
        status=plan.status.value,
    )
