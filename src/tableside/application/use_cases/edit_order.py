from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from tableside.application.mappers.order_mapper import plan_to_update_payload
from tableside.application.metrics.order_lifecycle import record_status_reset
from tableside.application.order_store import ORDER_NOT_FOUND_MESSAGE, OrderStore
from tableside.domain.menu.entities import MenuItem
from tableside.domain.order.edit import (
    MenuItemNotFoundError,
    OrderEdit,
    OrderEditPlan,
    reconcile_order_edit,
)
from tableside.domain.order.entities import EmptyOrderError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EditOrderResult:
    success: bool
    message: str
    status_reset: bool = False
    plan: OrderEditPlan | None = None


class EditOrder:
    def __init__(self, order_store: OrderStore) -> None:
        self._order_store = order_store

    def execute(
        self,
        order_id: str,
        edit: OrderEdit,
        catalog: Mapping[str, MenuItem],
    ) -> EditOrderResult:
        order = self._order_store.get_order(order_id)
        if order is None:
            return EditOrderResult(success=False, message=ORDER_NOT_FOUND_MESSAGE)

        try:
            plan = reconcile_order_edit(order, edit, catalog)
        except (EmptyOrderError, MenuItemNotFoundError) as exc:
            return EditOrderResult(success=False, message=str(exc))

        if plan.status_reset and plan.status != order.status:
            logger.info(
                "order_status_reset",
                extra={"order_id": order.order_id},
            )
            record_status_reset(order.status)

        if not self._order_store.update_full_order(plan_to_update_payload(order, plan)):
            return EditOrderResult(
                success=False,
                message=self._order_store.error or "Failed to update order",
                status_reset=plan.status_reset,
                plan=plan,
            )

        message = "Order updated successfully!"
        if plan.status_reset:
            message = (
                "Order updated successfully! Order status reset to pending for kitchen preparation."
            )
        return EditOrderResult(
            success=True,
            message=message,
            status_reset=plan.status_reset,
            plan=plan,
        )
