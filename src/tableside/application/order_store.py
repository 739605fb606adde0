from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import date as date_type

import httpx

from tableside.application.dto.backend import Envelope, OrderEnvelope, OrdersEnvelope, RawOrder
from tableside.application.dto.requests import UpdateOrderPayload
from tableside.application.errors import (
    AuthenticationRequiredError,
    http_error_message,
    require_token,
)
from tableside.application.mappers.order_mapper import to_create_payload, to_order, to_update_payload
from tableside.application.metrics.order_lifecycle import (
    record_local_orders,
    record_order_write,
    record_update_retry,
)
from tableside.application.ports.backend import OrderBackend
from tableside.application.ports.token_store import TokenStore
from tableside.domain.order.entities import (
    EmptyOrderError,
    InvalidOrderStatusError,
    Order,
    OrderDraft,
    OrderStatus,
    OrderTransitionError,
    active_orders,
    next_kitchen_status,
    parse_order_status,
)

logger = logging.getLogger(__name__)

ORDER_NOT_FOUND_MESSAGE = "Order not found"
INVALID_RESPONSE_MESSAGE = "Unexpected response from server"
UPDATE_MAX_ATTEMPTS = 3
UPDATE_BACKOFF_SECONDS = 1.0


class OrderStore:
    """Client-side cache of the backend's orders for one staff session.

    Local state changes only after the backend confirmed a write: a created order
    is prepended, a status change is applied to the cached order, and a full
    update triggers a refetch of the whole list. Every failure is reported
    through ``error``, which holds the most recent message only.
    """

    def __init__(
        self,
        backend: OrderBackend,
        token_store: TokenStore,
        sleep: Callable[[float], None] = time.sleep,
        max_update_attempts: int = UPDATE_MAX_ATTEMPTS,
        backoff_seconds: float = UPDATE_BACKOFF_SECONDS,
    ) -> None:
        self._backend = backend
        self._token_store = token_store
        self._sleep = sleep
        self._max_update_attempts = max_update_attempts
        self._backoff_seconds = backoff_seconds
        self._orders: list[Order] = []
        self.loading = False
        self.error: str | None = None

    @property
    def orders(self) -> list[Order]:
        return list(self._orders)

    def reset(self) -> None:
        self._set_orders([])
        self.loading = False
        self.error = None

    def get_order(self, order_id: str) -> Order | None:
        for order in self._orders:
            if order.order_id == order_id:
                return order
        return None

    def get_active_orders(self) -> list[Order]:
        return active_orders(self._orders)

    def fetch_orders(self) -> bool:
        return self._fetch()

    def fetch_orders_by_date(self, date: date_type | str) -> bool:
        return self._fetch(date=date)

    def fetch_orders_by_status(self, status: OrderStatus | str) -> bool:
        return self._fetch(status=status)

    def fetch_orders_by_date_and_status(
        self,
        date: date_type | str,
        status: OrderStatus | str,
    ) -> bool:
        return self._fetch(date=date, status=status)

    def add_order(self, draft: OrderDraft) -> bool:
        try:
            token = require_token(self._token_store)
            draft.ensure_submittable()
            body = self._backend.create_order(token, to_create_payload(draft).to_body())
            envelope = OrderEnvelope.model_validate(body)
            if not envelope.success or envelope.order is None:
                return self._fail("create", envelope.message or "Failed to create order")
            order = to_order(RawOrder.model_validate(envelope.order))
        except (AuthenticationRequiredError, EmptyOrderError) as exc:
            return self._fail("create", str(exc))
        except httpx.HTTPError as exc:
            logger.warning("order_create_failed", exc_info=True)
            return self._fail("create", http_error_message(exc, "Network error while creating order"))
        except ValueError:
            logger.warning("order_create_invalid_response", exc_info=True)
            return self._fail("create", INVALID_RESPONSE_MESSAGE)

        self._set_orders([order, *self._orders])
        self.error = None
        record_order_write("create", "success")
        logger.info("order_created", extra={"order_id": order.order_id})
        return True

    def update_order_status(self, order_id: str, status: OrderStatus | str) -> bool:
        try:
            token = require_token(self._token_store)
            new_status = parse_order_status(status)
            order = self.get_order(order_id)
            if order is None:
                return self._fail("status", ORDER_NOT_FOUND_MESSAGE)
            payload = to_update_payload(order, status=new_status)
            body = self._backend.update_order(token, payload.to_body())
            envelope = Envelope.model_validate(body)
        except (AuthenticationRequiredError, InvalidOrderStatusError) as exc:
            return self._fail("status", str(exc))
        except httpx.HTTPError as exc:
            logger.warning("order_status_update_failed", exc_info=True, extra={"order_id": order_id})
            return self._fail(
                "status", http_error_message(exc, "Network error while updating order status")
            )
        except ValueError:
            return self._fail("status", INVALID_RESPONSE_MESSAGE)

        if not envelope.success:
            return self._fail("status", envelope.message or "Failed to update order status")

        self._set_orders(
            [item.with_status(new_status) if item.order_id == order_id else item for item in self._orders]
        )
        self.error = None
        record_order_write("status", "success")
        logger.info("order_status_updated", extra={"order_id": order_id})
        return True

    def advance_order(self, order_id: str) -> bool:
        order = self.get_order(order_id)
        if order is None:
            return self._fail("status", ORDER_NOT_FOUND_MESSAGE)
        try:
            following = next_kitchen_status(order.status)
        except OrderTransitionError as exc:
            return self._fail("status", str(exc))
        return self.update_order_status(order_id, following)

    def update_full_order(self, payload: UpdateOrderPayload) -> bool:
        try:
            token = require_token(self._token_store)
        except AuthenticationRequiredError as exc:
            return self._fail("update", str(exc))

        last_error: httpx.HTTPError | None = None
        for attempt in range(1, self._max_update_attempts + 1):
            try:
                body = self._backend.update_order(token, payload.to_body())
            except httpx.HTTPError as exc:
                last_error = exc
                logger.warning(
                    "order_update_attempt_failed",
                    extra={"order_number": payload.order_number, "attempt": attempt},
                )
                if attempt < self._max_update_attempts:
                    record_update_retry()
                self._sleep(self._backoff_seconds * 2 ** (attempt - 1))
                continue

            try:
                envelope = Envelope.model_validate(body)
            except ValueError:
                return self._fail("update", INVALID_RESPONSE_MESSAGE)
            if not envelope.success:
                return self._fail("update", envelope.message or "Failed to update order")

            record_order_write("update", "success")
            logger.info(
                "order_updated",
                extra={"order_number": payload.order_number, "attempt": attempt},
            )
            self.fetch_orders()
            return True

        reason = http_error_message(last_error, "network error") if last_error else "network error"
        return self._fail(
            "update",
            f"Failed to update order after {self._max_update_attempts} attempts: {reason}",
        )

    def _fetch(
        self,
        date: date_type | str | None = None,
        status: OrderStatus | str | None = None,
    ) -> bool:
        self.loading = True
        try:
            token = require_token(self._token_store)
            status_value = parse_order_status(status).value if status is not None else None
            date_value = date.isoformat() if isinstance(date, date_type) else date
            body = self._backend.get_orders(token, date=date_value, status=status_value)
            envelope = OrdersEnvelope.model_validate(body)
        except (AuthenticationRequiredError, InvalidOrderStatusError) as exc:
            self.error = str(exc)
            return False
        except httpx.HTTPError as exc:
            logger.warning("orders_fetch_failed", exc_info=True)
            self.error = http_error_message(exc, "Network error while loading orders")
            return False
        except ValueError:
            self.error = INVALID_RESPONSE_MESSAGE
            return False
        finally:
            self.loading = False

        if not envelope.success:
            self.error = envelope.message or "Failed to load orders"
            return False

        self._set_orders(self._normalize_all(envelope.orders))
        self.error = None
        return True

    def _normalize_all(self, records: list[dict]) -> list[Order]:
        orders: list[Order] = []
        for record in records:
            try:
                orders.append(to_order(RawOrder.model_validate(record)))
            except ValueError:
                logger.warning(
                    "order_normalization_failed",
                    exc_info=True,
                    extra={"order_id": record.get("_id")},
                )
        return orders

    def _set_orders(self, orders: list[Order]) -> None:
        self._orders = orders
        record_local_orders(orders)

    def _fail(self, operation: str, message: str) -> bool:
        self.error = message
        record_order_write(operation, "failure")
        return False
