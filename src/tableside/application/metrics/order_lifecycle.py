from __future__ import annotations

from collections import Counter as StatusCounter

from prometheus_client import Counter, Gauge, Histogram

from tableside.domain.order.entities import Order, OrderStatus

API_REQUESTS_TOTAL = Counter(
    "tableside_api_requests_total",
    "Total number of backend API requests.",
    ["method", "endpoint", "status_code"],
)

API_REQUEST_DURATION_SECONDS = Histogram(
    "tableside_api_request_duration_seconds",
    "Backend API request duration in seconds.",
    ["method", "endpoint"],
)

ORDER_WRITES_TOTAL = Counter(
    "tableside_order_writes_total",
    "Total number of order write operations by outcome.",
    ["operation", "outcome"],
)

ORDER_UPDATE_RETRIES_TOTAL = Counter(
    "tableside_order_update_retries_total",
    "Total number of retried full order updates.",
)

ORDER_STATUS_RESETS_TOTAL = Counter(
    "tableside_order_status_resets_total",
    "Total number of edits that reset an order to pending.",
    ["from_status"],
)

LOCAL_ORDERS = Gauge(
    "tableside_local_orders",
    "Number of orders currently held by the order store.",
    ["status"],
)


def record_api_request(method: str, endpoint: str, status_code: str, duration_seconds: float) -> None:
    API_REQUESTS_TOTAL.labels(method=method, endpoint=endpoint, status_code=status_code).inc()
    API_REQUEST_DURATION_SECONDS.labels(method=method, endpoint=endpoint).observe(duration_seconds)


def record_order_write(operation: str, outcome: str) -> None:
    ORDER_WRITES_TOTAL.labels(operation=operation, outcome=outcome).inc()


def record_update_retry() -> None:
    ORDER_UPDATE_RETRIES_TOTAL.inc()


def record_status_reset(from_status: OrderStatus) -> None:
    ORDER_STATUS_RESETS_TOTAL.labels(from_status=from_status.value).inc()


def record_local_orders(orders: list[Order]) -> None:
    counts = StatusCounter(order.status for order in orders)
    for status in OrderStatus:
        LOCAL_ORDERS.labels(status=status.value).set(counts.get(status, 0))
