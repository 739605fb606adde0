from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from tableside.application.metrics.order_lifecycle import record_api_request
from tableside.application.ports.backend import JsonBody, RestaurantBackend
from tableside.infrastructure.http.request_context import REQUEST_ID_HEADER, outgoing_request_id

logger = logging.getLogger("tableside.api")

DEFAULT_BASE_URL = "https://elitecafe.devsomeware.com"


def _clean_params(params: dict[str, str | None] | None) -> dict[str, str] | None:
    if not params:
        return None
    cleaned = {key: value for key, value in params.items() if value}
    return cleaned or None


class ApiClient(RestaurantBackend):
    """One method per backend endpoint; each performs exactly one HTTP call.

    Non-2xx responses raise ``httpx.HTTPStatusError`` and transport problems raise
    the matching ``httpx`` exception. Both propagate unchanged to the caller.
    """

    def __init__(
        self,
        http_client: httpx.Client | None = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 10.0,
    ) -> None:
        self._client = http_client or httpx.Client(base_url=base_url, timeout=timeout_seconds)

    @property
    def http_client(self) -> httpx.Client:
        return self._client

    def close(self) -> None:
        self._client.close()

    def send_otp(self, email: str) -> JsonBody:
        return self._request("POST", "/api/auth/send-otp", json={"email": email})

    def verify_otp(self, email: str, otp: str) -> JsonBody:
        return self._request("POST", "/api/auth/verify-otp", json={"email": email, "otp": otp})

    def verify_token(self, token: str) -> JsonBody:
        return self._request("GET", "/api/auth/verify", params={"token": token})

    def get_employee_profile(self, email: str, token: str) -> JsonBody:
        return self._request("GET", "/api/auth/profile", token=token, params={"email": email})

    def update_employee_profile(self, data: dict[str, Any], token: str) -> JsonBody:
        return self._request("PUT", "/api/auth/profile", token=token, json=data)

    def get_all_tables(self, token: str) -> JsonBody:
        return self._request("GET", "/api/tables", token=token)

    def get_tables_by_status(self, status: str, token: str) -> JsonBody:
        return self._request("GET", "/api/tables", token=token, params={"status": status})

    def get_table_status(self, table_id: str, token: str) -> JsonBody:
        return self._request(
            "GET",
            f"/api/tables/{table_id}/status",
            token=token,
            endpoint="/api/tables/{id}/status",
        )

    def update_table_status(self, table_id: str, status: str, token: str) -> JsonBody:
        return self._request(
            "PUT",
            f"/api/tables/{table_id}/status",
            token=token,
            json={"status": status},
            endpoint="/api/tables/{id}/status",
        )

    def get_categories(self, token: str) -> JsonBody:
        return self._request("GET", "/api/category", token=token)

    def get_menu_items(
        self,
        token: str,
        category_id: str | None = None,
        status: str | None = None,
        search: str | None = None,
    ) -> JsonBody:
        return self._request(
            "GET",
            "/api/menu",
            token=token,
            params={"categoryid": category_id, "status": status, "search": search},
        )

    def create_order(self, token: str, order_data: dict[str, Any]) -> JsonBody:
        return self._request("POST", "/api/orders", token=token, json=order_data)

    def update_order(self, token: str, order_data: dict[str, Any]) -> JsonBody:
        return self._request("PUT", "/api/orders", token=token, json=order_data)

    def get_orders(
        self,
        token: str,
        date: str | None = None,
        status: str | None = None,
    ) -> JsonBody:
        return self._request(
            "GET",
            "/api/orders",
            token=token,
            params={"date": date, "status": status},
        )

    def _request(
        self,
        method: str,
        path: str,
        *,
        token: str | None = None,
        params: dict[str, str | None] | None = None,
        json: dict[str, Any] | None = None,
        endpoint: str | None = None,
    ) -> JsonBody:
        headers = {REQUEST_ID_HEADER: outgoing_request_id()}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        endpoint_label = endpoint or path

        started = time.perf_counter()
        try:
            response = self._client.request(
                method,
                path,
                params=_clean_params(params),
                json=json,
                headers=headers,
            )
        except httpx.HTTPError:
            duration = time.perf_counter() - started
            record_api_request(method, endpoint_label, "error", duration)
            logger.warning(
                "api_request_error",
                exc_info=True,
                extra={
                    "method": method,
                    "path": endpoint_label,
                    "duration_ms": round(duration * 1000, 2),
                },
            )
            raise

        duration = time.perf_counter() - started
        record_api_request(method, endpoint_label, str(response.status_code), duration)
        logger.info(
            "api_request_complete",
            extra={
                "method": method,
                "path": endpoint_label,
                "status_code": response.status_code,
                "duration_ms": round(duration * 1000, 2),
            },
        )
        response.raise_for_status()
        return response.json()
