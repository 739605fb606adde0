from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator

import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from tableside.bootstrap import StaffApp, create_staff_app
from tableside.config import Settings
from tableside.infrastructure.storage.token_store import InMemoryTokenStore

STAFF_EMAIL = "cook@cafe.in"
VALID_OTP = "123456"
VALID_TOKEN = "tok-staff"


@dataclass
class BackendState:
    tables: list[dict[str, Any]] = field(default_factory=list)
    categories: list[dict[str, Any]] = field(default_factory=list)
    menus: list[dict[str, Any]] = field(default_factory=list)
    orders: list[dict[str, Any]] = field(default_factory=list)
    fail_next_updates: int = 0
    request_ids: list[str] = field(default_factory=list)
    update_bodies: list[dict[str, Any]] = field(default_factory=list)
    next_order: int = 1


def _seed(state: BackendState) -> None:
    state.tables = [
        {"_id": "t1", "tableid": "1", "name": "T1", "capacity": 2, "status": "available"},
        {"_id": "t5", "tableid": "5", "name": "T5", "capacity": 4, "status": "available"},
        {"_id": "t9", "tableid": "9", "name": "T9", "capacity": 6, "status": "reserved"},
    ]
    state.categories = [{"_id": "c1", "name": "South Indian"}, {"_id": "c2", "name": "Beverages"}]
    state.menus = [
        {"_id": "m1", "name": "Masala Dosa", "price": 180, "categoryid": "c1", "status": "available"},
        {"_id": "m2", "name": "Filter Coffee", "price": 40, "categoryid": "c2", "status": "available"},
    ]
    state.orders = [
        {
            "_id": "o1",
            "orderid": "ORD1",
            "tableNumber": "T5",
            "status": "ready",
            "items": [{"menuid": {"_id": "m1", "name": "Masala Dosa", "price": 180}, "quantity": 2}],
            "totalAmount": 360,
            "orderDate": "2024-03-09T12:00:00Z",
        }
    ]


def _unauthorized() -> JSONResponse:
    return JSONResponse({"success": False, "message": "Unauthorized"}, status_code=401)


def _authorized(request: Request) -> bool:
    return request.headers.get("Authorization") == f"Bearer {VALID_TOKEN}"


def _menu_ref(state: BackendState, menu_id: str) -> dict[str, Any]:
    for menu in state.menus:
        if menu["_id"] == menu_id:
            return {"_id": menu_id, "name": menu["name"], "price": menu["price"]}
    return {"_id": menu_id}


def build_backend(state: BackendState) -> FastAPI:
    app = FastAPI()

    @app.middleware("http")
    async def capture_request_id(request: Request, call_next):  # type: ignore[no-untyped-def]
        request_id = request.headers.get("X-Request-Id")
        if request_id:
            state.request_ids.append(request_id)
        return await call_next(request)

    @app.post("/api/auth/send-otp")
    async def send_otp(request: Request) -> JSONResponse:
        body = await request.json()
        if body.get("email") != STAFF_EMAIL:
            return JSONResponse({"success": False})
        return JSONResponse({"success": True, "message": "OTP sent to your email"})

    @app.post("/api/auth/verify-otp")
    async def verify_otp(request: Request) -> JSONResponse:
        body = await request.json()
        if body.get("email") != STAFF_EMAIL or body.get("otp") != VALID_OTP:
            return JSONResponse({"success": False, "message": "Invalid OTP"})
        return JSONResponse({"success": True, "message": "Login successful", "token": VALID_TOKEN})

    @app.get("/api/auth/verify")
    async def verify_token(token: str = "") -> JSONResponse:
        if token != VALID_TOKEN:
            return JSONResponse({"success": False, "message": "Invalid token"})
        return JSONResponse({"success": True, "data": {"email": STAFF_EMAIL}})

    @app.get("/api/auth/profile")
    async def profile(request: Request, email: str = "") -> JSONResponse:
        if not _authorized(request):
            return _unauthorized()
        return JSONResponse(
            {
                "success": True,
                "data": {"email": email, "name": "Ravi", "role": "chef", "employeeid": "E7"},
            }
        )

    @app.get("/api/tables")
    async def tables(request: Request, status: str | None = None) -> JSONResponse:
        if not _authorized(request):
            return _unauthorized()
        rows = [table for table in state.tables if status is None or table["status"] == status]
        return JSONResponse({"success": True, "tables": rows})

    @app.put("/api/tables/{table_id}/status")
    async def table_status(table_id: str, request: Request) -> JSONResponse:
        if not _authorized(request):
            return _unauthorized()
        body = await request.json()
        for table in state.tables:
            if table["tableid"] == table_id:
                table["status"] = body["status"]
                return JSONResponse({"success": True})
        return JSONResponse({"success": False, "message": "Table not found"}, status_code=404)

    @app.get("/api/category")
    async def categories(request: Request) -> JSONResponse:
        if not _authorized(request):
            return _unauthorized()
        return JSONResponse({"success": True, "categories": state.categories})

    @app.get("/api/menu")
    async def menu(request: Request, categoryid: str | None = None) -> JSONResponse:
        if not _authorized(request):
            return _unauthorized()
        rows = [item for item in state.menus if categoryid is None or item["categoryid"] == categoryid]
        return JSONResponse({"success": True, "menus": rows})

    @app.get("/api/orders")
    async def list_orders(request: Request, status: str | None = None) -> JSONResponse:
        if not _authorized(request):
            return _unauthorized()
        rows = [order for order in state.orders if status is None or order["status"] == status]
        return JSONResponse({"success": True, "orders": rows})

    @app.post("/api/orders")
    async def create_order(request: Request) -> JSONResponse:
        if not _authorized(request):
            return _unauthorized()
        body = await request.json()
        state.next_order += 1
        order = {
            "_id": f"o{state.next_order}",
            "orderid": f"ORD{state.next_order}",
            "tableid": body.get("tableid"),
            "tableNumber": body["tableNumber"],
            "customerName": body.get("customerName", ""),
            "customerPhone": body.get("customerPhone", ""),
            "status": "pending",
            "items": [
                {
                    "menuid": _menu_ref(state, item["menuid"]),
                    "quantity": item["quantity"],
                    "notes": item.get("notes", ""),
                }
                for item in body["items"]
            ],
            "subtotal": body["subtotal"],
            "totalAmount": body["subtotal"],
        }
        state.orders.insert(0, order)
        return JSONResponse({"success": True, "order": order}, status_code=201)

    @app.put("/api/orders")
    async def update_order(request: Request) -> JSONResponse:
        if not _authorized(request):
            return _unauthorized()
        if state.fail_next_updates > 0:
            state.fail_next_updates -= 1
            return JSONResponse({"success": False, "message": "Service unavailable"}, status_code=503)
        body = await request.json()
        state.update_bodies.append(body)
        for order in state.orders:
            if order["orderid"] == body["orderid"]:
                order.update(
                    status=body["status"],
                    subtotal=body["subtotal"],
                    tax=body.get("tax", 0),
                    discount=body.get("discount", 0),
                    totalAmount=body["totalAmount"],
                    customerName=body.get("customerName", ""),
                    items=[
                        {
                            "menuid": _menu_ref(state, item["menuid"]),
                            "quantity": item["quantity"],
                            "notes": item.get("notes", ""),
                        }
                        for item in body["items"]
                    ],
                )
                return JSONResponse({"success": True, "message": "Order updated"})
        return JSONResponse({"success": False, "message": "Order not found"})

    return app


@pytest.fixture
def backend_state() -> BackendState:
    state = BackendState()
    _seed(state)
    return state


@pytest.fixture
def http_client(backend_state: BackendState) -> Iterator[TestClient]:
    with TestClient(build_backend(backend_state)) as client:
        yield client


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def staff_app(http_client: TestClient, sleeps: list[float]) -> StaffApp:
    return create_staff_app(
        settings=Settings(api_base_url="http://testserver", enable_tracing=False),
        http_client=http_client,
        token_store=InMemoryTokenStore(),
        sleep=sleeps.append,
    )


@pytest.fixture
def signed_in_app(staff_app: StaffApp) -> StaffApp:
    assert staff_app.session.verify_otp(STAFF_EMAIL, VALID_OTP) is True
    return staff_app
