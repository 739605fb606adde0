"""Response schema of the restaurant backend.

Every JSON body returned by the REST API is validated against one of these
models before it reaches a mapper. Unknown fields are ignored; each envelope
reads its collection from exactly one documented key.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class BackendModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Envelope(BackendModel):
    success: bool = False
    message: str | None = None


class MenuRef(BackendModel):
    id: str = Field(alias="_id")
    name: str | None = None
    price: float | None = None


class TableRef(BackendModel):
    id: str = Field(alias="_id")
    name: str | None = None


class RawOrderItem(BackendModel):
    menuid: str | MenuRef
    quantity: int
    notes: str | None = None
    name: str | None = None
    price: float | None = None


class RawOrder(BackendModel):
    id: str = Field(alias="_id")
    orderid: str
    tableid: str | TableRef | None = None
    tableNumber: str | None = None
    customerName: str | None = None
    customerPhone: str | None = None
    items: list[RawOrderItem] = Field(default_factory=list)
    subtotal: float | None = None
    tax: float | None = None
    discount: float | None = None
    totalAmount: float
    status: str
    paymentStatus: str | None = None
    orderDate: datetime | None = None
    createdAt: datetime | None = None
    updatedAt: datetime | None = None
    completedAt: datetime | None = None


class RawTable(BackendModel):
    id: str = Field(alias="_id")
    tableid: str | None = None
    name: str | None = None
    capacity: int | None = None
    status: str | None = None


class RawCategory(BackendModel):
    id: str = Field(alias="_id")
    name: str
    description: str | None = None


class RawMenuItem(BackendModel):
    id: str = Field(alias="_id")
    name: str
    price: float
    description: str | None = None
    categoryid: str | RawCategory | None = None
    status: str | None = None
    isVegetarian: bool = False


class RawEmployee(BackendModel):
    email: str
    name: str | None = None
    role: str | None = None
    phone: str | None = None
    employeeid: str | None = None


class OrdersEnvelope(Envelope):
    orders: list[dict] = Field(default_factory=list)


class OrderEnvelope(Envelope):
    order: dict | None = None


class TablesEnvelope(Envelope):
    tables: list[dict] = Field(default_factory=list)


class CategoriesEnvelope(Envelope):
    categories: list[dict] = Field(default_factory=list)


class MenusEnvelope(Envelope):
    menus: list[dict] = Field(default_factory=list)


class TokenEnvelope(Envelope):
    token: str | None = None


class EmployeeEnvelope(Envelope):
    data: dict | None = None
