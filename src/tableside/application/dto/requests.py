from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class PayloadModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_body(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class OrderItemPayload(PayloadModel):
    menuid: str
    quantity: int = Field(ge=1)
    notes: str = ""


class CreateOrderPayload(PayloadModel):
    table_id: str | None = Field(default=None, alias="tableid")
    table_number: str = Field(alias="tableNumber")
    customer_name: str = Field(default="", alias="customerName")
    customer_phone: str = Field(default="", alias="customerPhone")
    items: list[OrderItemPayload] = Field(min_length=1)
    subtotal: float


class UpdateOrderPayload(PayloadModel):
    table_id: str | None = Field(default=None, alias="tableid")
    table_number: str = Field(alias="tableNumber")
    customer_name: str = Field(default="", alias="customerName")
    customer_phone: str = Field(default="", alias="customerPhone")
    order_number: str = Field(alias="orderid")
    items: list[OrderItemPayload] = Field(min_length=1)
    subtotal: float
    tax: float = 0.0
    discount: float = 0.0
    total_amount: float = Field(alias="totalAmount")
    status: str
