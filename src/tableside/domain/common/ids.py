from __future__ import annotations

from typing import NewType

OrderId = NewType("OrderId", str)
OrderNumber = NewType("OrderNumber", str)
TableId = NewType("TableId", str)
MenuItemId = NewType("MenuItemId", str)
CategoryId = NewType("CategoryId", str)
