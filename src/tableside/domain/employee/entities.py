from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Employee:
    email: str
    name: str = ""
    role: str = ""
    phone: str = ""
    employee_id: str | None = None

    def __post_init__(self) -> None:
        if "@" not in self.email:
            raise ValueError("email must be a valid address")
