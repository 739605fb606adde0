from __future__ import annotations

from tableside.application.dto.backend import RawEmployee
from tableside.domain.employee.entities import Employee


def to_employee(raw: RawEmployee) -> Employee:
    return Employee(
        email=raw.email,
        name=raw.name or "",
        role=raw.role or "",
        phone=raw.phone or "",
        employee_id=raw.employeeid,
    )
