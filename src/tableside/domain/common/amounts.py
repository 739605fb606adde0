from __future__ import annotations

AMOUNT_TOLERANCE = 0.01


def round_amount(value: float) -> float:
    return round(float(value), 2)


def amounts_match(left: float, right: float) -> bool:
    return abs(float(left) - float(right)) <= AMOUNT_TOLERANCE
