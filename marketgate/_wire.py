"""
Wire helpers — lenient readers for backend JSON.

The backend has shipped both snake_case and camelCase field names; readers
accept either.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any


def pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """First present, non-None value among keys."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return default


def parse_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def parse_decimal(value: Any, default: Decimal = Decimal("0")) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if value is None or isinstance(value, bool):
        return default
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return default


def parse_int(value: Any, default: int | None = None) -> int | None:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    try:
        return int(str(value))
    except (TypeError, ValueError):
        return default


def parse_coordinate(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def format_coordinate(value: float | str) -> str:
    """Coordinates go out with exactly 6 decimals."""
    return f"{float(value):.6f}"


__all__ = (
    "pick",
    "parse_datetime",
    "parse_decimal",
    "parse_int",
    "parse_coordinate",
    "format_coordinate",
)
