import re
from datetime import datetime, time
from typing import Optional

from sqlalchemy import Select

from fintrack.core.errors import BadRequestError
from fintrack.schemas.common import coerce_datetime

_OPERATORS = {
    ">=": lambda col, v: col >= v,
    "<=": lambda col, v: col <= v,
    "!=": lambda col, v: col != v,
    ">": lambda col, v: col > v,
    "<": lambda col, v: col < v,
    "=": lambda col, v: col == v,
}
_NUMERIC_RE = re.compile(r"^\s*(\w+)\s*(>=|<=|!=|>|<|=)\s*(-?\d+(?:\.\d+)?)\s*$")


def apply_numeric_filters(stmt: Select, model, expression: Optional[str], allowed: tuple) -> Select:
    """Apply ``amount>=10,amount<50`` style comparisons on whitelisted columns."""
    if not expression:
        return stmt
    for item in expression.split(","):
        match = _NUMERIC_RE.match(item)
        if not match:
            raise BadRequestError(f"Invalid numeric filter '{item}'")
        field, operator, value = match.groups()
        if field not in allowed:
            continue
        stmt = stmt.where(_OPERATORS[operator](getattr(model, field), float(value)))
    return stmt


def parse_date(value: Optional[str], end_of_day: bool = False) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = coerce_datetime(value)
        if isinstance(parsed, str):
            parsed = datetime.fromisoformat(parsed)
    except ValueError:
        raise BadRequestError(f"Invalid date format '{value}'")
    if isinstance(parsed, datetime) and parsed.tzinfo is not None:
        parsed = parsed.replace(tzinfo=None)
    if end_of_day and parsed.time() == time.min:
        parsed = datetime.combine(parsed.date(), time.max)
    return parsed


def contains(column, text: str):
    return column.ilike(f"%{text}%")
