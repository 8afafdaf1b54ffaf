from datetime import date, datetime
from typing import Any, Mapping, Optional

import pandas as pd

from fintrack.client.models import ACCOUNT_TYPES


def _as_date(value: Any) -> Optional[datetime]:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        return pd.to_datetime(value).to_pydatetime()
    except (ValueError, TypeError):
        return None


def _positive(value: Any) -> bool:
    try:
        return float(value) > 0
    except (TypeError, ValueError):
        return False


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_transaction_form(form: Mapping[str, Any]) -> dict[str, str]:
    errors = {}
    if not _positive(form.get("amount")):
        errors["amount"] = "Amount must be greater than 0"
    if _blank(form.get("description")):
        errors["description"] = "Description is required"
    if _blank(form.get("category")):
        errors["category"] = "Category is required"
    if _blank(form.get("account")):
        errors["account"] = "Account is required"
    if form.get("type") not in ("income", "expense"):
        errors["type"] = "Type must be income or expense"
    return errors


def validate_budget_form(form: Mapping[str, Any]) -> dict[str, str]:
    errors = {}
    if not _positive(form.get("amount")):
        errors["amount"] = "Amount must be greater than 0"
    if _blank(form.get("category")):
        errors["category"] = "Category is required"

    start = _as_date(form.get("start_date"))
    if start is None:
        errors["start_date"] = "Start date is required"
    if not _blank(form.get("end_date")):
        end = _as_date(form.get("end_date"))
        if end is None:
            errors["end_date"] = "End date is not a valid date"
        elif start is not None and end <= start:
            errors["end_date"] = "End date must be after start date"
    return errors


def validate_account_form(form: Mapping[str, Any]) -> dict[str, str]:
    errors = {}
    if _blank(form.get("name")):
        errors["name"] = "Account name is required"
    if form.get("type", "bank") not in ACCOUNT_TYPES:
        errors["type"] = f"Type must be one of {', '.join(ACCOUNT_TYPES)}"
    return errors
