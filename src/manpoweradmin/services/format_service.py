from __future__ import annotations

import math
from datetime import date, datetime, timezone
from typing import Any, Optional, Union

from babel.numbers import format_currency as _babel_currency
from dateutil import parser

from manpoweradmin.config import get_settings

NOT_AVAILABLE = "N/A"
INVALID_DATE = "Invalid Date"

_DATE_FMT = "%b %d, %Y"
_DATETIME_FMT = "%b %d, %Y, %I:%M %p"


class _Unparseable(Exception):
    pass


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Description: Normalize a database/native/epoch/ISO timestamp into a datetime.
    Layer: L2
    Input: Firestore timestamp, datetime/date, epoch milliseconds, or date string
    Output: datetime, or None when missing or unparseable
    """
    try:
        return _to_datetime(value)
    except _Unparseable:
        return None


def _to_datetime(value: Any) -> Optional[datetime]:
    if _is_missing(value):
        return None
    # Firestore's DatetimeWithNanoseconds is a datetime subclass.
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    for attr in ("to_datetime", "ToDatetime"):
        fn = getattr(value, attr, None)
        if callable(fn):
            try:
                return fn()
            except (TypeError, ValueError, OverflowError) as e:
                raise _Unparseable(str(e)) from e
    if isinstance(value, dict):
        seconds = value.get("seconds", value.get("_seconds"))
        nanos = value.get("nanoseconds", value.get("_nanoseconds")) or 0
        if seconds is None:
            raise _Unparseable("mapping without seconds")
        try:
            return datetime.fromtimestamp(float(seconds) + float(nanos) / 1e9, tz=timezone.utc)
        except (TypeError, ValueError, OverflowError, OSError) as e:
            raise _Unparseable(str(e)) from e
    if isinstance(value, bool):
        raise _Unparseable("bool is not a timestamp")
    if isinstance(value, (int, float)):
        # epoch milliseconds
        try:
            return datetime.fromtimestamp(float(value) / 1000.0, tz=timezone.utc)
        except (ValueError, OverflowError, OSError) as e:
            raise _Unparseable(str(e)) from e
    if isinstance(value, str):
        try:
            return parser.parse(value.strip())
        except (ValueError, OverflowError, parser.ParserError) as e:
            raise _Unparseable(str(e)) from e
    raise _Unparseable(f"unsupported timestamp type {type(value).__name__}")


def format_date(value: Any, *, with_time: bool = False) -> str:
    """
    Description: Render a timestamp for tables and detail views.
    Layer: L2
    Input: any timestamp shape accepted by parse_timestamp
    Output: 'Jan 05, 2024' (or with time), 'N/A' when missing, 'Invalid Date' when unparseable
    """
    if _is_missing(value):
        return NOT_AVAILABLE
    dt = parse_timestamp(value)
    if dt is None:
        return INVALID_DATE
    return dt.strftime(_DATETIME_FMT if with_time else _DATE_FMT)


def calculate_age(date_of_birth: Any, *, today: Optional[date] = None) -> Union[int, str]:
    """
    Description: Calendar age in whole years as of today.
    Layer: L2
    Input: date of birth (any timestamp shape) + optional reference day
    Output: int years, 'N/A' when missing, 'Invalid Date' when unparseable
    """
    if _is_missing(date_of_birth):
        return NOT_AVAILABLE
    dob = parse_timestamp(date_of_birth)
    if dob is None:
        return INVALID_DATE
    ref = today or date.today()
    age = ref.year - dob.year
    if (ref.month, ref.day) < (dob.month, dob.day):
        age -= 1
    return age


def coerce_amount(value: Any) -> Optional[float]:
    """Parse a string-or-number amount; None when missing, unparseable or non-finite."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip().replace(",", ""))
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def format_currency(amount: Any, currency: Optional[str] = None, *, locale: Optional[str] = None) -> str:
    """
    Description: Locale-aware money rendering for payment tables and tiles.
    Layer: L2
    Input: amount (str or number) + currency code + babel locale
    Output: formatted string, 'N/A' when amount is missing or unparseable
    """
    number = coerce_amount(amount)
    if number is None:
        return NOT_AVAILABLE
    s = get_settings()
    return _babel_currency(number, currency or s.default_currency, locale=locale or s.currency_locale)


def format_file_size(size: Any) -> str:
    try:
        n = int(size or 0)
    except (TypeError, ValueError):
        return NOT_AVAILABLE
    if n <= 0:
        return NOT_AVAILABLE
    if n < 1024:
        return f"{n} bytes"
    if n < 1024 * 1024:
        return f"{n / 1024:.1f} KB"
    return f"{n / (1024 * 1024):.1f} MB"


def format_label(value: Optional[str]) -> str:
    """skilled_worker -> Skilled Worker"""
    if not value:
        return NOT_AVAILABLE
    return " ".join(w[:1].upper() + w[1:] for w in str(value).replace("_", " ").split(" "))


def format_status(value: Optional[str]) -> str:
    """under_review -> UNDER REVIEW"""
    if not value:
        return NOT_AVAILABLE
    return str(value).replace("_", " ").upper()


# Badge colours use Streamlit's markdown colour names.
_SUBMISSION_STATUS_COLORS = {
    "approved": "green",
    "rejected": "red",
    "under_review": "orange",
    "additional_info_required": "blue",
}
_PAYMENT_STATUS_COLORS = {
    "completed": "green",
    "approved": "blue",
    "processing": "orange",
    "rejected": "red",
}
_SERVICE_TYPE_COLORS = {
    "skilled_worker": "blue",
    "semi_skilled": "violet",
    "unskilled": "gray",
    "domestic_worker": "green",
    "construction": "orange",
    "manufacturing": "red",
    "hospitality": "rainbow",
}
_SERVICE_CATEGORY_COLORS = {
    "recruitment": "blue",
    "visa_processing": "violet",
    "document_clearance": "green",
    "training": "orange",
    "medical_checkup": "red",
    "travel_arrangements": "rainbow",
    "deployment": "gray",
}


def submission_status_color(status: Optional[str]) -> str:
    return _SUBMISSION_STATUS_COLORS.get(status or "", "blue")


def payment_status_color(status: Optional[str]) -> str:
    return _PAYMENT_STATUS_COLORS.get(status or "", "gray")


def service_type_color(service_type: Optional[str]) -> str:
    return _SERVICE_TYPE_COLORS.get(service_type or "", "gray")


def service_category_color(category: Optional[str]) -> str:
    return _SERVICE_CATEGORY_COLORS.get(category or "", "gray")


def badge(text: str, color: str) -> str:
    """Streamlit markdown badge, e.g. ':green-background[APPROVED]'."""
    return f":{color}-background[{text}]"
