"""Lenient value coercion — malformed numbers and dates degrade to safe defaults."""

import math
import time
from datetime import datetime, timedelta, timezone
from typing import Any

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def to_number(value: Any, default: float = 0.0) -> float:
    """Coerce *value* to a finite float, returning *default* when that fails.

    Accepts ints, floats, numeric strings (with optional surrounding
    whitespace) and bools. ``None``, empty strings, NaN and infinities fall
    back to the default.
    """
    if value is None or isinstance(value, (list, dict, tuple, set)):
        return default
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return number


def to_optional_number(value: Any) -> float | None:
    """Like :func:`to_number` but keeps "absent" as ``None``."""
    number = to_number(value, default=math.nan)
    return None if math.isnan(number) else number


def to_quantity(value: Any) -> int:
    """Coerce a line-item quantity to a positive integer (minimum 1)."""
    number = to_number(value, default=1.0)
    return max(1, int(number))


def to_text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return str(value)


def to_epoch_ms(value: Any, default: int | None = None) -> int:
    """Convert an ISO-8601 string, datetime or number to epoch milliseconds.

    Unparseable input falls back to *default*, or to "now" when no default
    is given.
    """
    fallback = now_ms() if default is None else default
    if value is None or isinstance(value, bool):
        return fallback
    if isinstance(value, datetime):
        return _datetime_to_ms(value)
    if isinstance(value, (int, float)):
        return int(value) if math.isfinite(value) else fallback
    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            return fallback
        try:
            return int(float(raw))
        except ValueError:
            pass
        # fromisoformat on 3.10 rejects the "Z" suffix
        if raw.endswith(("Z", "z")):
            raw = raw[:-1] + "+00:00"
        try:
            return _datetime_to_ms(datetime.fromisoformat(raw))
        except ValueError:
            return fallback
    return fallback


def to_datetime(epoch_ms: int) -> datetime:
    """Epoch milliseconds as an aware UTC datetime."""
    return _EPOCH + timedelta(milliseconds=int(epoch_ms))


def to_iso(epoch_ms: int) -> str:
    """Format epoch milliseconds as an ISO-8601 UTC string."""
    return (
        to_datetime(epoch_ms)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def _datetime_to_ms(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - _EPOCH) // timedelta(milliseconds=1)
