import re
from datetime import date, datetime, time, timedelta

from stockdash.core.constants import (
    MS_PER_DAY,
    NEAR_EXPIRY_DAYS,
    STATUS_CURRENT,
    STATUS_EXPIRED,
    STATUS_NEAR_EXPIRY,
)
from stockdash.core.dates import normalize_date
from stockdash.core.errors import ValidationError

_ONE_MS = timedelta(milliseconds=1)
_END_OF_DAY = time(23, 59, 59, 999000)
_YMD_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def _rolled_day(value_text):
    # Out-of-range parts carry over: 2024-02-30 is 2024-03-01, 2024-13-01 is 2025-01-01.
    match = _YMD_RE.match(value_text)
    if not match:
        return None
    year, month, day = (int(part) for part in match.groups())
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    try:
        return date(year, month, 1) + timedelta(days=day - 1)
    except (ValueError, OverflowError):
        return None


def _expiration_day(expiration_date):
    day = normalize_date(expiration_date)
    if day is None and isinstance(expiration_date, str):
        day = _rolled_day(expiration_date.strip())
    if day is None:
        raise ValidationError(
            "expirationDate", "expected a YYYY-MM-DD date, got {!r}".format(expiration_date)
        )
    return day


def _reference_day(reference):
    if isinstance(reference, datetime):
        return reference.date()
    if isinstance(reference, date):
        return reference
    raise TypeError("reference must be a date or datetime")


def days_until(expiration_date, reference) -> int:
    """Whole days from the start of the reference day to the end of the expiration day.

    Same-day expiration is 0, yesterday is -1.
    """
    start = datetime.combine(_reference_day(reference), time.min)
    end = datetime.combine(_expiration_day(expiration_date), _END_OF_DAY)
    diff_ms = (end - start) // _ONE_MS
    return diff_ms // MS_PER_DAY


def classify_expiration(expiration_date, reference) -> str:
    days = days_until(expiration_date, reference)
    if days < 0:
        return STATUS_EXPIRED
    if days <= NEAR_EXPIRY_DAYS:
        return STATUS_NEAR_EXPIRY
    return STATUS_CURRENT


__all__ = ["classify_expiration", "days_until"]
