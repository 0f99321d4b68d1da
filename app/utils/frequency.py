# app/utils/frequency.py
"""
Frequency name -> interval lookups used to throttle recurring sources.

The day table is an approximation, not calendar-exact: "monthly" means 30
elapsed days, so a monthly source generated on Feb 1 is still inside its
interval on Mar 1 (29 days). Bimonthly and semiannual lag the calendar the
same way. The month table used by automatic debits counts calendar months
instead.
"""
from datetime import date
from typing import Optional

from app.utils.dates import months_between

INTERVAL_DAYS = {
    "weekly": 7,
    "biweekly": 15,
    "monthly": 30,
    "bimonthly": 60,
    "quarterly": 90,
    "semiannual": 182,
    "annual": 365,
}

INTERVAL_MONTHS = {
    "monthly": 1,
    "bimonthly": 2,
    "quarterly": 3,
    "semiannual": 6,
    "annual": 12,
}


def _normalize(name: Optional[str]) -> str:
    return (name or "").strip().lower()


def interval_days(name: Optional[str]) -> Optional[int]:
    return INTERVAL_DAYS.get(_normalize(name))


def interval_months(name: Optional[str]) -> Optional[int]:
    return INTERVAL_MONTHS.get(_normalize(name))


def days_interval_elapsed(last_generated: Optional[date], today: date, name: Optional[str]) -> bool:
    """True when no interval applies, nothing was generated yet, or enough days passed."""
    if last_generated is None:
        return True
    days = interval_days(name)
    if days is None:
        return True
    return (today - last_generated).days >= days


def months_interval_elapsed(last_generated: Optional[date], today: date, name: Optional[str]) -> bool:
    if last_generated is None:
        return True
    months = interval_months(name)
    if months is None:
        return True
    return months_between(last_generated, today) >= months
