import calendar
from datetime import date, datetime
from typing import Any, Optional

from academia.core.errors import ValidationError
from academia.store.paths import PeriodKey


def parse_iso_date(value: Any) -> Optional[date]:
    """Calendar date of an ISO string ("YYYY-MM-DD", time part ignored).

    No timezone conversion is applied: "2025-03-01T02:00:00-03:00" is March 1st.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def add_months(start: date, months: int) -> date:
    """
    Add months while keeping day in valid range (e.g., Jan 31 + 1 month => Feb 28/29).
    """
    y = start.year + (start.month - 1 + months) // 12
    m = (start.month - 1 + months) % 12 + 1
    day = min(start.day, calendar.monthrange(y, m)[1])
    return date(y, m, day)


def plan_period(value: Any) -> int:
    if isinstance(value, bool) or value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def next_due_date(last_payment: Any, period: Any) -> Optional[date]:
    paid_on = parse_iso_date(last_payment)
    months = plan_period(period)
    if paid_on is None or months <= 0:
        return None
    return add_months(paid_on, months)


def due_in_period(due: Optional[date], period: PeriodKey) -> bool:
    if due is None:
        return False
    return due.month == period.month and due.year == period.year


def resolve_period(value: Any = None) -> PeriodKey:
    """Period from "MM-YYYY"/"MM/YYYY" or the current month when empty."""
    try:
        return PeriodKey.resolve(value)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc
