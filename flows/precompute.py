"""Deterministic pre-computation: pure date and arithmetic helpers.

Values computed here are merged into a flow's render context as "known
facts" so the model never has to do calendar or loan arithmetic itself.
Nothing in this module performs I/O or reads the clock; "now" is always an
argument.
"""

from __future__ import annotations

import calendar
import math
from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Optional

TERM_ENDED_TEXT = "Term likely ended"


class ScheduleStatus(Enum):
    SCHEDULED = "SCHEDULED"
    ENDED = "ENDED"
    INACTIVE = "INACTIVE"
    UNAVAILABLE = "UNAVAILABLE"


@dataclass(frozen=True)
class ScheduledDate:
    """Outcome of ``next_scheduled_date``.

    ``value`` is set only for ``SCHEDULED``.  An inactive schedule or an
    unparseable start date yields no date at all, never a sentinel.
    """

    status: ScheduleStatus
    value: Optional[date] = None

    def as_fact(self) -> Optional[str]:
        """Render for a prompt: ISO date, the term-ended text, or None."""
        if self.status is ScheduleStatus.SCHEDULED:
            return self.value.isoformat()
        if self.status is ScheduleStatus.ENDED:
            return TERM_ENDED_TEXT
        return None


# ---------------------------------------------------------------------------
# Calendar helpers
# ---------------------------------------------------------------------------

def parse_date(value: Any) -> Optional[date]:
    """Parse ``YYYY-MM-DD`` (or an ISO datetime) into a date; None if invalid."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def is_last_day_of_month(d: date) -> bool:
    return d.day == calendar.monthrange(d.year, d.month)[1]


def add_months(d: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's end."""
    month_index = d.month - 1 + months
    year = d.year + month_index // 12
    month = month_index % 12 + 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def months_between(later: date, earlier: date) -> int:
    """Whole months from ``earlier`` to ``later`` (negative when reversed).

    A trailing partial month is not counted, except that a month-end date
    counts as a full month (Jan 31 -> Feb 29 is one month).
    """
    if later < earlier:
        return -months_between(earlier, later)
    diff = (later.year - earlier.year) * 12 + (later.month - earlier.month)
    if diff > 0 and later.day < earlier.day and not is_last_day_of_month(later):
        diff -= 1
    return diff


# ---------------------------------------------------------------------------
# Schedules and payments
# ---------------------------------------------------------------------------

def next_scheduled_date(
    start: Any,
    total_periods: int,
    status: str,
    now: date,
) -> ScheduledDate:
    """Next monthly date on or after ``now`` for a schedule starting at ``start``.

    The first candidate is one month after ``start``; each further candidate
    is one month after the previous one, so month-end clamping carries
    forward (Jan 31 -> Feb 29 -> Mar 29).  Stepping stops once the candidate
    is not before ``now`` or the elapsed month count reaches
    ``total_periods``.

    When the candidate is still in the past but the months elapsed since
    ``start`` are below the term, "one month from now" is reported.  This is
    an approximation that can disagree with the real schedule; it is kept
    as-is pending domain confirmation.
    """
    if str(status).strip().lower() != "active":
        return ScheduledDate(ScheduleStatus.INACTIVE)

    start_date = parse_date(start)
    if start_date is None:
        return ScheduledDate(ScheduleStatus.UNAVAILABLE)

    candidate = add_months(start_date, 1)
    while candidate < now and months_between(candidate, start_date) < total_periods:
        candidate = add_months(candidate, 1)

    if candidate < now:
        if months_between(candidate, start_date) >= total_periods:
            return ScheduledDate(ScheduleStatus.ENDED)
        if months_between(now, start_date) < total_periods:
            return ScheduledDate(ScheduleStatus.SCHEDULED, add_months(now, 1))

    return ScheduledDate(ScheduleStatus.SCHEDULED, candidate)


def approximate_periodic_payment(
    principal: float,
    annual_rate: float,
    term_periods: int,
) -> float:
    """Rough monthly payment with simple (non-amortised) interest.

    ``(principal + principal * rate/100 * term/12) / term``.  This is not
    an EMI and must not be presented as exact.  A non-positive term returns
    the principal as a single payment.
    """
    if term_periods <= 0:
        return principal
    if annual_rate == 0:
        return principal / term_periods
    interest = principal * (annual_rate / 100) * (term_periods / 12)
    return (principal + interest) / term_periods


def round_half_up(value: float) -> Optional[int]:
    """Round to a whole currency unit, halves away from zero; None if not finite."""
    if value is None or not math.isfinite(value):
        return None
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
