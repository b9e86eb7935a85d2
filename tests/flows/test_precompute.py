# Unit tests for deterministic pre-computation

from datetime import date

import pytest

from flows.loan_forecast import compute_loan_facts
from flows.precompute import (
    TERM_ENDED_TEXT,
    ScheduleStatus,
    add_months,
    approximate_periodic_payment,
    months_between,
    next_scheduled_date,
    parse_date,
    round_half_up,
)


# -----------------------------------------------------------------------
# Calendar helpers
# -----------------------------------------------------------------------

def test_add_months_clamps_to_month_end():
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)
    assert add_months(date(2024, 11, 15), 3) == date(2025, 2, 15)


def test_months_between():
    assert months_between(date(2024, 6, 20), date(2024, 1, 15)) == 5
    assert months_between(date(2024, 6, 14), date(2024, 1, 15)) == 4
    assert months_between(date(2024, 2, 29), date(2024, 1, 31)) == 1
    assert months_between(date(2024, 1, 15), date(2024, 6, 20)) == -5


@pytest.mark.parametrize("value, expected", [
    ("2024-01-15", date(2024, 1, 15)),
    ("2024-01-15T10:30:00Z", date(2024, 1, 15)),
    (date(2024, 1, 15), date(2024, 1, 15)),
    ("15/01/2024", None),
    ("", None),
    (None, None),
])
def test_parse_date(value, expected):
    assert parse_date(value) == expected


# -----------------------------------------------------------------------
# next_scheduled_date
# -----------------------------------------------------------------------

def test_next_date_steps_to_first_date_on_or_after_now():
    result = next_scheduled_date("2024-01-15", 12, "Active", date(2024, 6, 20))
    assert result.status is ScheduleStatus.SCHEDULED
    assert result.value == date(2024, 7, 15)
    assert result.as_fact() == "2024-07-15"


def test_next_date_on_the_payment_day_is_today():
    result = next_scheduled_date("2024-01-15", 12, "Active", date(2024, 6, 15))
    assert result.value == date(2024, 6, 15)


def test_next_date_after_term_has_ended():
    result = next_scheduled_date("2022-01-15", 12, "Active", date(2024, 6, 20))
    assert result.status is ScheduleStatus.ENDED
    assert result.value is None
    assert result.as_fact() == TERM_ENDED_TEXT


def test_inactive_loan_has_no_date():
    result = next_scheduled_date("2024-01-15", 12, "Paid Off", date(2024, 6, 20))
    assert result.status is ScheduleStatus.INACTIVE
    assert result.as_fact() is None


def test_status_match_is_case_insensitive():
    assert next_scheduled_date("2024-01-15", 12, " active ", date(2024, 6, 20)).value == date(2024, 7, 15)


def test_unparseable_start_date():
    result = next_scheduled_date("next tuesday", 12, "Active", date(2024, 6, 20))
    assert result.status is ScheduleStatus.UNAVAILABLE
    assert result.as_fact() is None


def test_month_end_clamping_carries_forward():
    result = next_scheduled_date("2024-01-31", 12, "Active", date(2024, 3, 1))
    assert result.value == date(2024, 3, 29)


# -----------------------------------------------------------------------
# Payments
# -----------------------------------------------------------------------

def test_approximate_payment():
    assert approximate_periodic_payment(120000, 12, 12) == pytest.approx(11200)
    assert approximate_periodic_payment(120000, 0, 12) == 10000
    assert approximate_periodic_payment(5000, 10, 0) == 5000


@pytest.mark.parametrize("value, expected", [
    (11200.0, 11200),
    (2.5, 3),
    (1041.6666, 1042),
    (-2.5, -3),
    (float("inf"), None),
])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


# -----------------------------------------------------------------------
# Loan facts
# -----------------------------------------------------------------------

def _loan(**overrides):
    loan = {
        "loan_name": "Working capital",
        "lender_name": "Nabil Bank",
        "principal_amount": 120000,
        "interest_rate": 12,
        "loan_term_months": 12,
        "start_date": "2024-01-15",
        "status": "Active",
    }
    loan.update(overrides)
    return loan


def test_loan_facts_for_active_loan():
    facts = compute_loan_facts(_loan(), date(2024, 6, 20))
    assert facts == {
        "calculated_next_payment_date": "2024-07-15",
        "calculated_monthly_payment_npr": 11200,
        "current_date_for_context": "2024-06-20",
    }


def test_loan_facts_for_paid_off_loan():
    facts = compute_loan_facts(_loan(status="Paid Off"), date(2024, 6, 20))
    assert facts["calculated_next_payment_date"] is None
    assert facts["calculated_monthly_payment_npr"] is None


def test_loan_facts_are_idempotent_and_leave_input_untouched():
    loan = _loan()
    snapshot = dict(loan)
    today = date(2024, 6, 20)

    first = compute_loan_facts(loan, today)
    second = compute_loan_facts(loan, today)

    assert first == second
    assert first is not second
    assert loan == snapshot
