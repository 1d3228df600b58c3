"""Due date policy per deadline type. Pure computation, no database."""

from datetime import date, datetime

import pytest

from app.models.compliance import ComplianceRule, ComplianceCategory, DeadlineType
from app.services.due_dates import compute_due_date

NOW = datetime(2025, 1, 1, 9, 30)


def _rule(deadline_type, deadline_days=None) -> ComplianceRule:
    return ComplianceRule(
        id="test-rule",
        title="Test Rule",
        description="",
        category=ComplianceCategory.STUDY_PERMIT,
        deadline_type=deadline_type,
        deadline_days=deadline_days,
        priority=5,
        is_active=True,
        catalog_version="test",
    )


@pytest.mark.parametrize("days", [None, 0, 30, 365])
@pytest.mark.parametrize("permit_expiry", [None, date(2026, 9, 15)])
def test_one_time_never_has_a_deadline(days, permit_expiry):
    rule = _rule(DeadlineType.ONE_TIME, days)
    assert compute_due_date(rule, permit_expiry, NOW) is None


def test_relative_to_permit_counts_back_from_expiry():
    rule = _rule(DeadlineType.RELATIVE_TO_PERMIT, 30)
    due = compute_due_date(rule, date(2026, 9, 15), NOW)
    assert due.date() == date(2026, 8, 16)


def test_relative_to_permit_without_permit_has_no_deadline():
    rule = _rule(DeadlineType.RELATIVE_TO_PERMIT, 30)
    assert compute_due_date(rule, None, NOW) is None


def test_relative_to_permit_without_days_has_no_deadline():
    rule = _rule(DeadlineType.RELATIVE_TO_PERMIT, None)
    assert compute_due_date(rule, date(2026, 9, 15), NOW) is None


def test_fixed_date_adds_calendar_days():
    rule = _rule(DeadlineType.FIXED_DATE, 365)
    due = compute_due_date(rule, None, NOW)
    assert due == datetime(2026, 1, 1, 9, 30)


def test_fixed_date_across_leap_day():
    rule = _rule(DeadlineType.FIXED_DATE, 365)
    due = compute_due_date(rule, None, datetime(2024, 1, 1))
    assert due.date() == date(2024, 12, 31)


def test_fixed_date_without_days_has_no_deadline():
    rule = _rule(DeadlineType.FIXED_DATE, None)
    assert compute_due_date(rule, None, NOW) is None


def test_recurring_uses_rule_days():
    rule = _rule(DeadlineType.RECURRING, 120)
    assert compute_due_date(rule, None, NOW).date() == date(2025, 5, 1)


def test_recurring_defaults_to_ninety_days():
    rule = _rule(DeadlineType.RECURRING, None)
    assert compute_due_date(rule, None, NOW).date() == date(2025, 4, 1)


def test_unknown_deadline_type_has_no_deadline():
    rule = _rule("SEMESTERLY", 30)
    assert compute_due_date(rule, date(2026, 9, 15), NOW) is None


def test_same_inputs_same_result():
    rule = _rule(DeadlineType.FIXED_DATE, 180)
    assert compute_due_date(rule, None, NOW) == compute_due_date(rule, None, NOW)
