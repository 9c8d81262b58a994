from __future__ import annotations

from datetime import date

import pytest

from src.kintai_system.kintai_system.core.exceptions import ValidationError
from src.kintai_system.kintai_system.payroll.period import (
    PayrollPeriod,
    current_period,
    period_bounds,
    period_for,
    recent_periods,
)


def test_cutoff_day_stays_in_month():
    assert period_for("2025-01-20").year_month == "2025-01"


def test_day_after_cutoff_moves_to_next_period():
    assert period_for("2025-01-21").year_month == "2025-02"


def test_december_after_cutoff_rolls_into_next_year():
    assert period_for(date(2024, 12, 21)).year_month == "2025-01"


def test_current_period():
    assert current_period(date(2025, 3, 20)) == "2025-03"
    assert current_period(date(2025, 3, 21)) == "2025-04"


def test_period_bounds_cross_year():
    period = period_bounds("2025-01")

    assert period.date_range() == ("2024-12-21", "2025-01-20")
    assert period.label == "2025年1月度 (12/21-1/20)"
    assert period.long_label == "2025年1月度 (2024/12/21〜2025/1/20)"


def test_period_contains_its_own_days_only():
    period = PayrollPeriod(2025, 3)

    assert period.contains(date(2025, 2, 21))
    assert period.contains(date(2025, 3, 20))
    assert not period.contains(date(2025, 3, 21))
    assert not period.contains(date(2025, 2, 20))


@pytest.mark.parametrize("value", ["2025-13", "2025/01", "202501", "", "2025-1"])
def test_period_bounds_rejects_bad_labels(value):
    with pytest.raises(ValidationError):
        period_bounds(value)


def test_recent_periods_most_recent_first():
    periods = recent_periods(date(2025, 2, 25), 4)

    assert [p.year_month for p in periods] == ["2025-03", "2025-02", "2025-01", "2024-12"]
    assert periods[0].label == "2025年3月度 (2/21-3/20)"
    assert periods[2].label == "2025年1月度 (12/21-1/20)"


def test_recent_periods_default_count():
    assert len(recent_periods(date(2025, 6, 1))) == 12
