from datetime import UTC, date, datetime

import pytest

from invoicehub.app.services.periods import (
    DAY,
    MONTH,
    bucket_keys,
    last_n_months,
    next_bucket_keys,
    resolve_period,
    shift_months,
)

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=UTC)


def test_month_period_window():
    window = resolve_period("3months", NOW)
    assert window.granularity == MONTH
    assert window.start == datetime(2024, 3, 15, 12, 0, tzinfo=UTC)
    assert window.previous_start == datetime(2023, 12, 15, 12, 0, tzinfo=UTC)
    assert window.contains(date(2024, 3, 15))
    assert not window.contains(date(2024, 3, 14))
    assert window.contains_previous(date(2024, 3, 14))


def test_day_period_window():
    window = resolve_period("7days", NOW)
    assert window.granularity == DAY
    assert len(bucket_keys(window.start.date(), window.end.date(), DAY)) == 8


def test_unknown_period_raises():
    with pytest.raises(ValueError):
        resolve_period("5years", NOW)


def test_shift_months_clamps_day():
    assert shift_months(datetime(2024, 3, 31), -1) == datetime(2024, 2, 29)
    assert shift_months(datetime(2024, 1, 31), 13) == datetime(2025, 2, 28)


def test_month_bucket_keys_cross_year():
    assert bucket_keys(date(2023, 11, 20), date(2024, 2, 1), MONTH) == ["2023-11", "2023-12", "2024-01", "2024-02"]


def test_next_bucket_keys():
    assert next_bucket_keys("2024-11", MONTH, 3) == ["2024-12", "2025-01", "2025-02"]
    assert next_bucket_keys("2024-02-28", DAY, 2) == ["2024-02-29", "2024-03-01"]


def test_last_n_months_oldest_first():
    months = last_n_months(date(2024, 2, 10), 3)
    assert months == [(2023, 12), (2024, 1), (2024, 2)]
