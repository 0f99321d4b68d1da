from datetime import date

from app.utils.frequency import (
    days_interval_elapsed,
    interval_days,
    interval_months,
    months_interval_elapsed,
)


def test_interval_lookups_are_case_insensitive():
    assert interval_days("Weekly") == 7
    assert interval_days(" QUARTERLY ") == 90
    assert interval_months("Annual") == 12


def test_unknown_frequency_imposes_no_interval():
    assert interval_days("fortnightly-ish") is None
    assert interval_days(None) is None
    assert days_interval_elapsed(date(2024, 1, 1), date(2024, 1, 2), "fortnightly-ish")
    assert months_interval_elapsed(date(2024, 1, 1), date(2024, 1, 2), None)


def test_never_generated_is_always_elapsed():
    assert days_interval_elapsed(None, date(2024, 1, 1), "annual")
    assert months_interval_elapsed(None, date(2024, 1, 1), "annual")


def test_weekly_interval():
    assert not days_interval_elapsed(date(2024, 1, 1), date(2024, 1, 7), "weekly")
    assert days_interval_elapsed(date(2024, 1, 1), date(2024, 1, 8), "weekly")


def test_monthly_is_thirty_days_not_a_calendar_month():
    # Approximate day-count policy: Feb 1 -> Mar 1 2024 is only 29 days, so a
    # monthly source generated on Feb 1 is still throttled on Mar 1.
    assert not days_interval_elapsed(date(2024, 2, 1), date(2024, 3, 1), "monthly")
    assert days_interval_elapsed(date(2024, 2, 1), date(2024, 3, 2), "monthly")
    # Jan 1 -> Feb 1 is 31 days and passes
    assert days_interval_elapsed(date(2024, 1, 1), date(2024, 2, 1), "monthly")


def test_bimonthly_and_semiannual_day_counts_lag_the_calendar():
    # Jan 10 -> Mar 10 2023 is 59 days and Jan 10 -> Jul 10 2023 is 181,
    # one short of the 60 and 182 day intervals
    assert not days_interval_elapsed(date(2023, 1, 10), date(2023, 3, 10), "bimonthly")
    assert days_interval_elapsed(date(2023, 1, 10), date(2023, 3, 11), "bimonthly")
    assert not days_interval_elapsed(date(2023, 1, 10), date(2023, 7, 10), "semiannual")
    assert days_interval_elapsed(date(2023, 1, 10), date(2023, 7, 11), "semiannual")
    # A leap February makes the bimonthly gap exact
    assert days_interval_elapsed(date(2024, 1, 10), date(2024, 3, 10), "bimonthly")


def test_month_interval_counts_calendar_months():
    assert not months_interval_elapsed(date(2024, 1, 31), date(2024, 3, 1), "quarterly")
    assert months_interval_elapsed(date(2024, 1, 31), date(2024, 4, 1), "quarterly")
    assert months_interval_elapsed(date(2024, 1, 31), date(2024, 2, 1), "monthly")
