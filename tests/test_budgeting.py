import math
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from app.schemas.goal import SchedulingRequest
from app.utils.budgeting import (
    InvalidInputError,
    build_payment_schedule,
    calculate_savings_schedule,
    compute_schedule,
    summarize_schedule,
)


def test_same_month_goal_is_a_single_installment():
    result = calculate_savings_schedule(date(2025, 11, 20), date(2025, 11, 25), 500)

    assert result.total_days == 5
    assert len(result.monthly_goals) == 1
    goal = result.monthly_goals[0]
    assert (goal.year, goal.month) == (2025, 10)
    assert goal.days_in_period == 6
    assert goal.savings_goal == pytest.approx(500)


def test_multi_month_goal_matches_reference_plan():
    result = calculate_savings_schedule(date(2025, 11, 20), date(2026, 3, 19), 1000, 0)
    daily = 1000 / 119

    assert result.total_days == 119
    assert result.daily_savings == pytest.approx(8.40, abs=0.01)
    assert [(g.year, g.month, g.days_in_period) for g in result.monthly_goals] == [
        (2025, 10, 11),
        (2025, 11, 31),
        (2026, 0, 31),
        (2026, 1, 28),
        (2026, 2, 19),
    ]
    assert result.monthly_goals[0].savings_goal == pytest.approx(11 * daily)
    # March absorbs the extra day counted by the inclusive month walk
    assert result.monthly_goals[-1].savings_goal == pytest.approx(18 * daily)
    assert sum(g.savings_goal for g in result.monthly_goals) == pytest.approx(1000)
    assert result.total_calculated_savings == 1000


def test_current_saved_reduces_remaining_amount():
    result = calculate_savings_schedule(date(2025, 11, 20), date(2026, 3, 19), 1000, 250)

    assert result.total_calculated_savings == 750
    assert result.daily_savings == pytest.approx(750 / 119)
    assert sum(g.savings_goal for g in result.monthly_goals) == pytest.approx(750)


def test_zero_residual_leaves_last_installment_untouched():
    result = calculate_savings_schedule(date(2025, 1, 1), date(2025, 2, 1), 310)

    assert result.total_days == 31
    assert result.daily_savings == 10
    assert len(result.monthly_goals) == 1
    assert result.monthly_goals[0].days_in_period == 31
    assert result.monthly_goals[0].savings_goal == 310.0


def test_leap_february_is_counted_in_full():
    result = calculate_savings_schedule(date(2024, 1, 31), date(2024, 3, 1), 300)

    assert [(g.month, g.days_in_period) for g in result.monthly_goals] == [(0, 1), (1, 29)]
    assert result.total_days == 30


def test_last_day_of_month_creation_still_contributes():
    result = calculate_savings_schedule(date(2025, 1, 31), date(2025, 2, 15), 100)

    assert result.monthly_goals[0].month == 0
    assert result.monthly_goals[0].days_in_period == 1
    assert result.monthly_goals[1].days_in_period == 15


def test_year_boundary_rolls_over():
    result = calculate_savings_schedule(date(2025, 12, 30), date(2026, 1, 2), 40)

    assert [(g.year, g.month, g.days_in_period) for g in result.monthly_goals] == [
        (2025, 11, 2),
        (2026, 0, 2),
    ]


@pytest.mark.parametrize(
    "creation_date, target_date, total_target, current_saved",
    [
        (date(2025, 11, 20), date(2026, 3, 19), 1000, 0),
        (date(2023, 1, 31), date(2023, 3, 1), 99.99, 0),
        (date(2024, 2, 29), date(2027, 2, 28), 12345.67, 345.67),
        (date(2025, 6, 15), date(2025, 6, 16), 1, 0.5),
        (date(2025, 3, 1), date(2035, 3, 1), 1_000_000, 1),
    ],
)
def test_schedule_invariants(creation_date, target_date, total_target, current_saved):
    result = calculate_savings_schedule(creation_date, target_date, total_target, current_saved)
    remaining = total_target - current_saved

    assert sum(g.savings_goal for g in result.monthly_goals) == pytest.approx(remaining, abs=0.01)

    covered = sum(g.days_in_period for g in result.monthly_goals)
    assert covered - result.total_days in (0, 1)

    keys = [(g.year, g.month) for g in result.monthly_goals]
    assert keys == sorted(set(keys))
    assert all(g.days_in_period > 0 for g in result.monthly_goals)


def test_time_of_day_is_rounded_up_to_whole_days():
    result = calculate_savings_schedule(
        datetime(2025, 11, 20, 15, 0), datetime(2025, 11, 25, 9, 0), 500
    )

    assert result.total_days == 5
    assert result.monthly_goals[0].days_in_period == 6
    assert result.monthly_goals[0].savings_goal == pytest.approx(500)


def test_date_and_datetime_can_be_mixed():
    result = calculate_savings_schedule(date(2025, 11, 20), datetime(2025, 11, 20, 12, 0), 10)

    assert result.total_days == 1
    assert result.monthly_goals[0].days_in_period == 1
    assert result.monthly_goals[0].savings_goal == pytest.approx(10)


def test_compute_schedule_accepts_request_model():
    request = SchedulingRequest(
        creation_date=date(2025, 11, 20), target_date=date(2025, 11, 25), total_target=500
    )

    result = compute_schedule(request)

    assert result.monthly_goals[0].savings_goal == pytest.approx(500)


@pytest.mark.parametrize(
    "kwargs, message",
    [
        (dict(creation_date=date(2025, 11, 20), target_date=date(2025, 11, 20)), "before target date"),
        (dict(creation_date=date(2025, 11, 21), target_date=date(2025, 11, 20)), "before target date"),
        (dict(total_target=0), "positive"),
        (dict(total_target=-5), "positive"),
        (dict(total_target=math.inf), "positive"),
        (dict(total_target=math.nan), "positive"),
        (dict(current_saved=-1), "non-negative"),
        (dict(current_saved=500), "greater than or equal"),
        (dict(current_saved=600), "greater than or equal"),
        (dict(creation_date="2025-11-20"), "valid dates"),
        (
            dict(
                creation_date=datetime(2025, 11, 20),
                target_date=datetime(2025, 11, 25, tzinfo=timezone.utc),
            ),
            "timezone",
        ),
    ],
)
def test_precondition_violations_are_rejected(kwargs, message):
    args = dict(
        creation_date=date(2025, 11, 20),
        target_date=date(2025, 11, 25),
        total_target=500,
        current_saved=0,
    )
    args.update(kwargs)

    with pytest.raises(InvalidInputError, match=message):
        calculate_savings_schedule(**args)


def test_payment_schedule_uses_month_names():
    result = calculate_savings_schedule(date(2025, 11, 20), date(2026, 1, 10), 600)

    schedule = build_payment_schedule(result)

    assert [item.month for item in schedule] == ["November", "December", "January"]
    assert [item.year for item in schedule] == [2025, 2025, 2026]
    assert [item.days for item in schedule] == [11, 31, 10]
    assert schedule[0].payment == result.monthly_goals[0].savings_goal


def test_summary_reports_first_month_as_status_amount():
    result = calculate_savings_schedule(date(2025, 11, 20), date(2026, 3, 19), 1000)

    number_of_months, monthly_target, status_amount = summarize_schedule(result)

    assert number_of_months == 5
    assert monthly_target == pytest.approx(200)
    assert status_amount == result.monthly_goals[0].savings_goal


def test_aware_dates_in_different_offsets_share_one_calendar():
    kiribati = timezone(timedelta(hours=14))

    result = calculate_savings_schedule(
        datetime(2025, 11, 21, 1, 0, tzinfo=kiribati),
        datetime(2025, 11, 20, 12, 0, tzinfo=timezone.utc),
        100,
    )

    assert result.total_days == 1
    assert [(g.year, g.month, g.days_in_period) for g in result.monthly_goals] == [(2025, 10, 1)]
    assert sum(g.savings_goal for g in result.monthly_goals) == pytest.approx(100)


def test_decimal_amounts_are_accepted():
    result = calculate_savings_schedule(
        date(2025, 11, 20), date(2026, 3, 19), Decimal("1000.00"), Decimal("250.50")
    )

    assert result.total_calculated_savings == pytest.approx(749.5)
    assert sum(g.savings_goal for g in result.monthly_goals) == pytest.approx(749.5)


@pytest.mark.parametrize("total_target", [Decimal("NaN"), Decimal("-1"), True])
def test_non_numeric_or_non_positive_targets_are_rejected(total_target):
    with pytest.raises(InvalidInputError, match="positive"):
        calculate_savings_schedule(date(2025, 11, 20), date(2025, 11, 25), total_target)
