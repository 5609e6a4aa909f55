# app/utils/budgeting.py
import calendar
import math
import numbers
from datetime import datetime, date, time
from decimal import Decimal
from typing import List, Optional, Tuple, Union

from app.schemas.goal import (
    MonthlyGoal,
    PaymentScheduleItem,
    SavingsCategory,
    SavingsCategoryCreate,
    SavingsCategoryUpdate,
    ScheduleResult,
    SchedulingRequest,
)

DateLike = Union[date, datetime]

SECONDS_PER_DAY = 24 * 60 * 60
RECONCILIATION_TOLERANCE = 0.01


class InvalidInputError(ValueError):
    """A savings schedule was requested with inconsistent inputs."""


class ContributionLimitError(ValueError):
    """A contribution would push a goal past its target."""


# ────────────────────────────────────────────────────────────────────────────────
# MAIN ENTRY
# ────────────────────────────────────────────────────────────────────────────────
def compute_schedule(request: SchedulingRequest) -> ScheduleResult:
    creation_date = request.creation_date or date.today()
    return calculate_savings_schedule(
        creation_date,
        request.target_date,
        request.total_target,
        request.current_saved,
    )


def calculate_savings_schedule(
    creation_date: DateLike,
    target_date: DateLike,
    total_target: float,
    current_saved: float = 0.0
) -> ScheduleResult:
    """
    Split the amount still needed for a goal into calendar-month installments.

    Every day between creation and target carries the same share of the
    remaining amount; a month's goal is that daily share times the number
    of its days inside the window. Any drift between the monthly sum and
    the remaining amount is absorbed by the last month.
    """
    start, end, total_target, current_saved = _validate(
        creation_date, target_date, total_target, current_saved
    )

    total_days     = max(1, math.ceil((end - start).total_seconds() / SECONDS_PER_DAY))
    remaining      = total_target - current_saved
    daily_savings  = remaining / total_days

    periods: List[Tuple[int, int, int]] = []
    cursor = start
    while cursor < end:
        dim = _days_in_month(cursor)

        start_day = start.day if _same_month(cursor, start) else 1
        end_day   = end.day   if _same_month(cursor, end)   else dim

        days_in_period = max(0, end_day - start_day + 1)
        if days_in_period > 0:
            periods.append((cursor.year, cursor.month - 1, days_in_period))

        cursor = _first_of_next_month(cursor)

    goals = [days * daily_savings for _, _, days in periods]

    # Reconcile: last installment takes whatever the pro-rata split missed
    if goals:
        difference = remaining - sum(goals)
        if abs(difference) > RECONCILIATION_TOLERANCE:
            goals[-1] += difference

    return ScheduleResult(
        total_days=total_days,
        daily_savings=daily_savings,
        monthly_goals=[
            MonthlyGoal(year=year, month=month, days_in_period=days, savings_goal=goal)
            for (year, month, days), goal in zip(periods, goals)
        ],
        total_calculated_savings=remaining,
    )


# ────────────────────────────────────────────────────────────────────────────────
# HELPERS – VALIDATION
# ────────────────────────────────────────────────────────────────────────────────
def _validate(creation_date, target_date, total_target, current_saved
              ) -> Tuple[datetime, datetime, float, float]:
    if not isinstance(creation_date, date) or not isinstance(target_date, date):
        raise InvalidInputError("Creation date and target date must be valid dates")

    start, end = _as_datetime(creation_date), _as_datetime(target_date)
    try:
        in_order = start < end
    except TypeError:
        raise InvalidInputError(
            "Creation date and target date must both be timezone-aware or both naive"
        )
    if not in_order:
        raise InvalidInputError("Creation date must be before target date")

    # Day and month numbers are read in the creation date's offset
    if start.tzinfo is not None:
        end = end.astimezone(start.tzinfo)

    if not _is_finite_number(total_target) or total_target <= 0:
        raise InvalidInputError("Total target must be a positive number")

    if not _is_finite_number(current_saved) or current_saved < 0:
        raise InvalidInputError("Current saved amount must be a non-negative number")

    if current_saved >= total_target:
        raise InvalidInputError(
            "Current saved amount cannot be greater than or equal to total target"
        )

    return start, end, float(total_target), float(current_saved)


def _is_finite_number(value) -> bool:
    """Real numbers and Decimals count; bools do not."""
    if isinstance(value, bool) or not isinstance(value, (numbers.Real, Decimal)):
        return False
    if isinstance(value, Decimal):
        return value.is_finite()
    return math.isfinite(value)


# ────────────────────────────────────────────────────────────────────────────────
# HELPERS – CALENDAR
# ────────────────────────────────────────────────────────────────────────────────
def _as_datetime(day: DateLike) -> datetime:
    if isinstance(day, datetime):
        return day
    return datetime.combine(day, time.min)


def _days_in_month(day: DateLike) -> int:
    return calendar.monthrange(day.year, day.month)[1]


def _same_month(a: DateLike, b: DateLike) -> bool:
    return a.year == b.year and a.month == b.month


def _first_of_next_month(moment: datetime) -> datetime:
    """Midnight on the 1st of the following month, as a new value."""
    if moment.month == 12:
        year, month = moment.year + 1, 1
    else:
        year, month = moment.year, moment.month + 1
    return datetime(year, month, 1, tzinfo=moment.tzinfo)


# ────────────────────────────────────────────────────────────────────────────────
# PAYMENT PLANS
# ────────────────────────────────────────────────────────────────────────────────
def build_payment_schedule(result: ScheduleResult) -> List[PaymentScheduleItem]:
    return [
        PaymentScheduleItem(
            month=goal.month_name,
            year=goal.year,
            days=goal.days_in_period,
            payment=goal.savings_goal,
        )
        for goal in result.monthly_goals
    ]


def summarize_schedule(result: ScheduleResult) -> Tuple[int, float, float]:
    """
    Return ``(number_of_months, monthly_target, status_amount)``.

    ``status_amount`` is what the user should put aside in the first month
    of the plan; it falls back to the monthly average when there is no plan.
    """
    number_of_months = len(result.monthly_goals)
    remaining        = result.total_calculated_savings
    monthly_target   = remaining / number_of_months if number_of_months else 0.0

    if result.monthly_goals:
        status_amount = result.monthly_goals[0].savings_goal
    else:
        status_amount = monthly_target

    return number_of_months, monthly_target, status_amount


def new_savings_category(payload: SavingsCategoryCreate,
                         today: Optional[date] = None) -> SavingsCategory:
    """Build a fresh savings goal with its payment plan from the create form."""
    creation_date = payload.creation_date or today or date.today()
    result = calculate_savings_schedule(creation_date, payload.target_date,
                                        payload.savings_target)
    number_of_months, monthly_target, status_amount = summarize_schedule(result)

    return SavingsCategory(
        name=payload.name.strip(),
        creation_date=creation_date,
        target_date=payload.target_date,
        general_target=payload.savings_target,
        monthly_target=monthly_target,
        status_amount=status_amount,
        number_of_months=number_of_months,
        payment_schedule=tuple(build_payment_schedule(result)),
    )


def reschedule_savings_category(category: SavingsCategory,
                                changes: SavingsCategoryUpdate) -> dict:
    """
    Recompute the plan for an edited goal.

    The plan still starts at the goal's original creation date and only
    covers what is not saved yet. Returns the field updates to apply.
    """
    target      = changes.savings_target if changes.savings_target is not None else category.general_target
    target_date = changes.target_date or category.target_date
    name        = changes.name.strip() if changes.name else category.name

    result = calculate_savings_schedule(category.creation_date, target_date,
                                        target, category.general_saved)
    number_of_months, monthly_target, status_amount = summarize_schedule(result)

    return {
        "name":             name,
        "general_target":   target,
        "target_date":      target_date,
        "payment_schedule": tuple(build_payment_schedule(result)),
        "monthly_target":   monthly_target,
        "status_amount":    status_amount,
        "number_of_months": number_of_months,
    }


def check_contribution(category: SavingsCategory, amount: float) -> None:
    """Reject contributions that are not positive or overshoot the goal."""
    if not _is_finite_number(amount) or amount <= 0:
        raise InvalidInputError("Contribution amount must be a positive number")

    amount        = float(amount)
    current_saved = category.general_saved
    target        = category.general_target
    if current_saved + amount > target:
        raise ContributionLimitError(
            f"You can't add more than your savings target of {target:.2f}. "
            f"Your current savings: {current_saved:.2f}. "
            f"Attempted contribution: {amount:.2f}. "
            f"The maximum you can add now is {target - current_saved:.2f}."
        )
