# app/schemas/goal.py
import calendar
from typing import List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field
from datetime import date
import uuid

# ------------------------------------------------------------
# SCHEDULER
# ------------------------------------------------------------

class SchedulingRequest(BaseModel):
    creation_date: Optional[date] = Field(
        None, description="Day the goal is set up. Defaults to today."
    )
    target_date: date = Field(..., description="Day the full amount must be saved by")
    total_target: float = Field(..., description="Amount the goal must reach")
    current_saved: float = Field(0.0, description="Amount already put aside for the goal")

class MonthlyGoal(BaseModel):
    """Slice of a savings goal falling into one calendar month.

    ``month`` is zero based (0 = January) to match the stored schedules.
    """
    model_config = ConfigDict(frozen=True)

    year: int
    month: int = Field(..., ge=0, le=11)
    days_in_period: int = Field(..., gt=0)
    savings_goal: float

    @property
    def month_name(self) -> str:
        return calendar.month_name[self.month + 1]

class ScheduleResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_days: int
    daily_savings: float
    monthly_goals: List[MonthlyGoal]
    total_calculated_savings: float

# ------------------------------------------------------------
# SAVINGS CATEGORIES
# ------------------------------------------------------------

class PaymentScheduleItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    month: str
    year: int
    days: int
    payment: float

class SavingsCategoryCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, description="E.g. Emergency Fund")
    target_date: date
    savings_target: float
    creation_date: Optional[date] = None

class SavingsCategoryUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1)
    target_date: Optional[date] = None
    savings_target: Optional[float] = None

class ContributionRequest(BaseModel):
    amount: float = Field(..., gt=0, description="Amount moved into the goal")

class SavingsCategory(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    name: str
    creation_date: date
    target_date: date
    general_target: float
    general_saved: float = 0.0
    monthly_saved: float = 0.0
    monthly_target: float
    status_amount: float
    needed_status: str = "Needed"
    number_of_months: int
    payment_schedule: Tuple[PaymentScheduleItem, ...] = ()
