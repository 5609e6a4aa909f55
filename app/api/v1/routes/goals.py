# app/api/v1/routes/goals.py
import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.schemas.goal import (
    ContributionRequest,
    SavingsCategory,
    SavingsCategoryCreate,
    SavingsCategoryUpdate,
    ScheduleResult,
    SchedulingRequest,
)
from app.utils.budgeting import (
    check_contribution,
    compute_schedule,
    new_savings_category,
    reschedule_savings_category,
)
from app.crud.goal import (
    AddSavingsCategory,
    ContributeToSavingsCategory,
    DeleteSavingsCategory,
    SavingsStore,
    UpdateSavingsCategory,
)
from app.api.deps import get_savings_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/goals", tags=["goals"])

def _get_or_404(store: SavingsStore, category_id: uuid.UUID) -> SavingsCategory:
    category = store.get_category(category_id)
    if not category:
        logger.warning(f"Savings category {category_id} not found")
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Savings category not found")
    return category

@router.post("/schedule", response_model=ScheduleResult)
async def calculate_schedule(schedule_in: SchedulingRequest):
    """
    Split a savings target into monthly contributions.

    - **creation_date**: First day of the plan. Defaults to today.
    - **target_date**: Day the full amount must be saved by.
    - **total_target**: Amount to reach.
    - **current_saved**: Amount already put aside (default 0).

    Returns the day count, the daily rate and one goal per calendar month.
    """
    return compute_schedule(schedule_in)

@router.get("/savings", response_model=List[SavingsCategory])
async def read_savings_categories(store: SavingsStore = Depends(get_savings_store)):
    return store.list_categories()

@router.post("/savings", response_model=SavingsCategory, status_code=status.HTTP_201_CREATED)
async def create_savings_category(
    category_in: SavingsCategoryCreate,
    store: SavingsStore = Depends(get_savings_store),
):
    category = new_savings_category(category_in)
    store.dispatch(AddSavingsCategory(category=category))
    return category

@router.get("/savings/{category_id}", response_model=SavingsCategory)
async def read_savings_category(
    category_id: uuid.UUID,
    store: SavingsStore = Depends(get_savings_store),
):
    return _get_or_404(store, category_id)

@router.patch("/savings/{category_id}", response_model=SavingsCategory)
async def update_savings_category(
    category_id: uuid.UUID,
    category_in: SavingsCategoryUpdate,
    store: SavingsStore = Depends(get_savings_store),
):
    category = _get_or_404(store, category_id)
    updates = reschedule_savings_category(category, category_in)
    store.dispatch(UpdateSavingsCategory(id=category_id, updates=updates))
    return _get_or_404(store, category_id)

@router.post("/savings/{category_id}/contributions", response_model=SavingsCategory)
async def contribute_to_savings_category(
    category_id: uuid.UUID,
    contribution: ContributionRequest,
    store: SavingsStore = Depends(get_savings_store),
):
    category = _get_or_404(store, category_id)
    check_contribution(category, contribution.amount)
    store.dispatch(ContributeToSavingsCategory(id=category_id, amount=contribution.amount))
    return _get_or_404(store, category_id)

@router.delete("/savings/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_savings_category(
    category_id: uuid.UUID,
    store: SavingsStore = Depends(get_savings_store),
):
    _get_or_404(store, category_id)
    store.dispatch(DeleteSavingsCategory(id=category_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
