# app/crud/goal.py
import logging
import threading
import uuid
from typing import Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict

from app.schemas.goal import SavingsCategory

logger = logging.getLogger(__name__)


class SavingsState(BaseModel):
    model_config = ConfigDict(frozen=True)

    categories: Tuple[SavingsCategory, ...] = ()


# ------------------------------------------------------------
# ACTIONS
# ------------------------------------------------------------

class AddSavingsCategory(BaseModel):
    type: Literal["ADD_SAVINGS_CATEGORY"] = "ADD_SAVINGS_CATEGORY"
    category: SavingsCategory

class UpdateSavingsCategory(BaseModel):
    type: Literal["UPDATE_SAVINGS_CATEGORY"] = "UPDATE_SAVINGS_CATEGORY"
    id: uuid.UUID
    updates: Dict[str, Any]

class ContributeToSavingsCategory(BaseModel):
    type: Literal["CONTRIBUTE_TO_SAVINGS_CATEGORY"] = "CONTRIBUTE_TO_SAVINGS_CATEGORY"
    id: uuid.UUID
    amount: float

class DeleteSavingsCategory(BaseModel):
    type: Literal["DELETE_SAVINGS_CATEGORY"] = "DELETE_SAVINGS_CATEGORY"
    id: uuid.UUID

SavingsAction = Union[
    AddSavingsCategory,
    UpdateSavingsCategory,
    ContributeToSavingsCategory,
    DeleteSavingsCategory,
]


# ------------------------------------------------------------
# REDUCER
# ------------------------------------------------------------

def _replace(state: SavingsState, category_id: uuid.UUID, **updates) -> SavingsState:
    return SavingsState(categories=tuple(
        category.model_copy(update=updates) if category.id == category_id else category
        for category in state.categories
    ))

def savings_reducer(state: SavingsState, action: SavingsAction) -> SavingsState:
    """Return the state that results from applying ``action`` to ``state``.

    Actions naming an unknown category leave the state as it was.
    """
    if isinstance(action, AddSavingsCategory):
        return SavingsState(categories=state.categories + (action.category,))

    if isinstance(action, UpdateSavingsCategory):
        updates = {k: v for k, v in action.updates.items() if k != "id"}
        return _replace(state, action.id, **updates)

    if isinstance(action, ContributeToSavingsCategory):
        category = _find(state, action.id)
        if category is None:
            return state
        return _replace(
            state,
            action.id,
            general_saved=category.general_saved + action.amount,
            monthly_saved=category.monthly_saved + action.amount,
        )

    if isinstance(action, DeleteSavingsCategory):
        return SavingsState(categories=tuple(
            category for category in state.categories if category.id != action.id
        ))

    raise TypeError(f"Unsupported savings action: {action!r}")

def _find(state: SavingsState, category_id: uuid.UUID) -> Optional[SavingsCategory]:
    for category in state.categories:
        if category.id == category_id:
            return category
    return None


# ------------------------------------------------------------
# STORE
# ------------------------------------------------------------

class SavingsStore:
    """Holds the current savings state; every change goes through ``dispatch``."""

    def __init__(self, initial_state: Optional[SavingsState] = None):
        self._state = initial_state or SavingsState()
        self._lock = threading.Lock()

    def get_state(self) -> SavingsState:
        return self._state

    def dispatch(self, action: SavingsAction) -> SavingsState:
        with self._lock:
            self._state = savings_reducer(self._state, action)
            logger.info("Dispatched %s", action.type)
            return self._state

    def list_categories(self) -> List[SavingsCategory]:
        return list(self._state.categories)

    def get_category(self, category_id: uuid.UUID) -> Optional[SavingsCategory]:
        return _find(self._state, category_id)
