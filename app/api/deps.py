# app/api/deps.py
from fastapi import Request

from app.crud.goal import SavingsStore

def get_savings_store(request: Request) -> SavingsStore:
    """The savings store attached to the running application."""
    return request.app.state.savings_store
