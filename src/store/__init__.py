"""
State store module.

Holds the shared in-memory todo list and latest weather/image.
"""

from src.models.todo_item import TodoValidationError
from src.store.state_store import StateStore

__all__ = [
    "StateStore",
    "TodoValidationError",
]
