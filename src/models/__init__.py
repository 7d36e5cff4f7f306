"""
Data models module.

Defines data structures for todos, weather, images and the aggregate state.
"""

from src.models.todo_item import TodoItem, TodoValidationError
from src.models.environment import WeatherSnapshot, ImageReference
from src.models.app_state import ApplicationState

__all__ = [
    "TodoItem",
    "TodoValidationError",
    "WeatherSnapshot",
    "ImageReference",
    "ApplicationState",
]
