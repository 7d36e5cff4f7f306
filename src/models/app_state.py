"""
Aggregate application state.

ApplicationState is the single unit of shared state in the process.
Instances are immutable snapshots; the state store swaps in a new
instance on every write.
"""

from dataclasses import dataclass, replace
from typing import Optional, Tuple

from src.models.todo_item import TodoItem
from src.models.environment import WeatherSnapshot, ImageReference


@dataclass(frozen=True)
class ApplicationState:
    """
    Todos plus the latest environment data.

    Attributes:
        todos: Todo items, most recent first. Ids are unique.
        weather: Latest weather, or None if unavailable.
        image: Latest image, or None if unavailable.
    """

    todos: Tuple[TodoItem, ...] = ()
    weather: Optional[WeatherSnapshot] = None
    image: Optional[ImageReference] = None

    def __post_init__(self) -> None:
        # Lists are accepted for convenience but stored as a tuple
        if not isinstance(self.todos, tuple):
            object.__setattr__(self, "todos", tuple(self.todos))

        ids = [todo.id for todo in self.todos]
        if len(ids) != len(set(ids)):
            raise ValueError(f"ApplicationState todos contain duplicate ids: {ids}")

    @property
    def next_todo_id(self) -> int:
        """Id the next added todo receives: max existing id + 1, or 1."""
        if not self.todos:
            return 1
        return max(todo.id for todo in self.todos) + 1

    def find_todo(self, todo_id: int) -> Optional[TodoItem]:
        for todo in self.todos:
            if todo.id == todo_id:
                return todo
        return None

    def with_todos(self, todos) -> "ApplicationState":
        return replace(self, todos=tuple(todos))

    def with_environment(
        self,
        weather: Optional[WeatherSnapshot],
        image: Optional[ImageReference],
    ) -> "ApplicationState":
        return replace(self, weather=weather, image=image)

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "todos": [todo.to_dict() for todo in self.todos],
            "weather": self.weather.to_dict() if self.weather else None,
            "image": self.image.to_dict() if self.image else None,
        }
