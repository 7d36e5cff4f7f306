"""
In-memory application state store for Todo Digest.

The StateStore is the single owner of ApplicationState. Request handlers
add, toggle and delete todos through it; the digest pipeline replaces the
weather/image fields through it. Every operation runs as one critical
section under a single lock, so operations are linearizable and no update
is lost when request threads and the scheduler thread interleave.

State is volatile: it lives for the process lifetime and is lost on exit.
"""

import logging
import threading
from typing import Optional, Tuple

from src.models.app_state import ApplicationState
from src.models.environment import WeatherSnapshot, ImageReference
from src.models.todo_item import TodoItem, TodoValidationError

logger = logging.getLogger(__name__)


class StateStore:
    """
    Lock-guarded holder of the current ApplicationState.

    Usage:
        store = StateStore()
        item = store.add_todo("Buy milk")     # id 1
        todos = store.toggle_todo(item.id)    # updated todos snapshot
        state = store.read()                  # immutable snapshot

    Callers only ever receive immutable values (ApplicationState, TodoItem,
    tuples of TodoItem), so nothing outside the store can mutate state
    without going through the lock.
    """

    def __init__(self, initial: Optional[ApplicationState] = None):
        """
        Initialize the store.

        Args:
            initial: Starting state. Defaults to an empty ApplicationState.
        """
        self._lock = threading.Lock()
        self._state = initial if initial is not None else ApplicationState()

    # =========================================================================
    # Todo operations (called by request handlers)
    # =========================================================================

    def add_todo(self, text: str) -> TodoItem:
        """
        Add a todo at the head of the list.

        The new id is (max existing id) + 1, or 1 when the list is empty.

        Args:
            text: Todo text. Stored as given; must be non-empty after trimming.

        Returns:
            The newly created TodoItem.

        Raises:
            TodoValidationError: If text is empty or whitespace only.
        """
        item, _ = self.add_todo_and_list(text)
        return item

    def add_todo_and_list(self, text: str) -> Tuple[TodoItem, Tuple[TodoItem, ...]]:
        """
        Add a todo and return it with the todos snapshot taken in the same
        critical section, so the list always contains the new item.

        Raises:
            TodoValidationError: If text is empty or whitespace only.
        """
        if text is None or not str(text).strip():
            raise TodoValidationError("Missing todo text")

        with self._lock:
            item = TodoItem(id=self._state.next_todo_id, text=text)
            self._state = self._state.with_todos((item,) + self._state.todos)
            todos = self._state.todos

        logger.debug(f"Added todo {item.id}: {item.text!r}")
        return item, todos

    def toggle_todo(self, todo_id: int) -> Tuple[TodoItem, ...]:
        """
        Flip the completed flag of the matching todo.

        Unknown ids are tolerated: the call is a no-op and the unchanged
        todos are returned (a client may race with a delete).

        Returns:
            Todos snapshot after the operation.
        """
        with self._lock:
            if self._state.find_todo(todo_id) is None:
                logger.debug(f"Toggle ignored, no todo with id {todo_id}")
                return self._state.todos

            todos = tuple(
                todo.toggled() if todo.id == todo_id else todo
                for todo in self._state.todos
            )
            self._state = self._state.with_todos(todos)
            return self._state.todos

    def delete_todo(self, todo_id: int) -> Tuple[TodoItem, ...]:
        """
        Remove the matching todo if present; no-op otherwise.

        Returns:
            Todos snapshot after the operation.
        """
        with self._lock:
            if self._state.find_todo(todo_id) is None:
                logger.debug(f"Delete ignored, no todo with id {todo_id}")
                return self._state.todos

            todos = tuple(todo for todo in self._state.todos if todo.id != todo_id)
            self._state = self._state.with_todos(todos)
            return self._state.todos

    def clear_todos(self) -> None:
        """Remove all todos (for testing and operator resets)."""
        with self._lock:
            self._state = self._state.with_todos(())

    # =========================================================================
    # Environment (called by the digest pipeline)
    # =========================================================================

    def replace_environment(
        self,
        weather: Optional[WeatherSnapshot],
        image: Optional[ImageReference],
    ) -> None:
        """
        Replace weather and image wholesale.

        None is a valid value for either and means "unavailable".
        """
        with self._lock:
            self._state = self._state.with_environment(weather, image)

        logger.debug(
            f"Environment replaced (weather={'yes' if weather else 'no'}, "
            f"image={'yes' if image else 'no'})"
        )

    # =========================================================================
    # Reads
    # =========================================================================

    def read(self) -> ApplicationState:
        """Return the current immutable state snapshot."""
        with self._lock:
            return self._state

    def todos(self) -> Tuple[TodoItem, ...]:
        """Return the current todos snapshot."""
        return self.read().todos

    def __len__(self) -> int:
        return len(self.todos())

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} todos={len(self)}>"
