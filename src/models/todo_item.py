"""
Todo item model for Todo Digest.

Defines the TodoItem dataclass, the unit of the shared todo list.
Items are immutable: toggling produces a new instance, so a snapshot
handed out by the state store never changes underneath its reader.
"""

from dataclasses import dataclass, asdict, replace


class TodoValidationError(ValueError):
    """Raised when a todo cannot be accepted (e.g. empty text)."""


@dataclass(frozen=True)
class TodoItem:
    """
    A single todo entry.

    Attributes:
        id: Positive integer, unique within the live list.
        text: The todo text as submitted (must be non-empty after trimming).
        completed: Whether the item has been checked off.
    """

    id: int
    text: str
    completed: bool = False

    def __post_init__(self) -> None:
        """Validate fields after initialization."""
        self.validate()

    def validate(self) -> None:
        """
        Validate that fields are present and valid.

        Raises:
            TodoValidationError: If validation fails.
        """
        errors = []

        if not isinstance(self.text, str) or not self.text.strip():
            errors.append("text is required and cannot be empty")

        if isinstance(self.id, bool) or not isinstance(self.id, int) or self.id < 1:
            errors.append(f"id must be a positive integer, got {self.id!r}")

        if errors:
            raise TodoValidationError(f"TodoItem validation failed: {'; '.join(errors)}")

    def toggled(self) -> "TodoItem":
        """Return a copy with the completed flag flipped."""
        return replace(self, completed=not self.completed)

    def to_checklist_line(self) -> str:
        """Render as a plaintext checklist line, e.g. ``- [X] Buy milk``."""
        mark = "X" if self.completed else " "
        return f"- [{mark}] {self.text}"

    def to_dict(self) -> dict:
        """Convert to a plain dictionary for JSON responses."""
        return asdict(self)

    def __str__(self) -> str:
        return self.to_checklist_line()
