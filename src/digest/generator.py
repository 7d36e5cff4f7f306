"""
Daily Digest composer for Todo Digest.

Builds the plaintext digest email from a state snapshot:

    Good morning!

    Your todos:
    - [ ] Walk dog
    - [X] Buy milk

    Weather: Rain, 12.3°C

    Daily image: https://images.unsplash.com/...

Missing weather or image data renders an "unavailable" placeholder line;
the digest is always composable.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from src.mail.sender import DIGEST_SUBJECT
from src.models.app_state import ApplicationState
from src.models.environment import WeatherSnapshot, ImageReference
from src.models.todo_item import TodoItem


GREETING = "Good morning!"
NO_TODOS_TEXT = "No todos today!"
WEATHER_UNAVAILABLE_TEXT = "Weather data unavailable"
IMAGE_UNAVAILABLE_TEXT = "Daily image unavailable"


@dataclass(frozen=True)
class DigestMessage:
    """
    A composed digest ready to send.

    Attributes:
        subject: Email subject line.
        body: Plaintext body.
        todo_count: Number of todos rendered.
    """
    subject: str
    body: str
    todo_count: int = 0


def render_todo_checklist(todos: Iterable[TodoItem]) -> str:
    """
    Render todos as a checklist, one line per item, in the given order.

    Returns:
        Lines like "- [X] Buy milk", or NO_TODOS_TEXT for an empty list.
    """
    lines = [todo.to_checklist_line() for todo in todos]
    if not lines:
        return NO_TODOS_TEXT
    return "\n".join(lines)


def format_weather_line(weather: Optional[WeatherSnapshot]) -> str:
    if weather is None:
        return WEATHER_UNAVAILABLE_TEXT
    return f"Weather: {weather.summary}"


def format_image_line(image: Optional[ImageReference]) -> str:
    if image is None:
        return IMAGE_UNAVAILABLE_TEXT
    return f"Daily image: {image.url}"


def compose_digest_body(
    todos: Iterable[TodoItem],
    weather: Optional[WeatherSnapshot],
    image: Optional[ImageReference],
) -> str:
    """
    Compose the digest body.

    Args:
        todos: Todos in display order.
        weather: Latest weather, or None.
        image: Latest image, or None.

    Returns:
        Plaintext body.
    """
    sections = [
        GREETING,
        f"Your todos:\n{render_todo_checklist(todos)}",
        format_weather_line(weather),
        format_image_line(image),
    ]
    return "\n\n".join(sections)


def compose_digest(state: ApplicationState, subject: str = DIGEST_SUBJECT) -> DigestMessage:
    """
    Compose a full DigestMessage from a state snapshot.

    Args:
        state: Snapshot read from the state store.
        subject: Subject line (default: the fixed digest subject).
    """
    return DigestMessage(
        subject=subject,
        body=compose_digest_body(state.todos, state.weather, state.image),
        todo_count=len(state.todos),
    )
