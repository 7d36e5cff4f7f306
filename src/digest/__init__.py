"""
Digest module.

Composes the daily plaintext digest from todos, weather and image.
"""

from src.digest.generator import (
    DigestMessage,
    NO_TODOS_TEXT,
    WEATHER_UNAVAILABLE_TEXT,
    IMAGE_UNAVAILABLE_TEXT,
    render_todo_checklist,
    format_weather_line,
    format_image_line,
    compose_digest_body,
    compose_digest,
)

__all__ = [
    "DigestMessage",
    "NO_TODOS_TEXT",
    "WEATHER_UNAVAILABLE_TEXT",
    "IMAGE_UNAVAILABLE_TEXT",
    "render_todo_checklist",
    "format_weather_line",
    "format_image_line",
    "compose_digest_body",
    "compose_digest",
]
