"""
Environment models: the latest weather and image shown alongside todos.

Both are snapshots. They are built only from a complete provider response
and replaced wholesale on the next successful fetch; absence is expressed
as ``None`` by the holder, never by a sentinel instance.
"""

from dataclasses import dataclass, asdict


@dataclass(frozen=True)
class WeatherSnapshot:
    """
    Current weather at the configured coordinates.

    Attributes:
        temperature_celsius: Air temperature in °C.
        weather_code: WMO weather interpretation code from the provider.
        description: Human-readable description of the code.
    """

    temperature_celsius: float
    weather_code: int
    description: str

    def __post_init__(self) -> None:
        if not self.description or not self.description.strip():
            raise ValueError("WeatherSnapshot description cannot be empty")

    @property
    def summary(self) -> str:
        """One-line summary, e.g. ``Rain, 12.3°C``."""
        return f"{self.description}, {self.temperature_celsius:.1f}°C"

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ImageReference:
    """A single image picked by the image provider."""

    url: str

    def __post_init__(self) -> None:
        if not self.url or not self.url.strip():
            raise ValueError("ImageReference url cannot be empty")

    def to_dict(self) -> dict:
        return asdict(self)
