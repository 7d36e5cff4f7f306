"""
Pytest Configuration and Fixtures

This module provides:
- Shared fixtures for all tests (store, fake sources, fake mail sender)
- Test category markers
"""

import pytest
import sys
from pathlib import Path
from typing import List, Optional, Tuple

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.mail.sender import SendResult
from src.models.environment import ImageReference, WeatherSnapshot
from src.sources.base import FetchResult, Source
from src.store import StateStore

# Import test configuration
from tests.test_config import CONFIG, EXPECTED, TEST_DATA, TEST_CATEGORIES


# =============================================================================
# TEST DOUBLES
# =============================================================================

class StaticSource(Source):
    """A source that returns a fixed value (or a fixed failure)."""

    def __init__(self, name: str, value=None, error: str = None):
        self._name = name
        self._value = value
        self._error = error
        self.calls = 0

    @property
    def name(self) -> str:
        return self._name

    def fetch(self) -> FetchResult:
        self.calls += 1
        if self._value is None:
            return FetchResult.failed(self._error or "Simulated failure")
        return FetchResult.ok(self._value)


class RecordingMailSender:
    """Stands in for MailSender; records every send attempt."""

    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.sent: List[Tuple[str, str]] = []

    def send(self, subject: str, body: str) -> SendResult:
        self.sent.append((subject, body))
        if self.succeed:
            return SendResult(success=True, message="Email sent")
        return SendResult(success=False, error="Failed to send email: relay refused")

    @property
    def last_body(self) -> Optional[str]:
        return self.sent[-1][1] if self.sent else None


# =============================================================================
# SHARED FIXTURES
# =============================================================================

@pytest.fixture
def store():
    """Provide an empty state store."""
    return StateStore()


@pytest.fixture
def weather():
    return WeatherSnapshot(temperature_celsius=12.3, weather_code=61, description="Rain")


@pytest.fixture
def image():
    return ImageReference(url=TEST_DATA["image_payload"]["urls"]["regular"])


@pytest.fixture
def weather_source(weather):
    return StaticSource("open-meteo", value=weather)


@pytest.fixture
def image_source(image):
    return StaticSource("unsplash", value=image)


@pytest.fixture
def failing_weather_source():
    return StaticSource("open-meteo", error="Request failed: timeout")


@pytest.fixture
def failing_image_source():
    return StaticSource("unsplash", error="Request failed: 401 Unauthorized")


@pytest.fixture
def mail_sender():
    return RecordingMailSender()


@pytest.fixture
def failing_mail_sender():
    return RecordingMailSender(succeed=False)


@pytest.fixture
def test_config():
    """Provide access to test configuration."""
    return CONFIG


@pytest.fixture
def expected_values():
    """Provide access to expected values."""
    return EXPECTED


# =============================================================================
# MARKERS FOR TEST CATEGORIES
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    for marker, info in TEST_CATEGORIES.items():
        config.addinivalue_line("markers", f"{marker}: {info['description']}")
