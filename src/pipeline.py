"""
Todo Digest Pipeline - Core execution logic.

This module orchestrates one digest cycle:

    Weather + Image → State Store → Compose → Send → Summary

Steps:
1. Fetch weather and image (independent; either may fail)
2. Write both into the state store (absence is a valid value)
3. Read the current todos from the store
4. Compose the plaintext digest
5. Send it via the mail sender
6. Return a PipelineResult

Design principles:
- Error isolation: a failed fetch never stops the cycle
- The cycle always completes: send failures and unexpected errors are
  logged and recorded in the result, never raised
- Store access only through the StateStore operations
"""

import logging
import traceback
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from src.digest import DigestMessage, compose_digest
from src.mail import DIGEST_SUBJECT, MailSender, SendResult
from src.models.environment import ImageReference, WeatherSnapshot
from src.sources import OpenMeteoWeatherSource, UnsplashImageSource
from src.sources.base import FetchResult, Source
from src.store import StateStore

logger = logging.getLogger(__name__)


# =============================================================================
# Pipeline Result Data Structures
# =============================================================================

@dataclass
class SourceResult:
    """Result of fetching from a single source."""
    source_name: str
    success: bool
    error: Optional[str] = None
    duration_ms: float = 0.0


@dataclass
class PipelineResult:
    """Complete result of a digest cycle."""
    started_at: datetime
    finished_at: Optional[datetime] = None

    source_results: List[SourceResult] = field(default_factory=list)

    weather: Optional[WeatherSnapshot] = None
    image: Optional[ImageReference] = None

    digest: Optional[DigestMessage] = None
    send_result: Optional[SendResult] = None

    errors: List[str] = field(default_factory=list)

    @property
    def sources_succeeded(self) -> int:
        return sum(1 for r in self.source_results if r.success)

    @property
    def sources_failed(self) -> int:
        return sum(1 for r in self.source_results if not r.success)

    @property
    def email_sent(self) -> bool:
        return self.send_result is not None and self.send_result.success

    @property
    def duration_seconds(self) -> float:
        """Total pipeline duration in seconds."""
        if self.finished_at:
            return (self.finished_at - self.started_at).total_seconds()
        return 0.0

    def to_summary(self) -> str:
        """Generate a human-readable summary."""
        lines = [
            "=" * 60,
            "DIGEST EXECUTION SUMMARY",
            "=" * 60,
            f"Started:  {self.started_at.strftime('%Y-%m-%d %H:%M:%S')}",
            f"Duration: {self.duration_seconds:.2f}s",
            "",
            "Sources:",
        ]

        for sr in self.source_results:
            status = "✓" if sr.success else "✗"
            lines.append(f"  {status} {sr.source_name} ({sr.duration_ms:.0f}ms)")
            if sr.error:
                lines.append(f"      Error: {sr.error}")

        if self.digest:
            lines.extend([
                "",
                f"Todos in digest: {self.digest.todo_count}",
            ])

        lines.append("")
        if self.send_result is None:
            lines.append("Email: NOT ATTEMPTED")
        elif self.send_result.success:
            lines.append("Email: SENT")
        else:
            lines.append(f"Email: FAILED ({self.send_result.error})")

        if self.errors:
            lines.extend([
                "",
                "Errors:",
            ])
            for error in self.errors[:5]:  # Show first 5
                lines.append(f"  - {error}")

        lines.append("=" * 60)
        return "\n".join(lines)


# =============================================================================
# Pipeline Class
# =============================================================================

class DigestPipeline:
    """
    Runs one fetch-fetch-compose-send cycle against a StateStore.

    Usage:
        pipeline = DigestPipeline(store)
        result = pipeline.run()
        print(result.to_summary())

    Sources and sender default to the configured Open-Meteo, Unsplash and
    SMTP implementations; tests pass their own.
    """

    def __init__(
        self,
        store: StateStore,
        weather_source: Source = None,
        image_source: Source = None,
        mail_sender: MailSender = None,
        subject: str = DIGEST_SUBJECT,
    ):
        self.store = store
        self.weather_source = weather_source or OpenMeteoWeatherSource()
        self.image_source = image_source or UnsplashImageSource()
        self.mail_sender = mail_sender or MailSender()
        self.subject = subject

    def _fetch_from_source(self, source: Source) -> tuple:
        """
        Fetch from a single source with error isolation.

        Sources are expected not to raise; anything that escapes is
        recorded as a failure here.

        Returns:
            Tuple of (value or None, SourceResult).
        """
        start_time = datetime.now()

        try:
            fetched: FetchResult = source.fetch()
        except Exception as e:
            duration_ms = (datetime.now() - start_time).total_seconds() * 1000
            error_msg = f"{type(e).__name__}: {e}"
            logger.error(f"[{source.name}] Unexpected error: {error_msg}")
            return None, SourceResult(
                source_name=source.name,
                success=False,
                error=error_msg,
                duration_ms=duration_ms,
            )

        return fetched.value, SourceResult(
            source_name=source.name,
            success=fetched.success,
            error=fetched.error,
            duration_ms=fetched.duration_ms,
        )

    def refresh_environment(self, result: PipelineResult = None) -> PipelineResult:
        """
        Fetch weather and image and write them into the store.

        Used on its own to warm the store at startup, and as the first
        half of run().
        """
        if result is None:
            result = PipelineResult(started_at=datetime.now())

        weather, weather_result = self._fetch_from_source(self.weather_source)
        image, image_result = self._fetch_from_source(self.image_source)
        result.source_results.extend([weather_result, image_result])

        result.weather = weather
        result.image = image
        self.store.replace_environment(weather, image)

        return result

    def compose(self, result: PipelineResult) -> DigestMessage:
        """Compose the digest from the store's todos and the fetched environment."""
        state = self.store.read().with_environment(result.weather, result.image)
        return compose_digest(state, self.subject)

    def run(self) -> PipelineResult:
        """
        Execute one digest cycle. Always returns; never raises.

        Returns:
            PipelineResult with execution details.
        """
        result = PipelineResult(started_at=datetime.now())
        logger.info("Digest cycle started")

        try:
            # Steps 1-2: fetch and store environment
            self.refresh_environment(result)

            # Steps 3-4: compose
            result.digest = self.compose(result)

            # Step 5: send
            result.send_result = self.mail_sender.send(result.digest.subject, result.digest.body)
            if result.send_result.success:
                logger.info("Daily email sent successfully")
            else:
                logger.error(f"Daily email not sent: {result.send_result.error}")
                result.errors.append(result.send_result.error or "Failed to send email")

        except Exception as e:
            logger.error(f"Digest cycle error: {type(e).__name__}: {e}")
            result.errors.append(f"Pipeline error: {e}")
            logger.debug(traceback.format_exc())

        result.finished_at = datetime.now()
        logger.info(f"Digest cycle finished in {result.duration_seconds:.2f}s")
        return result


# =============================================================================
# Convenience Functions
# =============================================================================

def run_digest(store: StateStore) -> PipelineResult:
    """
    Run one digest cycle with configured sources and mail sender.

    Convenience function for programmatic use.
    """
    return DigestPipeline(store).run()
