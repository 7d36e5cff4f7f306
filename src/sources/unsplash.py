"""
Unsplash image source.

Fetches a single random photo URL from the Unsplash API.
API Documentation: https://unsplash.com/documentation#get-a-random-photo
"""

import logging
import time
from typing import Dict, Optional

import requests

from src.config import REQUEST_TIMEOUT, UNSPLASH_ACCESS_KEY, UNSPLASH_QUERY
from src.models.environment import ImageReference
from src.sources.base import FetchResult, Source

logger = logging.getLogger(__name__)


UNSPLASH_RANDOM_PHOTO_URL = "https://api.unsplash.com/photos/random"


class UnsplashImageSource(Source[ImageReference]):
    """
    Fetches one random photo for a fixed query term.

    Authenticates with the public access key ("Client-ID <key>") and
    extracts ``urls.regular`` from the response.
    """

    def __init__(
        self,
        access_key: str = None,
        query: str = None,
        timeout: float = None,
    ):
        """
        Initialize the image source.

        Args:
            access_key: Defaults to config.UNSPLASH_ACCESS_KEY.
            query: Search term. Defaults to config.UNSPLASH_QUERY.
            timeout: Request timeout in seconds. Defaults to config.REQUEST_TIMEOUT.
        """
        # Fall back to config only if None (not empty string)
        self.access_key = access_key if access_key is not None else UNSPLASH_ACCESS_KEY
        self.query = query if query is not None else UNSPLASH_QUERY
        self.timeout = timeout if timeout is not None else REQUEST_TIMEOUT

    @property
    def name(self) -> str:
        return "unsplash"

    @property
    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Client-ID {self.access_key}",
            "Accept-Version": "v1",
        }

    def fetch(self) -> FetchResult[ImageReference]:
        """
        Fetch a random image URL.

        Returns:
            FetchResult holding an ImageReference, or the failure reason.
        """
        start = time.monotonic()

        if not self.access_key:
            return self._failed("UNSPLASH_ACCESS_KEY is not configured", start)

        try:
            response = requests.get(
                UNSPLASH_RANDOM_PHOTO_URL,
                params={"query": self.query},
                headers=self._headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            image = self._parse(response.json())

        except requests.RequestException as e:
            return self._failed(f"Request failed: {e}", start)
        except (ValueError, KeyError, TypeError) as e:
            return self._failed(f"Invalid response: {type(e).__name__}: {e}", start)

        duration_ms = (time.monotonic() - start) * 1000
        logger.info(f"[{self.name}] Got image {image.url} ({duration_ms:.0f}ms)")
        return FetchResult.ok(image, duration_ms=duration_ms)

    def _parse(self, payload: dict) -> ImageReference:
        url = payload["urls"]["regular"]
        if not isinstance(url, str):
            raise TypeError(f"urls.regular must be a string, got {url!r}")
        return ImageReference(url=url)

    def _failed(self, error: str, start: float) -> FetchResult[ImageReference]:
        logger.warning(f"[{self.name}] {error}")
        return FetchResult.failed(error, duration_ms=(time.monotonic() - start) * 1000)


def get_random_image(source: UnsplashImageSource = None) -> Optional[ImageReference]:
    """
    Fetch one random image for the configured query.

    Returns:
        ImageReference, or None on any failure.
    """
    source = source or UnsplashImageSource()
    return source.fetch().value
