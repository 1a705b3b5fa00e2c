"""Storefront vectorization API client wrapper."""

import asyncio
import logging

import requests

from printplace.api.models import VectorizationResult
from printplace.config import VectorizerConfig

logger = logging.getLogger(__name__)

VALID_STATUSES = ("not_needed", "pending", "processing", "completed", "failed")


class VectorizerClient:
    """Client for the storefront's artwork vectorization endpoint."""

    def __init__(self, config: VectorizerConfig, session: requests.Session | None = None) -> None:
        """
        Initialize vectorizer client.

        Args:
            config: Endpoint URL, optional API key and timeout.
            session: Optional requests session (for connection reuse or testing).
        """
        self.config = config
        self.session = session or requests.Session()

    def _headers(self) -> dict[str, str]:
        headers = {
            "content-type": "application/json",
            "accept": "application/json",
        }
        if self.config.api_key:
            headers["authorization"] = f"Bearer {self.config.api_key}"
        return headers

    def vectorize(self, artwork_id: str) -> VectorizationResult:
        """
        Request vectorization of a stored artwork file.

        Args:
            artwork_id: Artwork file ID.

        Returns:
            VectorizationResult. HTTP and protocol failures are reported as
            status "failed" rather than raised.
        """
        url = f"{self.config.url.rstrip('/')}/api/artwork/vectorize"

        try:
            response = self.session.post(
                url,
                json={"artwork_file_id": artwork_id},
                headers=self._headers(),
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            logger.error(f"Vectorization request failed for {artwork_id}: {e}")
            return VectorizationResult(status="failed", error=str(e))
        except ValueError as e:
            logger.error(f"Vectorization response for {artwork_id} is not JSON: {e}")
            return VectorizationResult(status="failed", error=str(e))

        status = data.get("status", "completed" if data.get("vectorized_file_url") else "failed")
        if status not in VALID_STATUSES:
            logger.warning(f"Unknown vectorization status '{status}' for {artwork_id}")
            status = "failed"

        return VectorizationResult(
            status=status,
            vectorized_url=data.get("vectorized_file_url"),
            error=data.get("error"),
        )

    def fetch_bytes(self, url: str) -> bytes:
        """
        Download a file (artwork, vectorized SVG, backdrop).

        Args:
            url: Absolute URL.

        Returns:
            Raw response bytes.

        Raises:
            requests.RequestException: If the download fails.
        """
        response = self.session.get(url, timeout=self.config.timeout)
        response.raise_for_status()
        return response.content

    async def vectorize_async(self, artwork_id: str) -> VectorizationResult:
        """Awaitable wrapper around vectorize()."""
        return await asyncio.to_thread(self.vectorize, artwork_id)

    async def fetch_bytes_async(self, url: str) -> bytes:
        """Awaitable wrapper around fetch_bytes()."""
        return await asyncio.to_thread(self.fetch_bytes, url)


async def fetch_url_bytes(url: str, timeout: float = 30.0) -> bytes:
    """
    Download a URL without a configured client.

    Raises:
        requests.RequestException: If the download fails.
    """

    def _get() -> bytes:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        return response.content

    return await asyncio.to_thread(_get)
