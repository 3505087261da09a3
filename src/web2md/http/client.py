"""Async HTTP client for fetching single pages."""

from __future__ import annotations

import logging
from types import TracebackType

import aiohttp
from charset_normalizer import from_bytes as detect_encoding

from .protocols import HttpResponse

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (web2md/1.0)"


def decode_content(content: bytes, content_type: str) -> str:
    """
    Decode content with encoding detection.

    Fallback chain:
    1. Content-Type header charset
    2. charset-normalizer detection
    3. UTF-8 with replacement

    Args:
        content: Raw bytes content
        content_type: Content-Type header value

    Returns:
        Decoded string
    """
    encoding = None
    if content_type:
        for part in content_type.split(";"):
            part = part.strip()
            if part.lower().startswith("charset="):
                encoding = part.split("=", 1)[1].strip().strip("\"'")
                break

    if encoding:
        try:
            return content.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            logger.debug(f"Failed to decode with declared encoding: {encoding}")

    if content:
        best_match = detect_encoding(content).best()
        if best_match is not None:
            logger.debug(f"Detected encoding: {best_match.encoding}")
            return str(best_match)

    return content.decode("utf-8", errors="replace")


class AsyncHttpClient:
    """
    Async HTTP client making a single attempt per request.

    Features:
    - Content size limit to prevent memory exhaustion
    - Non-2xx responses raise ``aiohttp.ClientResponseError``

    Example:
        async with AsyncHttpClient() as client:
            response = await client.get("https://example.com")
            html = decode_content(response.content, response.content_type)
    """

    def __init__(self, max_content_size: int = 50 * 1024 * 1024) -> None:
        """
        Initialize the HTTP client.

        Args:
            max_content_size: Maximum response size in bytes
        """
        self._max_content_size = max_content_size
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> AsyncHttpClient:
        """Enter async context and create session."""
        self._session = aiohttp.ClientSession(headers={"User-Agent": DEFAULT_USER_AGENT})
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context and close session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def get(self, url: str) -> HttpResponse:
        """
        Perform an HTTP GET request.

        Args:
            url: The URL to fetch

        Returns:
            HttpResponse with status, content, and headers

        Raises:
            aiohttp.ClientError: On network errors and non-2xx responses
            ValueError: On content size exceeded
        """
        if self._session is None:
            raise RuntimeError("Client not initialized. Use 'async with' context manager.")

        async with self._session.get(url, allow_redirects=True) as response:
            response.raise_for_status()

            # Check Content-Length if available
            content_length = response.headers.get("Content-Length")
            if content_length and content_length.isdigit() and int(content_length) > self._max_content_size:
                raise ValueError(f"Content too large: {content_length} bytes")

            # Read content with size limit
            content = b""
            async for chunk in response.content.iter_chunked(8192):
                content += chunk
                if len(content) > self._max_content_size:
                    raise ValueError(f"Content size limit exceeded: >{self._max_content_size} bytes")

            logger.debug(f"Fetched {url}: {response.status}, {len(content)} bytes")
            return HttpResponse(
                status_code=response.status,
                content=content,
                content_type=response.headers.get("Content-Type", ""),
                headers=dict(response.headers),
                url=str(response.url),
            )
