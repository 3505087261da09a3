"""Web page to Markdown converter."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import aiohttp
from bs4 import BeautifulSoup

from .conversion import (
    HtmlToMarkdown,
    MainContentExtractor,
    MetadataExtractor,
    MetadataHeaderBuilder,
    index_table_rows,
    normalize_html,
    tidy_markdown,
)
from .errors import FetchError
from .http import AsyncHttpClient, HttpClient, HttpResponse, decode_content
from .models.config import ConversionOptions

logger = logging.getLogger(__name__)

FETCH_EXCEPTIONS = (aiohttp.ClientError, asyncio.TimeoutError, OSError, ValueError)


class WebToMarkdownConverter:
    """
    Converts web pages to Markdown with a metadata header.

    The rule engine is built once from the options; every call parses its
    own document, so one converter can serve concurrent calls.

    Example:
        converter = WebToMarkdownConverter(retain_images="alt")
        markdown = converter.html_to_markdown(html, "https://example.com/post")

        markdown = await converter.url_to_markdown("https://example.com/post")
    """

    def __init__(
        self,
        options: Optional[ConversionOptions] = None,
        *,
        http_client: Optional[HttpClient] = None,
        **overrides: Any,
    ) -> None:
        """
        Initialize the converter.

        Args:
            options: Conversion options (built from ``overrides`` if None)
            http_client: Client used by url_to_markdown (a fresh
                AsyncHttpClient per call if None)
            **overrides: ConversionOptions fields, used when options is None
        """
        if options is None:
            options = ConversionOptions(**overrides)
        elif overrides:
            options = ConversionOptions(**{**options.model_dump(), **overrides})
        self._options = options
        self._http_client = http_client
        self._extractor = MainContentExtractor()
        self._metadata = MetadataExtractor()
        self._markdown = HtmlToMarkdown(options)
        self._header = MetadataHeaderBuilder()

    @property
    def options(self) -> ConversionOptions:
        return self._options

    def html_to_markdown(self, html: str, url: Optional[str] = None) -> str:
        """
        Convert an HTML string to Markdown.

        Args:
            html: HTML content to convert
            url: Optional source URL

        Returns:
            Metadata header followed by the Markdown body
        """
        soup = BeautifulSoup(normalize_html(html), "html.parser")

        metadata = self._metadata.extract(soup, url)

        main_content = self._extractor.extract(soup, url)
        logger.debug(f"Converting <{main_content.name}> from {url or 'inline HTML'}")

        markdown = self._markdown.convert(main_content, index_table_rows(main_content))

        header = self._header.build(title=metadata.title, url=url, published_time=metadata.published_time)
        return f"{header}\n{markdown}"

    async def _fetch(self, url: str) -> HttpResponse:
        if self._http_client is not None:
            return await self._http_client.get(url)
        async with AsyncHttpClient() as client:
            return await client.get(url)

    async def url_to_markdown(self, url: str) -> str:
        """
        Fetch a URL and convert it to Markdown.

        Args:
            url: URL to fetch and convert

        Returns:
            Metadata header followed by the Markdown body

        Raises:
            FetchError: If the page could not be fetched
        """
        try:
            response = await self._fetch(url)
        except FETCH_EXCEPTIONS as e:
            logger.warning(f"Failed to fetch {url}: {e}")
            status = e.status if isinstance(e, aiohttp.ClientResponseError) else None
            raise FetchError(url, str(e) or type(e).__name__, status_code=status) from e

        if not response.ok:
            logger.warning(f"Failed to fetch {url}: HTTP {response.status_code}")
            raise FetchError(
                url,
                f"Request failed with status code {response.status_code}",
                status_code=response.status_code,
            )

        html = decode_content(response.content, response.content_type)
        return self.html_to_markdown(html, url)

    def tidy_markdown(self, markdown: str) -> str:
        """
        Tidy up Markdown content by fixing common issues.

        Args:
            markdown: Markdown content to clean

        Returns:
            Cleaned Markdown string
        """
        return tidy_markdown(markdown)
