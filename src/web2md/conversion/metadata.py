"""Title and publish-time extraction from parsed HTML."""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional

from bs4 import BeautifulSoup, Tag

from .extractor import is_wiki_url

logger = logging.getLogger(__name__)

UNTITLED = "Untitled"

# Common locations of the publish time, tried in order
TIME_SELECTORS = [
    'meta[property="article:published_time"]',
    'meta[property="og:published_time"]',
    'meta[name="published_time"]',
    'meta[name="date"]',
    'meta[name="article:published_time"]',
    'meta[itemprop="datePublished"]',
    "time[datetime]",
    "time[pubdate]",
    '[itemprop="datePublished"]',
    ".published-date",
    ".post-date",
    ".article-date",
]

TIME_ATTRIBUTES = ("content", "datetime", "pubdate")

WIKI_LASTMOD_SELECTOR = "#footer-info-lastmod"
WIKI_DATE_PATTERN = re.compile(r"\d{1,2}\s+\w+\s+\d{4}")
WIKI_DATE_FORMATS = ("%d %B %Y", "%d %b %Y")

DATE_FORMATS = (
    "%d %B %Y",
    "%d %b %Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%b %d %Y",
    "%A, %B %d, %Y",
    "%a, %b %d, %Y",
    "%d %B %Y %H:%M",
    "%d %B %Y, %H:%M",
    "%B %d, %Y %H:%M",
    "%B %d, %Y, %H:%M",
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%Y.%m.%d",
)


@dataclass(frozen=True)
class PageMetadata:
    """Metadata shown in the header of a converted page."""

    title: str
    published_time: Optional[str] = None


def _as_utc(value: datetime) -> datetime:
    # Naive values are read as UTC so output never depends on the host zone
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_date(text: str, formats: tuple[str, ...] = DATE_FORMATS) -> Optional[datetime]:
    """
    Parse a date/time string found in a page.

    Tries ISO 8601, RFC 2822 and then ``formats``.

    Args:
        text: Candidate date text
        formats: ``strptime`` formats tried after the standard ones

    Returns:
        Timezone-aware UTC datetime, or None if nothing matched
    """
    value = " ".join(text.split())
    if not value:
        return None

    iso_value = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    try:
        return _as_utc(datetime.fromisoformat(iso_value))
    except ValueError:
        pass

    try:
        return _as_utc(parsedate_to_datetime(value))
    except (TypeError, ValueError, IndexError):
        pass

    for fmt in formats:
        try:
            return _as_utc(datetime.strptime(value, fmt))
        except ValueError:
            continue

    return None


def format_timestamp(value: datetime) -> str:
    """Format as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC."""
    value = _as_utc(value)
    return value.strftime("%Y-%m-%dT%H:%M:%S") + f".{value.microsecond // 1000:03d}Z"


class MetadataExtractor:
    """
    Extracts the title and publish time of a page.

    Example:
        extractor = MetadataExtractor()
        metadata = extractor.extract(soup, "https://example.com/post")
        metadata.published_time  # '2024-03-05T10:00:00.000Z'
    """

    def extract_title(self, soup: BeautifulSoup) -> str:
        """Return the ``<title>`` text, or ``Untitled``."""
        title_tag = soup.find("title")
        if isinstance(title_tag, Tag):
            title = title_tag.get_text().strip()
            if title:
                return title
        return UNTITLED

    def _wiki_published_time(self, soup: BeautifulSoup) -> Optional[str]:
        footer = soup.select_one(WIKI_LASTMOD_SELECTOR)
        if footer is None:
            return None
        match = WIKI_DATE_PATTERN.search(footer.get_text())
        if not match:
            return None
        parsed = parse_date(match.group(0), formats=WIKI_DATE_FORMATS)
        if parsed is None:
            logger.debug(f"Could not parse wiki revision date '{match.group(0)}'")
            return None
        return format_timestamp(parsed)

    def _candidate_text(self, element: Tag) -> Optional[str]:
        for attribute in TIME_ATTRIBUTES:
            value = element.get(attribute)
            if isinstance(value, str) and value:
                return value
        text = element.get_text()
        return text or None

    def extract_published_time(self, soup: BeautifulSoup, url: Optional[str] = None) -> Optional[str]:
        """
        Find the publish time of the page.

        Args:
            soup: Parsed document
            url: Source URL, used to recognise the wiki template

        Returns:
            ISO-8601 UTC timestamp, or None if no parseable date was found
        """
        if is_wiki_url(url):
            published = self._wiki_published_time(soup)
            if published:
                return published

        for selector in TIME_SELECTORS:
            element = soup.select_one(selector)
            if element is None:
                continue
            candidate = self._candidate_text(element)
            if not candidate:
                continue
            parsed = parse_date(candidate)
            if parsed is None:
                logger.debug(f"Unparseable date '{candidate.strip()}' from '{selector}'")
                continue
            return format_timestamp(parsed)

        return None

    def extract(self, soup: BeautifulSoup, url: Optional[str] = None) -> PageMetadata:
        """Extract title and publish time."""
        return PageMetadata(
            title=self.extract_title(soup),
            published_time=self.extract_published_time(soup, url),
        )
