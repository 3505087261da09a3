"""Main content extraction from parsed HTML documents."""

import logging
from typing import Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

# Elements that typically contain main content, most specific first
CONTENT_SELECTORS = [
    "article",
    '[role="main"]',
    "main",
    "#main-content",
    ".main-content",
    "#content",
    ".content",
    "#main",
    ".main",
    ".post-content",
    ".article-content",
]

# Page chrome (navigation, ads, etc.)
REMOVE_SELECTORS = [
    "nav",
    "header",
    "footer",
    "#header",
    "#footer",
    ".header",
    ".footer",
    ".navigation",
    ".nav",
    ".sidebar",
    ".menu",
    ".comments",
    ".advertisement",
    ".ads",
    ".social-share",
    ".related-posts",
    '[role="navigation"]',
    '[role="complementary"]',
    '[role="banner"]',
    '[role="contentinfo"]',
]

WIKI_HOST = "wikipedia.org"
WIKI_CONTENT_SELECTOR = "#mw-content-text"
WIKI_NOISE_SELECTOR = ".navbox, .vertical-navbox, .sidebar, .mw-editsection, .mw-empty-elt"


def is_wiki_url(url: Optional[str]) -> bool:
    """True if ``url`` is served by the known wiki template."""
    if not url:
        return False
    hostname = urlparse(url).hostname or ""
    return WIKI_HOST in hostname


class MainContentExtractor:
    """
    Extracts main content from parsed HTML documents.

    Removes navigation, ads and other chrome without touching any content
    container, then picks the element holding the primary content.

    Example:
        extractor = MainContentExtractor()
        content = extractor.extract(soup, "https://docs.example.com/page")
    """

    def __init__(
        self,
        content_selectors: Optional[list[str]] = None,
        remove_selectors: Optional[list[str]] = None,
    ):
        """
        Initialize the content extractor.

        Args:
            content_selectors: CSS selectors for main content (overrides defaults)
            remove_selectors: CSS selectors for elements to remove (extends defaults)
        """
        self._content_selectors = content_selectors or CONTENT_SELECTORS
        self._remove_selectors = list(REMOVE_SELECTORS)
        if remove_selectors:
            self._remove_selectors.extend(remove_selectors)

    def _protected_elements(self, soup: BeautifulSoup) -> tuple[set[int], set[int]]:
        """
        Collect element identities that cleanup must not remove.

        Returns:
            (content element ids, ids of content elements and all their ancestors)
        """
        content_ids: set[int] = set()
        protected_ids: set[int] = set()
        for selector in self._content_selectors:
            for element in soup.select(selector):
                content_ids.add(id(element))
                protected_ids.add(id(element))
                for parent in element.parents:
                    protected_ids.add(id(parent))
        return content_ids, protected_ids

    @staticmethod
    def _inside_any(element: Tag, ids: set[int]) -> bool:
        return any(id(parent) in ids for parent in element.parents)

    def cleanup(self, soup: BeautifulSoup) -> int:
        """
        Remove boilerplate elements in place.

        An element matching a removal selector survives if it is a content
        element, an ancestor of one, or lies inside a content element.

        Args:
            soup: Parsed document

        Returns:
            Number of removed elements
        """
        content_ids, protected_ids = self._protected_elements(soup)

        removed = 0
        for selector in self._remove_selectors:
            for element in soup.select(selector):
                if element.decomposed:
                    continue
                if id(element) in protected_ids or self._inside_any(element, content_ids):
                    continue
                element.decompose()
                removed += 1

        logger.debug(f"Removed {removed} boilerplate elements")
        return removed

    def _select_wiki_content(self, soup: BeautifulSoup) -> Optional[Tag]:
        content = soup.select_one(WIKI_CONTENT_SELECTOR)
        if content is None:
            return None
        for element in content.select(WIKI_NOISE_SELECTOR):
            if not element.decomposed:
                element.decompose()
        return content

    def select(self, soup: BeautifulSoup, url: Optional[str] = None) -> Tag:
        """
        Find the element holding the main content.

        Args:
            soup: Parsed document
            url: Source URL, used to recognise the wiki template

        Returns:
            Content element, ``<body>``, or the document itself as last resort
        """
        if is_wiki_url(url):
            content = self._select_wiki_content(soup)
            if content is not None:
                logger.debug(f"Using wiki content container for {url}")
                return content

        for selector in self._content_selectors:
            element = soup.select_one(selector)
            if element is not None:
                logger.debug(f"Main content matched '{selector}'")
                return element

        body = soup.find("body")
        if isinstance(body, Tag):
            return body

        # html.parser does not invent a <body> for fragments
        return soup

    def extract(self, soup: BeautifulSoup, url: Optional[str] = None) -> Tag:
        """
        Clean up the document and return its main content element.

        Args:
            soup: Parsed document (modified in place)
            url: Source URL

        Returns:
            Main content element
        """
        self.cleanup(soup)
        return self.select(soup, url)
