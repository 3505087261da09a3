"""Tests for main content extraction."""

import pytest
from bs4 import BeautifulSoup

from web2md.conversion import MainContentExtractor
from web2md.conversion.extractor import is_wiki_url


def parse(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


class TestIsWikiUrl:
    """Tests for wiki URL detection."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://en.wikipedia.org/wiki/Python_(programming_language)",
            "https://de.m.wikipedia.org/wiki/Berlin",
        ],
    )
    def test_wiki_urls(self, url):
        """Test that wiki hosts are recognised."""
        assert is_wiki_url(url)

    @pytest.mark.parametrize("url", [None, "", "https://example.com/wikipedia.org", "not a url"])
    def test_other_urls(self, url):
        """Test that other URLs are not treated as wiki pages."""
        assert not is_wiki_url(url)


class TestCleanup:
    """Tests for boilerplate removal."""

    @pytest.fixture
    def extractor(self):
        return MainContentExtractor()

    def test_removes_page_chrome(self, extractor):
        """Test that nav and footer outside content are removed."""
        soup = parse(
            "<html><body><nav>Menu</nav><article><p>Real content</p></article>"
            "<footer>Foot</footer></body></html>"
        )

        removed = extractor.cleanup(soup)

        assert removed == 2
        text = soup.get_text()
        assert "Menu" not in text
        assert "Foot" not in text
        assert "Real content" in text

    def test_content_element_matching_removal_selector_is_kept(self, extractor):
        """Test that an element matching both selector lists survives."""
        soup = parse('<body><header class="content"><p>Kept</p></header><p>Other</p></body>')

        extractor.cleanup(soup)

        assert "Kept" in soup.get_text()

    def test_ancestor_of_content_is_kept(self, extractor):
        """Test that a boilerplate ancestor of a content element survives."""
        soup = parse('<body><div class="sidebar"><main><p>Main text</p></main></div></body>')

        extractor.cleanup(soup)

        assert soup.select_one(".sidebar") is not None
        assert "Main text" in soup.get_text()

    def test_chrome_inside_content_is_kept(self, extractor):
        """Test that boilerplate nested in a content element survives."""
        soup = parse(
            "<body><article><nav>In-article nav</nav><p>Text</p></article>"
            "<nav>Site nav</nav></body>"
        )

        removed = extractor.cleanup(soup)

        assert removed == 1
        text = soup.get_text()
        assert "In-article nav" in text
        assert "Site nav" not in text

    def test_nested_matches_are_removed_once(self, extractor):
        """Test that elements inside an already removed element are skipped."""
        soup = parse("<body><nav>Outer<nav>Inner</nav></nav><p>Body</p></body>")

        removed = extractor.cleanup(soup)

        assert removed == 1
        assert soup.get_text() == "Body"

    def test_extra_remove_selectors(self):
        """Test that custom removal selectors extend the defaults."""
        extractor = MainContentExtractor(remove_selectors=[".cookie-banner"])
        soup = parse('<body><div class="cookie-banner">Accept</div><nav>Menu</nav><p>Body</p></body>')

        extractor.cleanup(soup)

        assert soup.get_text() == "Body"


class TestSelect:
    """Tests for content element selection."""

    @pytest.fixture
    def extractor(self):
        return MainContentExtractor()

    def test_prefers_article(self, extractor):
        """Test that <article> wins over later selectors."""
        soup = parse('<body><div id="content"><article><p>Story</p></article></div></body>')

        assert extractor.select(soup).name == "article"

    def test_selector_order(self, extractor):
        """Test that selectors are tried in priority order."""
        soup = parse('<body><div class="post-content">Post</div><main>Main</main></body>')

        assert extractor.select(soup).name == "main"

    def test_falls_back_to_body(self, extractor):
        """Test that <body> is used when no selector matches."""
        soup = parse("<html><body><div><p>Body text</p></div></body></html>")

        assert extractor.select(soup).name == "body"

    def test_fragment_without_body_returns_document(self, extractor):
        """Test that a bare fragment returns the document root."""
        soup = parse("<p>Just text</p>")

        assert extractor.select(soup) is soup

    def test_custom_content_selectors(self):
        """Test that custom content selectors replace the defaults."""
        extractor = MainContentExtractor(content_selectors=[".docs"])
        soup = parse('<body><article>Article</article><div class="docs">Docs</div></body>')

        assert extractor.select(soup).get_text() == "Docs"

    def test_extract_cleans_then_selects(self, extractor):
        """Test that extract removes chrome from the chosen body."""
        soup = parse(
            "<html><body><header>Top</header><div><p>Body text</p></div>"
            "<footer>Bottom</footer></body></html>"
        )

        content = extractor.extract(soup)

        assert content.name == "body"
        text = content.get_text()
        assert "Top" not in text
        assert "Bottom" not in text
        assert "Body text" in text


class TestWikiContent:
    """Tests for the wiki page template."""

    HTML = (
        '<body><div id="mw-content-text"><p>Python is a language.</p>'
        '<div class="navbox">Nav box</div><span class="mw-editsection">[edit]</span>'
        '<p class="mw-empty-elt"></p></div></body>'
    )

    def test_uses_wiki_container(self):
        """Test that the wiki content container is selected and denoised."""
        extractor = MainContentExtractor()
        soup = parse(self.HTML)

        content = extractor.extract(soup, "https://en.wikipedia.org/wiki/Python")

        assert content.get("id") == "mw-content-text"
        text = content.get_text()
        assert "Python is a language." in text
        assert "Nav box" not in text
        assert "[edit]" not in text
        assert content.select_one(".mw-empty-elt") is None

    def test_other_hosts_use_generic_selection(self):
        """Test that the wiki template is only applied to wiki hosts."""
        extractor = MainContentExtractor()
        soup = parse(self.HTML)

        content = extractor.extract(soup, "https://example.com/wiki/Python")

        assert content.name == "body"
        assert "Nav box" in content.get_text()

    def test_wiki_url_without_container(self):
        """Test fallback when a wiki page lacks the content container."""
        extractor = MainContentExtractor()
        soup = parse("<body><article>Article</article></body>")

        content = extractor.extract(soup, "https://en.wikipedia.org/wiki/Special:Random")

        assert content.name == "article"
