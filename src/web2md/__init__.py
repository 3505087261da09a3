"""
web2md - Convert web pages to clean Markdown.

Usage:
    from web2md import WebToMarkdownConverter

    converter = WebToMarkdownConverter(retain_images="alt", no_gfm="table")
    markdown = converter.html_to_markdown(html, "https://example.com/post")

    markdown = await converter.url_to_markdown("https://example.com/post")
    tidy = converter.tidy_markdown(markdown)
"""

__version__ = "1.0.0"

from .conversion import normalize_html, tidy_markdown
from .converter import WebToMarkdownConverter
from .errors import FetchError, Web2mdError
from .models import ConversionOptions, GfmMode, RenderContext, RetainImages, Rule

__all__ = [
    "__version__",
    # Core
    "WebToMarkdownConverter",
    "normalize_html",
    "tidy_markdown",
    # Config
    "ConversionOptions",
    "GfmMode",
    "RetainImages",
    "Rule",
    "RenderContext",
    # Errors
    "Web2mdError",
    "FetchError",
]
