"""Content conversion for web2md (cleanup, extraction, HTML to Markdown, tidy)."""

from .extractor import MainContentExtractor
from .gfm import index_table_rows
from .markdown import HtmlToMarkdown, MetadataHeaderBuilder
from .metadata import MetadataExtractor, PageMetadata
from .normalizer import normalize_html
from .renderer import MarkdownRenderer
from .rules import RuleTable
from .tidy import tidy_markdown

__all__ = [
    "HtmlToMarkdown",
    "MainContentExtractor",
    "MarkdownRenderer",
    "MetadataExtractor",
    "MetadataHeaderBuilder",
    "PageMetadata",
    "RuleTable",
    "index_table_rows",
    "normalize_html",
    "tidy_markdown",
]
