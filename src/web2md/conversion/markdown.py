"""HTML to Markdown conversion with the configured rule overlay."""

from __future__ import annotations

import hashlib
import logging
import re
from collections.abc import Mapping
from typing import Optional

from bs4 import Tag

from ..models.config import ConversionOptions, GfmMode, RetainImages
from ..models.rule import RenderContext, Rule
from .gfm import gfm, plain_strikethrough, plain_tables, strikethrough, task_list_items
from .renderer import MarkdownRenderer
from .rules import clean_attribute

logger = logging.getLogger(__name__)

# Elements dropped with everything inside them
IRRELEVANT_TAGS = ["meta", "style", "script", "noscript", "link", "textarea", "select", "svg"]

TITLE_UNDERLINE = "==============="


def data_url_placeholder(src: str) -> str:
    """
    Stable pseudo-URL for a data-URL image source.

    The URL is ``blob:`` followed by the lowercase hex MD5 digest of the
    UTF-8 encoded ``src`` value, so equal sources map to equal URLs in
    every process.
    """
    digest = hashlib.md5(src.encode("utf-8")).hexdigest()
    return f"blob:{digest}"


def _is_data_url_image(node: Tag) -> bool:
    return node.name == "img" and (node.get("src") or "").startswith("data:")


def _data_url_image(content: str, node: Tag, context: RenderContext) -> str:
    alt = clean_attribute(node.get("alt"))
    return f"![{alt}]({data_url_placeholder(node.get('src') or '')})"


def _title(content: str, node: Tag, context: RenderContext) -> str:
    return f"{content}\n{TITLE_UNDERLINE}\n"


def _paragraph(content: str, node: Tag, context: RenderContext) -> str:
    trimmed = content.strip()
    if not trimmed:
        return ""
    if context.inline:
        return f" {trimmed} "
    return "\n\n" + re.sub(r"\n{3,}", "\n\n", trimmed) + "\n\n"


def _retained_image(content: str, node: Tag, context: RenderContext) -> str:
    mode = context.options.retain_images
    alt = clean_attribute(node.get("alt"))
    if mode == RetainImages.ALT:
        return alt
    if mode == RetainImages.ALT_P:
        return f"({alt})" if alt else ""
    return ""


class HtmlToMarkdown:
    """
    Converts a content element to Markdown.

    Builds a :class:`MarkdownRenderer` (markdownify conversions as the
    baseline) with the overlay described by ``ConversionOptions``:
    irrelevant tags are dropped, images follow the retention mode,
    data-URL images become stable placeholders, paragraphs are tightened,
    GFM extensions follow the GFM mode, and caller rules override
    everything else.

    Example:
        converter = HtmlToMarkdown(ConversionOptions(retain_images="alt"))
        markdown = converter.convert(soup.article)
    """

    def __init__(self, options: Optional[ConversionOptions] = None):
        """
        Initialize the Markdown converter.

        Args:
            options: Conversion options (defaults if None)
        """
        self._options = options or ConversionOptions()
        self._renderer = self._build_renderer(self._options)

    @property
    def renderer(self) -> MarkdownRenderer:
        return self._renderer

    @staticmethod
    def _build_renderer(options: ConversionOptions) -> MarkdownRenderer:
        renderer = MarkdownRenderer(options)

        renderer.remove(IRRELEVANT_TAGS)
        renderer.add_rule("title-as-h1", Rule("title", _title))

        if options.retain_images != RetainImages.ALL:
            renderer.add_rule("retain-images", Rule("img", _retained_image))

        if options.img_data_url_to_object_url:
            renderer.add_rule("data-url-to-pseudo-object-url", Rule(_is_data_url_image, _data_url_image))

        renderer.add_rule("improved-paragraph", Rule("p", _paragraph))

        mode = options.gfm_mode
        if mode == GfmMode.ENABLED:
            renderer.use(gfm)
        elif mode == GfmMode.TABLES_DISABLED:
            renderer.use(strikethrough)
            renderer.use(task_list_items)
            renderer.use(plain_tables)
        else:
            renderer.use(plain_tables)
            renderer.use(plain_strikethrough)

        for name, rule in options.custom_rules.items():
            renderer.add_rule(name, rule)

        if options.custom_keep is not None:
            renderer.keep(options.custom_keep)

        logger.debug(f"Markdown renderer ready with {len(renderer.rules)} rules (GFM: {mode.value})")
        return renderer

    def convert(self, element: Tag, table_rows: Optional[Mapping[int, list[Tag]]] = None) -> str:
        """
        Convert the contents of ``element`` to Markdown.

        Args:
            element: Content element (rendered like its inner HTML)
            table_rows: Row lists keyed by ``id()`` of each table element

        Returns:
            Markdown string
        """
        return self._renderer.render(element, table_rows)


class MetadataHeaderBuilder:
    """
    Builds the metadata header placed before the Markdown body.

    Example:
        builder = MetadataHeaderBuilder()
        header = builder.build(title="Getting Started", url="https://example.com/start")
        # 'Title: Getting Started\\n\\nURL Source: https://example.com/start\\n\\nMarkdown Content:'
    """

    def build(
        self,
        title: str,
        url: Optional[str] = None,
        published_time: Optional[str] = None,
    ) -> str:
        """
        Build the header block.

        Args:
            title: Page title
            url: Source URL, omitted when empty
            published_time: ISO-8601 publish time, omitted when empty

        Returns:
            Header text ending with the ``Markdown Content:`` marker line
        """
        parts = [
            f"Title: {title}",
            f"\nURL Source: {url}" if url else "",
            f"\nPublished Time: {published_time}" if published_time else "",
            "\nMarkdown Content:",
        ]
        return "\n".join(part for part in parts if part)
