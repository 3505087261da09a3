"""Markdown renderer: markdownify's converter driven by an ordered rule table."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import replace
from typing import Any, Callable, Optional

from bs4 import Tag
from markdownify import ATX, SPACES, UNDERLINED, MarkdownConverter

from ..models.config import ConversionOptions
from ..models.rule import RenderContext, Rule, RuleFilter
from .rules import RuleTable, block_content, class_string, element_children, is_block

logger = logging.getLogger(__name__)

Plugin = Callable[["MarkdownRenderer"], None]

_LANGUAGE_CLASS = re.compile(r"language-(\S+)")


def code_language(pre: Tag) -> str:
    """Fence language from a ``language-*`` class on ``<pre>`` or its ``<code>`` child."""
    candidates = [pre] + [child for child in element_children(pre) if child.name == "code"][:1]
    for node in candidates:
        match = _LANGUAGE_CLASS.search(class_string(node))
        if match:
            return match.group(1)
    return ""


def converter_options(options: ConversionOptions) -> dict[str, Any]:
    """markdownify options for the configured Markdown style."""
    return {
        "heading_style": UNDERLINED if options.heading_style == "setext" else ATX,
        "bullets": options.bullet_list_marker,
        "strong_em_symbol": options.strong_em_symbol,
        "newline_style": SPACES,
        "escape_asterisks": True,
        "escape_underscores": True,
        "escape_misc": True,
        "code_language_callback": code_language,
    }


class _RenderPass(MarkdownConverter):
    """A single conversion that routes every element through the rule table first."""

    def __init__(self, rules: RuleTable, root: Tag, context: RenderContext, **options: Any):
        super().__init__(**options)
        self._rules = rules
        self._root = root
        self._context = context

    def get_conv_fn(self, tag_name):
        builtin = super().get_conv_fn(tag_name)

        def convert(el, text, parent_tags):
            if el is self._root:
                return text
            rule = self._rules.for_node(el)
            if rule is None and builtin is not None:
                return builtin(el, text, parent_tags=parent_tags)

            context = replace(self._context, parent_tags=frozenset(parent_tags))
            if rule is None:
                return block_content(text, el, context) if is_block(el) else text
            return rule.replacement(text, el, context)

        return convert


class MarkdownRenderer:
    """
    Renders an element subtree to Markdown using an ordered rule table.

    Conversion runs on markdownify's ``MarkdownConverter``. Each element is
    first offered to the rule table (newest rule first, then keep and
    remove filters); elements no rule claims get markdownify's built-in
    conversion. Rules receive the already rendered children, so a rule
    only decides how its own element wraps them. The renderer is
    configured once and is read-only afterwards.

    Example:
        renderer = MarkdownRenderer(ConversionOptions())
        renderer.add_rule("mark", Rule("mark", lambda c, n, ctx: f"=={c}=="))
        markdown = renderer.render(soup.body)
    """

    def __init__(self, options: ConversionOptions, rules: Optional[RuleTable] = None):
        """
        Initialize the renderer.

        Args:
            options: Conversion options passed through to every rule
            rules: Pre-populated rule table (empty table if None)
        """
        self._options = options
        self._rules = rules if rules is not None else RuleTable()
        self._converter_options = converter_options(options)

    @property
    def options(self) -> ConversionOptions:
        return self._options

    @property
    def rules(self) -> RuleTable:
        return self._rules

    def add_rule(self, name: str, rule: Rule) -> MarkdownRenderer:
        """Register a rule that takes precedence over all existing rules."""
        self._rules.add(name, rule)
        return self

    def keep(self, rule_filter: RuleFilter) -> MarkdownRenderer:
        """Keep matching elements as their original markup."""
        self._rules.keep(rule_filter)
        return self

    def remove(self, rule_filter: RuleFilter) -> MarkdownRenderer:
        """Drop matching elements and everything inside them."""
        self._rules.remove(rule_filter)
        return self

    def use(self, plugin: Plugin) -> MarkdownRenderer:
        """Apply a plugin that registers rules on this renderer."""
        plugin(self)
        return self

    def render(self, root: Tag, table_rows: Optional[Mapping[int, list[Tag]]] = None) -> str:
        """
        Render the children of ``root`` to Markdown.

        Args:
            root: Element whose contents are rendered
            table_rows: Row lists keyed by ``id()`` of each table element

        Returns:
            Markdown string without leading newlines or trailing whitespace
        """
        context = RenderContext(options=self._options, table_rows=table_rows or {})
        converter = _RenderPass(self._rules, root, context, **self._converter_options)
        output = converter.convert_soup(root).lstrip("\t\r\n").rstrip()
        logger.debug(f"Rendered <{root.name}> to {len(output)} characters of Markdown")
        return output
