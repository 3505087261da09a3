"""Ordered rule table and element classification for the Markdown renderer."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from typing import Optional

from bs4 import Tag

from ..models.rule import RenderContext, Rule, RuleFilter, filter_matches

logger = logging.getLogger(__name__)

BLOCK_ELEMENTS = frozenset(
    {
        "address",
        "article",
        "aside",
        "audio",
        "blockquote",
        "body",
        "canvas",
        "center",
        "dd",
        "dir",
        "div",
        "dl",
        "dt",
        "fieldset",
        "figcaption",
        "figure",
        "footer",
        "form",
        "frameset",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "header",
        "hgroup",
        "hr",
        "html",
        "isindex",
        "li",
        "main",
        "menu",
        "nav",
        "noframes",
        "noscript",
        "ol",
        "output",
        "p",
        "pre",
        "section",
        "table",
        "tbody",
        "td",
        "tfoot",
        "th",
        "thead",
        "tr",
        "ul",
    }
)

VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "command",
        "embed",
        "hr",
        "img",
        "input",
        "keygen",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# Elements that carry meaning even without text content
MEANINGFUL_WHEN_BLANK = frozenset(
    {"a", "table", "thead", "tbody", "tfoot", "th", "td", "iframe", "script", "audio", "video"}
)


def is_block(node: object) -> bool:
    return isinstance(node, Tag) and node.name in BLOCK_ELEMENTS


def is_blank(node: Tag) -> bool:
    """True for non-void elements with no text and nothing meaningful inside."""
    if node.name in VOID_ELEMENTS or node.name in MEANINGFUL_WHEN_BLANK:
        return False
    if node.get_text().strip():
        return False
    return node.find(list(VOID_ELEMENTS | MEANINGFUL_WHEN_BLANK)) is None


def clean_attribute(value: Optional[str]) -> str:
    """Collapse whitespace in an attribute value."""
    return re.sub(r"\s+", " ", value.strip()) if value else ""


def class_string(node: Tag) -> str:
    classes = node.get("class") or []
    return " ".join(classes) if isinstance(classes, list) else str(classes)


def element_children(node: Tag) -> list[Tag]:
    return [child for child in node.children if isinstance(child, Tag)]


def block_content(content: str, node: Tag, context: RenderContext) -> str:
    """Render ``node`` as a paragraph-separated block, or as itself when inline."""
    text = content.strip()
    if not text:
        return ""
    if context.inline:
        return f" {text} "
    if not is_block(node):
        return text
    return f"\n\n{text}\n\n"


def _keep_replacement(content: str, node: Tag, context: RenderContext) -> str:
    markup = str(node)
    return f"\n\n{markup}\n\n" if is_block(node) else markup


def _empty_replacement(content: str, node: Tag, context: RenderContext) -> str:
    return ""


BLANK_RULE = Rule(lambda node: True, _empty_replacement)
KEEP_RULE = Rule(lambda node: True, _keep_replacement)
REMOVE_RULE = Rule(lambda node: True, _empty_replacement)


class RuleTable:
    """
    Ordered (predicate, handler) table with newest-first lookup.

    Rules registered through :meth:`add` are consulted before every rule
    registered earlier, so a later registration overrides an earlier one
    with the same match scope. Elements no rule claims fall through to
    the converter's built-in handling.

    Example:
        table = RuleTable()
        table.add("paragraph", Rule("p", render_paragraph))
        table.add("lead-paragraph", Rule(is_lead, render_lead))
        table.find(node)  # lead-paragraph is tried first
    """

    def __init__(self) -> None:
        self._rules: list[tuple[str, Rule]] = []
        self._keep: list[RuleFilter] = []
        self._remove: list[RuleFilter] = []

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[tuple[str, Rule]]:
        return iter(self._rules)

    @property
    def names(self) -> list[str]:
        """Rule names in lookup order."""
        return [name for name, _ in self._rules]

    def add(self, name: str, rule: Rule) -> None:
        """Register ``rule`` ahead of every existing rule."""
        self._rules.insert(0, (name, rule))
        logger.debug(f"Registered rule '{name}'")

    def keep(self, rule_filter: RuleFilter) -> None:
        self._keep.append(rule_filter)

    def remove(self, rule_filter: RuleFilter) -> None:
        self._remove.append(rule_filter)

    def find(self, node: Tag) -> Optional[Rule]:
        """Return the first registered rule matching ``node``, if any."""
        for _, rule in self._rules:
            if rule.matches(node):
                return rule
        return None

    def is_kept(self, node: Tag) -> bool:
        return any(filter_matches(f, node) for f in self._keep)

    def for_node(self, node: Tag) -> Optional[Rule]:
        """
        Resolve the rule used to render ``node``.

        Order: blank elements (unless a keep filter selects them),
        registered rules, keep filters, then remove filters. Returns None
        when the built-in conversion should handle the element.
        """
        kept = self.is_kept(node)
        if not kept and is_blank(node):
            return BLANK_RULE

        rule = self.find(node)
        if rule is not None:
            return rule

        if kept:
            return KEEP_RULE
        if any(filter_matches(f, node) for f in self._remove):
            return REMOVE_RULE

        return None
