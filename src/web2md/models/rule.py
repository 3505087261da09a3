"""Rule and render-context types shared by the rule engine and configuration."""

from __future__ import annotations

from collections.abc import Collection, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Union

from bs4 import Tag

if TYPE_CHECKING:
    from .config import ConversionOptions

ElementPredicate = Callable[[Tag], bool]

# A tag name, a collection of tag names, or a predicate over an element
RuleFilter = Union[str, Collection[str], ElementPredicate]

Replacement = Callable[[str, Tag, "RenderContext"], str]


def filter_matches(rule_filter: RuleFilter, node: Tag) -> bool:
    """Return True if ``node`` is selected by ``rule_filter``."""
    if isinstance(rule_filter, str):
        return node.name == rule_filter.lower()
    if callable(rule_filter):
        return bool(rule_filter(node))
    return node.name in {name.lower() for name in rule_filter}


class Rule:
    """
    A Markdown rendering rule.

    Attributes:
        filter: Tag name, collection of tag names, or element predicate
        replacement: Called with the rendered children, the element and the
            render context; returns the element's Markdown

    Example:
        rule = Rule("mark", lambda content, node, ctx: f"=={content}==")
    """

    __slots__ = ("filter", "replacement")

    def __init__(self, filter: RuleFilter, replacement: Replacement):
        self.filter = filter
        self.replacement = replacement

    def matches(self, node: Tag) -> bool:
        return filter_matches(self.filter, node)

    def __repr__(self) -> str:
        return f"Rule(filter={self.filter!r})"


@dataclass(frozen=True)
class RenderContext:
    """
    State handed to every replacement function.

    Attributes:
        options: Conversion options the renderer was built with
        table_rows: Row lists keyed by ``id()`` of their table element
        parent_tags: Names of the enclosing elements, including markdownify's
            ``_inline`` and ``_noformat`` markers
    """

    options: ConversionOptions
    table_rows: Mapping[int, list[Tag]] = field(default_factory=dict)
    parent_tags: frozenset[str] = frozenset()

    @property
    def inline(self) -> bool:
        """True inside headings and table cells, where blocks must stay on one line."""
        return "_inline" in self.parent_tags

    def rows_for(self, table: Tag) -> list[Tag]:
        """Return the ordered ``<tr>`` elements of ``table``."""
        rows = self.table_rows.get(id(table))
        if rows is None:
            # Tables outside the indexed subtree
            return list(table.find_all("tr"))
        return rows
