"""GitHub-Flavored Markdown plugins: tables, strikethrough, task lists, highlighted code."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Optional

from bs4 import NavigableString, Tag

from ..models.rule import RenderContext, Rule
from .rules import block_content, class_string, element_children

if TYPE_CHECKING:
    from .renderer import MarkdownRenderer

_HIGHLIGHT_CLASS = re.compile(r"highlight-(?:text|source)-([a-z0-9]+)")

_ALIGN_BORDERS = {"left": ":--", "right": "--:", "center": ":-:"}


def index_table_rows(root: Tag) -> dict[int, list[Tag]]:
    """
    Map every table under ``root`` to its ordered rows.

    Rows include ``<tr>`` elements of nested sections and nested tables,
    in document order.

    Args:
        root: Content element about to be rendered

    Returns:
        Row lists keyed by ``id()`` of each ``<table>`` element
    """
    return {id(table): list(table.find_all("tr")) for table in root.find_all("table")}


def _first_child_node(node: Tag) -> Optional[object]:
    for child in node.children:
        if isinstance(child, NavigableString) and not child.strip():
            continue
        return child
    return None


def _is_first_tbody(element: Tag) -> bool:
    if element.name != "tbody":
        return False
    previous = element.find_previous_sibling()
    return previous is None or (previous.name == "thead" and not previous.get_text().strip())


def is_heading_row(row: Optional[Tag]) -> bool:
    """True if ``row`` should render as the heading row of a GFM table."""
    if row is None or row.parent is None:
        return False
    parent = row.parent
    if parent.name == "thead":
        return True
    return (
        _first_child_node(parent) is row
        and (parent.name == "table" or _is_first_tbody(parent))
        and all(cell.name == "th" for cell in element_children(row))
    )


def _cell(content: str, index: int) -> str:
    prefix = "| " if index == 0 else " "
    return f"{prefix}{content} |"


def _cells(row: Tag) -> list[Tag]:
    return [child for child in element_children(row) if child.name in ("th", "td")]


def _table_cell(content: str, node: Tag, context: RenderContext) -> str:
    index = 0
    if node.parent is not None:
        index = next((i for i, cell in enumerate(_cells(node.parent)) if cell is node), 0)
    return _cell(" ".join(content.split("\n")).strip(), index)


def _table_row(content: str, node: Tag, context: RenderContext) -> str:
    border = ""
    if is_heading_row(node):
        for index, cell in enumerate(_cells(node)):
            align = (cell.get("align") or "").lower()
            border += _cell(_ALIGN_BORDERS.get(align, "---"), index)
    return f"\n{content}" + (f"\n{border}" if border else "")


def _table(content: str, node: Tag, context: RenderContext) -> str:
    rows = context.rows_for(node)
    content = content.strip("\n")
    if rows and not is_heading_row(rows[0]):
        # GFM tables need a heading row
        columns = len(_cells(rows[0])) or 1
        heading = "".join(_cell("", i) for i in range(columns))
        border = "".join(_cell("---", i) for i in range(columns))
        content = f"{heading}\n{border}\n{content}"
    return f"\n\n{content}\n\n"


def _table_section(content: str, node: Tag, context: RenderContext) -> str:
    return content


def tables(renderer: MarkdownRenderer) -> None:
    renderer.add_rule("table-cell", Rule(["th", "td"], _table_cell))
    renderer.add_rule("table-row", Rule("tr", _table_row))
    renderer.add_rule("table", Rule("table", _table))
    renderer.add_rule("table-section", Rule(["thead", "tbody", "tfoot"], _table_section))


def _strikethrough(content: str, node: Tag, context: RenderContext) -> str:
    return f"~{content}~"


def strikethrough(renderer: MarkdownRenderer) -> None:
    renderer.add_rule("strikethrough", Rule(["del", "s", "strike"], _strikethrough))


def _is_task_list_checkbox(node: Tag) -> bool:
    return (
        node.name == "input"
        and (node.get("type") or "").lower() == "checkbox"
        and node.parent is not None
        and node.parent.name == "li"
    )


def _task_list_item(content: str, node: Tag, context: RenderContext) -> str:
    return ("[x]" if node.has_attr("checked") else "[ ]") + " "


def task_list_items(renderer: MarkdownRenderer) -> None:
    renderer.add_rule("task-list-items", Rule(_is_task_list_checkbox, _task_list_item))


def _is_highlighted_code_block(node: Tag) -> bool:
    if node.name != "div" or not _HIGHLIGHT_CLASS.search(class_string(node)):
        return False
    first = _first_child_node(node)
    return isinstance(first, Tag) and first.name == "pre"


def _highlighted_code_block(content: str, node: Tag, context: RenderContext) -> str:
    match = _HIGHLIGHT_CLASS.search(class_string(node))
    language = match.group(1) if match else ""
    pre = node.find("pre")
    text = pre.get_text().strip("\n") if pre is not None else ""
    return f"\n\n```{language}\n{text}\n```\n\n"


def highlighted_code_block(renderer: MarkdownRenderer) -> None:
    renderer.add_rule("highlighted-code-block", Rule(_is_highlighted_code_block, _highlighted_code_block))


def gfm(renderer: MarkdownRenderer) -> None:
    """All GFM extensions."""
    renderer.use(highlighted_code_block)
    renderer.use(strikethrough)
    renderer.use(tables)
    renderer.use(task_list_items)


def _unformatted(content: str, node: Tag, context: RenderContext) -> str:
    return content


def plain_tables(renderer: MarkdownRenderer) -> None:
    """Render table parts as plain blocks instead of pipe tables."""
    renderer.add_rule("plain-table", Rule(["table", "thead", "tbody", "tfoot", "tr", "th", "td"], block_content))


def plain_strikethrough(renderer: MarkdownRenderer) -> None:
    """Render struck-through text without markers."""
    renderer.add_rule("plain-strikethrough", Rule(["del", "s", "strike"], _unformatted))
