"""Post-processing for rendered Markdown."""

import re

_LINK = re.compile(r"\[\s*([^\]\n]+?)\s*\]\s*\(\s*([^)]+)\s*\)")


def _repair_link(match: re.Match[str]) -> str:
    text = re.sub(r"\s+", " ", match.group(1)).strip()
    url = re.sub(r"\s+", "", match.group(2))
    return f"[{text}]({url})"


def tidy_markdown(markdown: str) -> str:
    """
    Tidy up Markdown produced from messy HTML.

    Links split across lines are rejoined, runs of blank lines are
    squeezed to one, leading indentation is removed from every line and
    the result is trimmed. Applying it twice gives the same result as
    applying it once.

    Args:
        markdown: Markdown text

    Returns:
        Tidied Markdown
    """
    markdown = _LINK.sub(_repair_link, markdown)
    markdown = re.sub(r"\n{3,}", "\n\n", markdown)
    markdown = re.sub(r"^[ \t]+", "", markdown, flags=re.MULTILINE)
    # Lines emptied by the previous step
    markdown = re.sub(r"\n{3,}", "\n\n", markdown)
    return markdown.strip()
