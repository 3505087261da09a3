"""Raw markup cleanup applied before parsing."""

import re

_SCRIPT = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_STYLE = re.compile(r"<style\b[^<]*(?:(?!</style>)<[^<]*)*</style>", re.IGNORECASE)
_COMMENT = re.compile(r"<!--[\s\S]*?-->")


def normalize_html(html: str) -> str:
    """
    Remove script, style and comment spans from raw HTML.

    Unterminated spans are left alone for the parser to deal with.

    Args:
        html: Raw HTML text

    Returns:
        HTML text without those spans, trimmed
    """
    html = _SCRIPT.sub("", html)
    html = _STYLE.sub("", html)
    html = _COMMENT.sub("", html)
    return html.strip()
