"""Exception hierarchy for web2md.

Conversion of already-fetched HTML never raises for malformed markup; the
only failures callers need to handle come from fetching a page.
"""

from typing import Optional


class Web2mdError(Exception):
    """Base exception for all web2md errors."""

    pass


class FetchError(Web2mdError):
    """Raised when a URL cannot be fetched (transport or HTTP failure)."""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        super().__init__(f"Failed to fetch URL: {message}")
        self.url = url
        self.reason = message
        self.status_code = status_code
