"""HTTP client for web2md."""

from .client import AsyncHttpClient, decode_content
from .protocols import HttpClient, HttpResponse

__all__ = [
    "AsyncHttpClient",
    "HttpClient",
    "HttpResponse",
    "decode_content",
]
