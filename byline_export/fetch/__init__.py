"""
Article and listing-page fetching.

This package handles HTTP fetching and the conversion of responses
(HTML, XML or JSON) into scannable payloads.
"""

from .fetcher import FetchPayload, FetchResult, build_client, fetch_payload, fetch_url, to_payload

__all__ = [
    "FetchPayload",
    "FetchResult",
    "build_client",
    "fetch_payload",
    "fetch_url",
    "to_payload",
]
