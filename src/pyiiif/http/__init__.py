"""HTTP request execution for pyiiif (async-only).

Uses httpx directly; the client is always passed in by the caller or
created with create_client().
"""

from pyiiif.http.client import (
    create_client,  # Returns AsyncClient
    fetch_image,
    fetch_info,
    request_image,
    request_info,
)

__all__ = [
    "create_client",
    "fetch_image",
    "fetch_info",
    "request_image",
    "request_info",
]
