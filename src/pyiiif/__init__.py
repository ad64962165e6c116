"""
pyiiif - A Python client for the IIIF Image API.

This package builds IIIF Image API 2.x request URLs from structured region,
size, rotation, quality and format parameters, fetches images and info.json
documents over HTTP with httpx, and parses info.json into typed models.
"""

__version__ = "1.0.0"
__license__ = "AGPL-3.0"

from pyiiif.api import ImageRequest
from pyiiif.config import Config
from pyiiif.errors import (
    HostParseError,
    IIIFError,
    InfoParseError,
    ParameterSyntaxError,
    ResponseError,
)
from pyiiif.http.client import (
    create_client,
    fetch_image,
    fetch_info,
    request_image,
    request_info,
)

__all__ = [
    "ImageRequest",
    "Config",
    "HostParseError",
    "IIIFError",
    "InfoParseError",
    "ParameterSyntaxError",
    "ResponseError",
    "create_client",
    "fetch_image",
    "fetch_info",
    "request_image",
    "request_info",
    "__version__",
]
