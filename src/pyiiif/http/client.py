"""HTTP request execution using httpx directly (async-only).

Each request function performs one GET with a caller-supplied
``httpx.AsyncClient`` and classifies the response by status. Reusing one
client across many requests (and tasks) lets httpx pool connections.

Nothing is retried. Transport failures propagate as the
``httpx.TransportError`` raised by the client.
"""

import logging
from typing import Optional

import httpx

from pyiiif.api import ImageRequest
from pyiiif.config import Config
from pyiiif.errors import ResponseError
from pyiiif.formats.info import parse_info
from pyiiif.models.response import ImageResponse, InfoResponse, is_success

logger = logging.getLogger(__name__)


def create_client(config: Optional[Config] = None) -> httpx.AsyncClient:
    """Create an async httpx client from configuration.

    No headers are added beyond the httpx defaults.

    Args:
        config: Configuration object (defaults to Config())

    Returns:
        Configured httpx.AsyncClient instance

    Example:
        >>> async with create_client() as client:
        ...     response = await request_image(image, client)
    """
    config = config or Config()

    return httpx.AsyncClient(
        timeout=config.timeout,
        verify=config.verify_ssl,
        follow_redirects=config.follow_redirects,
        http2=config.http2,
        proxy=config.proxy,
    )


def _raise_for_status(response: httpx.Response) -> None:
    """Raise ResponseError for any status outside 200-299."""
    if not is_success(response.status_code):
        logger.warning(f"{response.url} returned HTTP {response.status_code}")
        raise ResponseError(response.status_code, url=str(response.url))


async def request_image(image: ImageRequest, client: httpx.AsyncClient) -> ImageResponse:
    """Fetch the image described by an ImageRequest.

    Args:
        image: Request parameters
        client: httpx.AsyncClient instance, reused across requests

    Returns:
        ImageResponse holding the image bytes

    Raises:
        HostParseError: If the host is invalid (no request is made)
        ResponseError: If the server answers with a non-2xx status
        httpx.TransportError: On connection, TLS or timeout failures
    """
    url = image.image_url()
    logger.debug(f"Requesting image: {url}")

    response = await client.get(url)
    _raise_for_status(response)

    return ImageResponse(
        status_code=response.status_code,
        url=str(response.url),
        content=response.content,
    )


async def request_info(image: ImageRequest, client: httpx.AsyncClient) -> InfoResponse:
    """Fetch and parse the info.json of the image.

    Args:
        image: Request parameters (only host, prefixes and identifier are used)
        client: httpx.AsyncClient instance, reused across requests

    Returns:
        InfoResponse with the raw JSON and the parsed ImageInfo

    Raises:
        HostParseError: If the host is invalid (no request is made)
        ResponseError: If the server answers with a non-2xx status
        InfoParseError: If the body is not a valid info.json document
        httpx.TransportError: On connection, TLS or timeout failures
    """
    url = image.info_url()
    logger.debug(f"Requesting info: {url}")

    response = await client.get(url)
    _raise_for_status(response)

    raw_json = response.text
    info = parse_info(raw_json)

    return InfoResponse(
        status_code=response.status_code,
        url=str(response.url),
        raw_json=raw_json,
        info=info,
    )


async def fetch_image(image: ImageRequest, config: Optional[Config] = None) -> ImageResponse:
    """Fetch an image with a short-lived default client.

    Prefer request_image() with a shared client for more than a few requests.
    """
    # Fail before opening a client
    image.image_url()
    async with create_client(config) as client:
        return await request_image(image, client)


async def fetch_info(image: ImageRequest, config: Optional[Config] = None) -> InfoResponse:
    """Fetch info.json with a short-lived default client.

    Prefer request_info() with a shared client for more than a few requests.
    """
    image.info_url()
    async with create_client(config) as client:
        return await request_info(image, client)
