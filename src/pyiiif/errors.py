"""Exceptions raised by pyiiif.

Transport failures (DNS, TLS, timeouts, refused connections) are not wrapped:
they surface as the ``httpx.TransportError`` raised by the client.
"""

from typing import Optional

# Fixed descriptions from the IIIF Image API 2.1 status code table
STATUS_DESCRIPTIONS = {
    400: (
        "The server cannot fulfill the request, as the syntax of the request "
        "issued by the client is incorrect."
    ),
    401: (
        "Authentication is required and not provided. "
        "See https://iiif.io/api/image/2.1/#authentication"
    ),
    403: (
        "The user, authenticated or not, is not permitted to perform the "
        "requested operation."
    ),
    404: (
        "The image resource specified by identifier does not exist, the value "
        "of one or more of the parameters is not supported for this image, or "
        "the requested size is greater than the limits specified."
    ),
    500: (
        "The server encountered an unexpected error that prevented it from "
        "fulfilling the request."
    ),
    501: "The server received a valid IIIF request that is not implemented.",
    503: (
        "The server is busy/temporarily unavailable due to load/maintenance "
        "issues."
    ),
}

UNSPECIFIED_DESCRIPTION = "Unspecified Error, check status code"


def describe_status(status_code: int) -> str:
    """Return the IIIF description for an HTTP error status."""
    return STATUS_DESCRIPTIONS.get(status_code, UNSPECIFIED_DESCRIPTION)


class IIIFError(Exception):
    """Base exception class for all errors raised by pyiiif."""
    pass


class HostParseError(IIIFError, ValueError):
    """Raised when the configured host is not an absolute http(s) URL."""

    def __init__(self, host: str, reason: str = "not an absolute URL"):
        self.host = host
        self.reason = reason
        super().__init__(f"Invalid host {host!r}: {reason}")


class ParameterSyntaxError(IIIFError, ValueError):
    """Raised when a parameter string does not match the IIIF grammar."""
    pass


class InfoParseError(IIIFError, ValueError):
    """Raised when an info.json payload cannot be deserialized."""
    pass


class ResponseError(IIIFError):
    """Non-2xx response from an image server.

    Attributes:
        status_code: HTTP status returned by the server
        details: Fixed IIIF description of the status
        url: Requested URL, when known
    """

    def __init__(self, status_code: int, url: Optional[str] = None):
        self.status_code = status_code
        self.details = describe_status(status_code)
        self.url = url
        super().__init__(f"{status_code}: {self.details}")
