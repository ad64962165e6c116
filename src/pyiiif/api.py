"""The Image API request configuration and URL builder.

An ImageRequest is immutable. Every setter-style method returns a new
request, so a base request can be shared and specialised freely:

    >>> base = ImageRequest("https://ids.lib.harvard.edu").with_prefixes("ids", "iiif")
    >>> str(base.with_identifier("25286607").width(500).image_url())
    'https://ids.lib.harvard.edu/ids/iiif/25286607/full/500,/0/default.jpg'
"""

from dataclasses import dataclass, field, replace
from typing import List, Tuple, Union
from urllib.parse import quote

import httpx

from pyiiif.errors import HostParseError
from pyiiif.models.parameters import (
    AbsoluteRegion,
    BestFitSize,
    Format,
    FullRegion,
    FullSize,
    HeightSize,
    MaxSize,
    PercentageRegion,
    PercentSize,
    Quality,
    Region,
    Rotation,
    Size,
    SquareRegion,
    WidthHeightSize,
    WidthSize,
    parse_format,
)

# Characters left literal inside a path segment (RFC 3986 sub-delims, ':' and '@')
SEGMENT_SAFE = "!$&'()*+,;=:@"

INFO_DOCUMENT = 'info.json'


def encode_segment(segment: str) -> str:
    """Percent-encode a single URL path segment.

    '/' and '%' are always encoded so an identifier stays one segment.
    """
    return quote(segment, safe=SEGMENT_SAFE)


def parse_host(host: str) -> httpx.URL:
    """Parse and check the base URL of an image server.

    Args:
        host: Absolute http(s) URL, optionally including path prefixes

    Returns:
        Parsed URL

    Raises:
        HostParseError: If the host cannot be parsed or is not absolute
    """
    try:
        url = httpx.URL(host)
    except (httpx.InvalidURL, TypeError) as e:
        raise HostParseError(host, str(e)) from e

    if url.scheme not in ('http', 'https'):
        raise HostParseError(host, "scheme must be http or https")
    if not url.host:
        raise HostParseError(host, "missing host name")
    return url


@dataclass(frozen=True)
class ImageRequest:
    """Parameters of one Image API request.

    Attributes:
        host: Base URL of the server with the scheme, e.g.
            'https://ids.lib.harvard.edu' or 'https://ids.lib.harvard.edu/ids/iiif/'
        prefixes: Path segments between the host and the identifier
        identifier: Image identifier
        region: Region of the full image to return
        size: Scaling of the extracted region
        rotation: Rotation and mirroring
        quality: Colour mode
        format: Image encoding
    """

    host: str
    prefixes: Tuple[str, ...] = ()
    identifier: str = ''
    region: Region = field(default_factory=FullRegion)
    size: Size = field(default_factory=FullSize)
    rotation: Rotation = field(default_factory=Rotation)
    quality: Quality = Quality.DEFAULT
    format: Format = Format.JPG

    # Image and prefixes

    def with_prefixes(self, *prefixes: str) -> "ImageRequest":
        """Replace the path prefixes (they can also be part of the host)."""
        return replace(self, prefixes=tuple(prefixes))

    def with_identifier(self, identifier: str) -> "ImageRequest":
        return replace(self, identifier=identifier)

    # Region

    def with_region(self, region: Region) -> "ImageRequest":
        return replace(self, region=region)

    def full_region(self) -> "ImageRequest":
        """Request the complete image (the default)."""
        return self.with_region(FullRegion())

    def square_region(self) -> "ImageRequest":
        return self.with_region(SquareRegion())

    def absolute_region(self, x: int, y: int, w: int, h: int) -> "ImageRequest":
        """Crop to a region given in pixels; 0,0 is the upper left pixel."""
        return self.with_region(AbsoluteRegion(x, y, w, h))

    def pct_region(self, x: float, y: float, w: float, h: float) -> "ImageRequest":
        """Crop to a region given in percent of the full image dimensions."""
        return self.with_region(PercentageRegion(x, y, w, h))

    # Size

    def with_size(self, size: Size) -> "ImageRequest":
        return replace(self, size=size)

    def full_size(self) -> "ImageRequest":
        return self.with_size(FullSize())

    def max_size(self) -> "ImageRequest":
        return self.with_size(MaxSize())

    def width(self, w: int) -> "ImageRequest":
        """Scale to width ``w``. Use width_height() to fix both dimensions."""
        return self.with_size(WidthSize(w))

    def height(self, h: int) -> "ImageRequest":
        return self.with_size(HeightSize(h))

    def pct_size(self, n: float) -> "ImageRequest":
        return self.with_size(PercentSize(n))

    def width_height(self, w: int, h: int) -> "ImageRequest":
        return self.with_size(WidthHeightSize(w, h))

    def best_fit(self, w: int, h: int) -> "ImageRequest":
        """Scale to fit within w x h keeping the aspect ratio ('!w,h')."""
        return self.with_size(BestFitSize(w, h))

    # Rotation

    def with_rotation(self, rotation: Rotation) -> "ImageRequest":
        return replace(self, rotation=rotation)

    def rotate(self, degrees: float) -> "ImageRequest":
        """Rotate clockwise, keeping the current mirror setting."""
        return self.with_rotation(Rotation(degrees, self.rotation.mirror))

    def mirrored(self) -> "ImageRequest":
        """Mirror on the vertical axis before rotating."""
        return self.with_rotation(Rotation(self.rotation.degrees, True))

    def rotate_right(self) -> "ImageRequest":
        return self.rotate(90)

    def rotate_left(self) -> "ImageRequest":
        return self.rotate(270)

    # Quality

    def with_quality(self, quality: Quality) -> "ImageRequest":
        return replace(self, quality=quality)

    def default_quality(self) -> "ImageRequest":
        return self.with_quality(Quality.DEFAULT)

    def full_color(self) -> "ImageRequest":
        return self.with_quality(Quality.COLOR)

    def gray(self) -> "ImageRequest":
        return self.with_quality(Quality.GRAY)

    def bitonal(self) -> "ImageRequest":
        return self.with_quality(Quality.BITONAL)

    # Format

    def with_format(self, fmt: Union[Format, str]) -> "ImageRequest":
        """Set the format from a Format or an extension such as 'png'.

        Raises:
            ParameterSyntaxError: If the extension is not a known format
        """
        if isinstance(fmt, Format):
            return replace(self, format=fmt)
        return replace(self, format=parse_format(fmt))

    def jpg(self) -> "ImageRequest":
        return self.with_format(Format.JPG)

    def tif(self) -> "ImageRequest":
        return self.with_format(Format.TIF)

    def png(self) -> "ImageRequest":
        return self.with_format(Format.PNG)

    def gif(self) -> "ImageRequest":
        return self.with_format(Format.GIF)

    def jp2(self) -> "ImageRequest":
        return self.with_format(Format.JP2)

    def pdf(self) -> "ImageRequest":
        return self.with_format(Format.PDF)

    def webp(self) -> "ImageRequest":
        return self.with_format(Format.WEBP)

    # URL construction

    def path_segments(self) -> List[str]:
        """Unencoded path segments of the image request."""
        return [
            *self.prefixes,
            self.identifier,
            str(self.region),
            str(self.size),
            str(self.rotation),
            f"{self.quality}.{self.format}",
        ]

    def info_path_segments(self) -> List[str]:
        """Unencoded path segments of the info.json request."""
        return [*self.prefixes, self.identifier, INFO_DOCUMENT]

    def image_url(self) -> httpx.URL:
        """Build the image URL.

        Raises:
            HostParseError: If the host is not a valid absolute URL
        """
        return self._build_url(self.path_segments())

    def info_url(self) -> httpx.URL:
        """Build the info.json URL.

        Raises:
            HostParseError: If the host is not a valid absolute URL
        """
        return self._build_url(self.info_path_segments())

    def _build_url(self, segments: List[str]) -> httpx.URL:
        url = parse_host(self.host)

        # Segments already in the host stay as given; a trailing '/' is dropped
        base_path = url.raw_path.split(b'?', 1)[0].decode('ascii').rstrip('/')
        path = base_path + ''.join('/' + encode_segment(s) for s in segments)

        return url.copy_with(raw_path=path.encode('ascii'), fragment=None)
