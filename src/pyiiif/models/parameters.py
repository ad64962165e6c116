"""IIIF Image API request parameters.

Each parameter family (region, size, rotation, quality, format) is modelled
as a small set of immutable variants. ``str()`` of any variant is its
canonical form in an Image API 2.x URL:

    {identifier}/{region}/{size}/{rotation}/{quality}.{format}

No semantic validation is done here. A percentage over 100 or a rotation
over 360 is serialized as given; rejecting it is the server's job.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Union

from pyiiif.errors import ParameterSyntaxError

# Decimal places kept when serializing floating point values
DECIMAL_PLACES = 3

_INT = r'\d+'
_NUMBER = r'\d+(?:\.\d*)?|\.\d+'


def format_number(value: float) -> str:
    """Format a number with fixed precision and no trailing zeros.

    Args:
        value: Number to format

    Returns:
        The value rounded to three decimal places with trailing zeros and
        a dangling decimal point removed (2.0 -> '2', 1.2345 -> '1.234')
    """
    text = f"{value:.{DECIMAL_PLACES}f}".rstrip('0').rstrip('.')
    # Negative values that round to zero
    if text == '-0':
        return '0'
    return text


def join_coords(*coords) -> str:
    """Join coordinates into a comma separated parameter string."""
    return ','.join(str(c) for c in coords)


# Region

@dataclass(frozen=True)
class FullRegion:
    """The complete image, without any cropping."""

    def __str__(self) -> str:
        return 'full'


@dataclass(frozen=True)
class SquareRegion:
    """A square whose side is the shorter dimension of the image.

    The server decides where the square is positioned along the longer
    dimension.
    """

    def __str__(self) -> str:
        return 'square'


@dataclass(frozen=True)
class AbsoluteRegion:
    """Region given in absolute pixels from the upper left corner."""

    x: int
    y: int
    w: int
    h: int

    def __str__(self) -> str:
        return join_coords(self.x, self.y, self.w, self.h)


@dataclass(frozen=True)
class PercentageRegion:
    """Region given as percentages of the full image dimensions."""

    x: float
    y: float
    w: float
    h: float

    def __str__(self) -> str:
        coords = [format_number(n) for n in (self.x, self.y, self.w, self.h)]
        return 'pct:' + join_coords(*coords)


Region = Union[FullRegion, SquareRegion, AbsoluteRegion, PercentageRegion]


# Size

@dataclass(frozen=True)
class FullSize:
    """The region is returned unscaled (deprecated in favour of max in 3.0)."""

    def __str__(self) -> str:
        return 'full'


@dataclass(frozen=True)
class MaxSize:
    """The region is returned at the maximum size the server allows."""

    def __str__(self) -> str:
        return 'max'


@dataclass(frozen=True)
class WidthSize:
    """Scale to exactly ``w`` pixels wide, keeping the aspect ratio."""

    w: int

    def __str__(self) -> str:
        return f"{self.w},"


@dataclass(frozen=True)
class HeightSize:
    """Scale to exactly ``h`` pixels high, keeping the aspect ratio."""

    h: int

    def __str__(self) -> str:
        return f",{self.h}"


@dataclass(frozen=True)
class PercentSize:
    """Scale both dimensions to ``n`` percent of the region."""

    n: float

    def __str__(self) -> str:
        return f"pct:{format_number(self.n)}"


@dataclass(frozen=True)
class WidthHeightSize:
    """Scale to exactly ``w`` x ``h``; the result may be distorted."""

    w: int
    h: int

    def __str__(self) -> str:
        return f"{self.w},{self.h}"


@dataclass(frozen=True)
class BestFitSize:
    """Scale to fit within ``w`` x ``h``, keeping the aspect ratio."""

    w: int
    h: int

    def __str__(self) -> str:
        return f"!{self.w},{self.h}"


Size = Union[
    FullSize,
    MaxSize,
    WidthSize,
    HeightSize,
    PercentSize,
    WidthHeightSize,
    BestFitSize,
]


# Rotation

@dataclass(frozen=True)
class Rotation:
    """Clockwise rotation in degrees, optionally mirrored first.

    Attributes:
        degrees: Degrees of clockwise rotation (0-360)
        mirror: Reflect on the vertical axis before rotating
    """

    degrees: float = 0.0
    mirror: bool = False

    def __str__(self) -> str:
        prefix = '!' if self.mirror else ''
        return f"{prefix}{format_number(self.degrees)}"


# Quality and format

class Quality(str, Enum):
    """Colour mode of the returned image."""

    DEFAULT = 'default'
    COLOR = 'color'
    GRAY = 'gray'
    BITONAL = 'bitonal'

    def __str__(self) -> str:
        return self.value


class Format(str, Enum):
    """Encoding of the returned image, expressed as the URL extension."""

    JPG = 'jpg'
    TIF = 'tif'
    PNG = 'png'
    GIF = 'gif'
    JP2 = 'jp2'
    PDF = 'pdf'
    WEBP = 'webp'

    def __str__(self) -> str:
        return self.value


# Parsing from the URL string form

def parse_region(text: str) -> Region:
    """Parse a region parameter string.

    Args:
        text: 'full', 'square', 'x,y,w,h' or 'pct:x,y,w,h'

    Returns:
        The matching region variant

    Raises:
        ParameterSyntaxError: If text matches none of the region forms
    """
    if text == 'full':
        return FullRegion()
    if text == 'square':
        return SquareRegion()

    if text.startswith('pct:'):
        coords = text[len('pct:'):].split(',')
        if len(coords) == 4 and all(re.fullmatch(_NUMBER, c) for c in coords):
            return PercentageRegion(*(float(c) for c in coords))
    else:
        coords = text.split(',')
        if len(coords) == 4 and all(re.fullmatch(_INT, c) for c in coords):
            return AbsoluteRegion(*(int(c) for c in coords))

    raise ParameterSyntaxError(f"Region syntax {text!r} is not valid")


def parse_size(text: str) -> Size:
    """Parse a size parameter string.

    Args:
        text: 'full', 'max', 'w,', ',h', 'pct:n', 'w,h' or '!w,h'

    Returns:
        The matching size variant

    Raises:
        ParameterSyntaxError: If text matches none of the size forms
    """
    if text == 'full':
        return FullSize()
    if text == 'max':
        return MaxSize()

    if text.startswith('pct:'):
        n = text[len('pct:'):]
        if re.fullmatch(_NUMBER, n):
            return PercentSize(float(n))
        raise ParameterSyntaxError(f"Size syntax {text!r} is not valid")

    best_fit = text.startswith('!')
    dims = text[1:] if best_fit else text
    match = re.fullmatch(r'(\d*),(\d*)', dims)
    if match:
        w, h = match.groups()
        if best_fit and w and h:
            return BestFitSize(int(w), int(h))
        if not best_fit:
            if w and h:
                return WidthHeightSize(int(w), int(h))
            if w:
                return WidthSize(int(w))
            if h:
                return HeightSize(int(h))

    raise ParameterSyntaxError(f"Size syntax {text!r} is not valid")


def parse_rotation(text: str) -> Rotation:
    """Parse a rotation parameter string such as '90' or '!180'.

    Raises:
        ParameterSyntaxError: If text is not an optionally mirrored number
    """
    mirror = text.startswith('!')
    degrees = text[1:] if mirror else text
    if not re.fullmatch(_NUMBER, degrees):
        raise ParameterSyntaxError(f"Rotation syntax {text!r} is not valid")
    return Rotation(float(degrees), mirror)


def parse_quality(text: str) -> Quality:
    """Parse a quality parameter string."""
    try:
        return Quality(text)
    except ValueError:
        raise ParameterSyntaxError(f"Quality {text!r} is not valid") from None


def parse_format(text: str) -> Format:
    """Parse a format extension, with or without a leading dot."""
    try:
        return Format(text.lstrip('.'))
    except ValueError:
        raise ParameterSyntaxError(f"Format {text!r} is not valid") from None
