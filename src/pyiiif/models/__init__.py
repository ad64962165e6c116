"""Data models for pyiiif."""

from pyiiif.models.info import (
    Attribution,
    ImageInfo,
    InfoSize,
    Logo,
    Profile,
    Service,
    Tile,
)
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
)
from pyiiif.models.response import ImageResponse, InfoResponse

__all__ = [
    "Attribution",
    "ImageInfo",
    "InfoSize",
    "Logo",
    "Profile",
    "Service",
    "Tile",
    "AbsoluteRegion",
    "BestFitSize",
    "Format",
    "FullRegion",
    "FullSize",
    "HeightSize",
    "MaxSize",
    "PercentageRegion",
    "PercentSize",
    "Quality",
    "Region",
    "Rotation",
    "Size",
    "SquareRegion",
    "WidthHeightSize",
    "WidthSize",
    "ImageResponse",
    "InfoResponse",
]
