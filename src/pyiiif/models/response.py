"""Successful Image API responses."""

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple, Union

from pyiiif.models.info import Attribution, ImageInfo, InfoSize, Tile


def is_success(status_code: int) -> bool:
    """Return True if the status code is in the range of 200-299."""
    return 200 <= status_code <= 299


@dataclass(frozen=True)
class ImageResponse:
    """Image bytes returned by the server, with the final URL and status."""

    status_code: int
    url: str
    content: bytes

    @property
    def success(self) -> bool:
        return is_success(self.status_code)

    def write_to_file(self, path: Union[str, Path]) -> Path:
        """Write the image bytes to a file, replacing any existing file.

        Args:
            path: Relative or absolute destination path

        Returns:
            Path the image was written to
        """
        dest_path = Path(path)
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        dest_path.write_bytes(self.content)
        return dest_path


@dataclass(frozen=True)
class InfoResponse:
    """Deserialized info.json together with the raw JSON text."""

    status_code: int
    url: str
    raw_json: str
    info: ImageInfo

    @property
    def success(self) -> bool:
        return is_success(self.status_code)

    @property
    def width(self) -> int:
        """The width in pixels of the full image content."""
        return self.info.width

    @property
    def height(self) -> int:
        """The height in pixels of the full image content."""
        return self.info.height

    @property
    def sizes(self) -> Tuple[InfoSize, ...]:
        """Width/height pairs the server can deliver for the complete image.

        A request built with the w,h size syntax from one of these must be
        supported, even when arbitrary sizes are not.
        """
        return self.info.sizes

    @property
    def tiles(self) -> Tuple[Tile, ...]:
        """Regions (tiles) that are efficient for the server to deliver."""
        return self.info.tiles

    @property
    def attribution(self) -> Tuple[Attribution, ...]:
        return self.info.attribution

    @property
    def license(self) -> Tuple[str, ...]:
        """Links to the license or rights statements for the content."""
        return self.info.license

    @property
    def formats(self) -> Tuple[str, ...]:
        return self.info.formats

    @property
    def qualities(self) -> Tuple[str, ...]:
        """Qualities available beyond the compliance level document."""
        return self.info.qualities

    @property
    def supports(self) -> Tuple[str, ...]:
        """Features supported beyond the compliance level document."""
        return self.info.supports
