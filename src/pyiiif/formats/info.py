"""
IIIF Image API info.json parser.

Accepts the raw JSON text (str or bytes) or an already decoded dictionary
and returns an ImageInfo. Only Image API 2.x documents are supported.
"""

import json
import logging
from typing import Any, Dict, Optional, Union

from pyiiif.errors import InfoParseError
from pyiiif.models.info import ImageInfo

logger = logging.getLogger(__name__)

InfoData = Union[str, bytes, Dict[str, Any]]

# Context URI fragments and the Image API version they identify
CONTEXT_VERSIONS = [
    ('/image/3/', "3.0"),
    ('/image/2/', "2.1"),
    ('/image/1/', "1.1"),
    ('/image-api/1.1/', "1.1"),
]


class InfoParser:
    """Parser for IIIF Image API 2.x image information documents.

    Example:
        >>> parser = InfoParser()
        >>> info = parser.parse(response_text)
        >>> info.width, info.height
        (2000, 3000)
    """

    def parse(self, data: InfoData) -> ImageInfo:
        """Parse info.json into an ImageInfo.

        Args:
            data: JSON text or decoded dictionary

        Returns:
            ImageInfo object

        Raises:
            InfoParseError: If the payload is not valid UTF-8 JSON, is not a
                2.x document, or lacks required fields
        """
        document = self._decode(data)

        version = self.detect_version(document)
        if version is not None and version not in self.supported_versions():
            raise InfoParseError(f"Unsupported Image API version: {version}")

        return ImageInfo.from_dict(document)

    def validate(self, data: InfoData) -> bool:
        """Return True if the document parses, False otherwise."""
        try:
            self.parse(data)
        except InfoParseError as e:
            logger.debug(f"Invalid info.json: {e}")
            return False
        return True

    def detect_version(self, data: InfoData) -> Optional[str]:
        """Detect the Image API version from @context or type.

        Returns:
            '1.1', '2.1' or '3.0', or None if cannot be determined
        """
        try:
            document = self._decode(data)
        except InfoParseError:
            return None
        if not isinstance(document, dict):
            return None

        if document.get('type') == 'ImageService3':
            return "3.0"

        for context in self._contexts(document):
            for fragment, version in CONTEXT_VERSIONS:
                if fragment in context:
                    return version

        return None

    def supported_versions(self) -> list[str]:
        """Return list of supported Image API versions."""
        return ["2.0", "2.1"]

    @staticmethod
    def _decode(data: InfoData) -> Any:
        if isinstance(data, (str, bytes)):
            try:
                return json.loads(data)
            except UnicodeDecodeError as e:
                raise InfoParseError(f"info.json is not valid UTF-8: {e}") from e
            except json.JSONDecodeError as e:
                raise InfoParseError(f"info.json is not valid JSON: {e}") from e
        return data

    @staticmethod
    def _contexts(document: Dict[str, Any]) -> list[str]:
        context = document.get('@context') or document.get('context')
        if isinstance(context, str):
            return [context]
        if isinstance(context, list):
            return [c for c in context if isinstance(c, str)]
        return []


def parse_info(data: InfoData) -> ImageInfo:
    """Parse info.json with version checking.

    This is a convenience function that wraps InfoParser for easy use.

    Raises:
        InfoParseError: If the document cannot be parsed
    """
    parser = InfoParser()
    return parser.parse(data)
