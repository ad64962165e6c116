"""
Parsers for documents served by IIIF image servers.

Usage:
    from pyiiif.formats.info import InfoParser

    parser = InfoParser()
    info = parser.parse(info_json)
"""

from pyiiif.formats.info import InfoParser, parse_info

__all__ = [
    "InfoParser",
    "parse_info",
]
