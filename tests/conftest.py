"""Shared fixtures for pyiiif tests."""

import json

import httpx
import pytest

from pyiiif.api import ImageRequest

HOST = "https://ids.lib.harvard.edu"

# Trimmed info.json as served by ids.lib.harvard.edu
INFO_DOCUMENT = {
    "@context": "http://iiif.io/api/image/2/context.json",
    "@id": "https://ids.lib.harvard.edu/ids/iiif/25286607",
    "protocol": "http://iiif.io/api/image",
    "width": 2087,
    "height": 2550,
    "sizes": [
        {"width": 130, "height": 159},
        {"width": 261, "height": 319},
        {"width": 522, "height": 638},
    ],
    "tiles": [
        {"width": 256, "scaleFactors": [1, 2, 4, 8, 16]},
    ],
    "attribution": [
        {"@value": "Harvard University Library", "@language": "en"},
    ],
    "license": ["https://creativecommons.org/licenses/by/4.0/"],
    "profile": [
        "http://iiif.io/api/image/2/level2.json",
        {
            "formats": ["jpg", "png", "gif"],
            "qualities": ["default", "color", "gray", "bitonal"],
            "supports": ["mirroring", "rotationArbitrary", "sizeAboveFull"],
        },
    ],
    "service": [
        {
            "@context": "http://iiif.io/api/annex/services/physdim/1/context.json",
            "profile": "http://iiif.io/api/annex/services/physdim",
            "physicalScale": 0.0025,
            "physicalUnits": "in",
        },
    ],
}


@pytest.fixture
def info_document():
    return json.loads(json.dumps(INFO_DOCUMENT))


@pytest.fixture
def image():
    return ImageRequest(HOST).with_prefixes("ids", "iiif").with_identifier("25286607")


@pytest.fixture
def make_client():
    """Build an AsyncClient whose requests are answered by ``handler``.

    Every request seen is appended to ``client.seen``.
    """
    def factory(handler):
        seen = []

        def record(request):
            seen.append(request)
            return handler(request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(record))
        client.seen = seen
        return client

    return factory
