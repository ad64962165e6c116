"""Tests for request execution against a mocked transport."""

import asyncio
import json

import httpx
import pytest

from pyiiif.api import ImageRequest
from pyiiif.config import Config
from pyiiif.errors import (
    STATUS_DESCRIPTIONS,
    HostParseError,
    InfoParseError,
    ResponseError,
)
from pyiiif.http import client as http_client
from pyiiif.http.client import (
    create_client,
    fetch_image,
    fetch_info,
    request_image,
    request_info,
)

IMAGE_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x00\xff\xd9"


def run(coro):
    return asyncio.run(coro)


async def _request_and_close(func, image, client):
    async with client:
        return await func(image, client)


class TestRequestImage:

    def test_success_returns_bytes_intact(self, image, make_client):
        client = make_client(lambda request: httpx.Response(200, content=IMAGE_BYTES))

        response = run(_request_and_close(request_image, image.width(500), client))

        assert response.status_code == 200
        assert response.success is True
        assert response.content == IMAGE_BYTES
        assert response.url == "https://ids.lib.harvard.edu/ids/iiif/25286607/full/500,/0/default.jpg"

    def test_single_get_to_built_url(self, image, make_client):
        client = make_client(lambda request: httpx.Response(200, content=IMAGE_BYTES))

        run(_request_and_close(request_image, image.gray().png(), client))

        assert len(client.seen) == 1
        assert client.seen[0].method == "GET"
        assert str(client.seen[0].url) == str(image.gray().png().image_url())

    def test_any_2xx_is_success(self, image, make_client):
        client = make_client(lambda request: httpx.Response(203, content=b"ok"))
        response = run(_request_and_close(request_image, image, client))
        assert response.status_code == 203

    def test_not_found(self, image, make_client):
        client = make_client(lambda request: httpx.Response(404, text="Not Found"))

        with pytest.raises(ResponseError) as excinfo:
            run(_request_and_close(request_image, image, client))

        error = excinfo.value
        assert error.status_code == 404
        assert error.details.startswith("The image resource specified by identifier does not exist")
        assert str(error) == f"404: {STATUS_DESCRIPTIONS[404]}"
        assert error.url.endswith("/25286607/full/full/0/default.jpg")

    @pytest.mark.parametrize("status", [400, 401, 403, 500, 501, 503])
    def test_known_statuses(self, image, make_client, status):
        client = make_client(lambda request: httpx.Response(status))

        with pytest.raises(ResponseError) as excinfo:
            run(_request_and_close(request_image, image, client))

        assert excinfo.value.status_code == status
        assert excinfo.value.details == STATUS_DESCRIPTIONS[status]

    def test_unknown_status_uses_fallback(self, image, make_client):
        client = make_client(lambda request: httpx.Response(418))

        with pytest.raises(ResponseError) as excinfo:
            run(_request_and_close(request_image, image, client))

        assert excinfo.value.details == "Unspecified Error, check status code"

    def test_redirect_status_is_an_error_without_following(self, image, make_client):
        client = make_client(lambda request: httpx.Response(304))

        with pytest.raises(ResponseError) as excinfo:
            run(_request_and_close(request_image, image, client))

        assert excinfo.value.status_code == 304

    def test_transport_error_propagates(self, image, make_client):
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ConnectError("name resolution failed", request=request)

        client = make_client(handler)

        with pytest.raises(httpx.ConnectError):
            run(_request_and_close(request_image, image, client))

        # Not retried
        assert len(calls) == 1

    def test_timeout_propagates(self, image, make_client):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        client = make_client(handler)

        with pytest.raises(httpx.TimeoutException):
            run(_request_and_close(request_image, image, client))

    def test_invalid_host_makes_no_request(self, make_client):
        client = make_client(lambda request: httpx.Response(200))
        image = ImageRequest("ids.lib.harvard.edu").with_identifier("abc")

        with pytest.raises(HostParseError):
            run(_request_and_close(request_image, image, client))

        assert client.seen == []


class TestRequestInfo:

    def test_success(self, image, make_client, info_document):
        raw = json.dumps(info_document)
        client = make_client(lambda request: httpx.Response(200, text=raw))

        response = run(_request_and_close(request_info, image, client))

        assert str(client.seen[0].url) == "https://ids.lib.harvard.edu/ids/iiif/25286607/info.json"
        assert response.success is True
        assert response.raw_json == raw
        assert response.width == info_document["width"]
        assert response.height == info_document["height"]
        assert [t.width for t in response.tiles] == [256]
        assert list(response.formats) == info_document["profile"][1]["formats"]
        assert list(response.qualities) == info_document["profile"][1]["qualities"]
        assert list(response.supports) == info_document["profile"][1]["supports"]
        assert [(s.width, s.height) for s in response.sizes][0] == (130, 159)
        assert response.attribution[0].value == "Harvard University Library"
        assert response.license == ("https://creativecommons.org/licenses/by/4.0/",)

    def test_error_status(self, image, make_client):
        client = make_client(lambda request: httpx.Response(503, text="busy"))

        with pytest.raises(ResponseError) as excinfo:
            run(_request_and_close(request_info, image, client))

        assert excinfo.value.status_code == 503

    def test_malformed_payload(self, image, make_client):
        client = make_client(lambda request: httpx.Response(200, text="<html>oops</html>"))

        with pytest.raises(InfoParseError):
            run(_request_and_close(request_info, image, client))


class TestConvenience:

    def test_create_client_defaults(self):
        client = create_client(Config(proxy="", http2=False))
        try:
            assert isinstance(client, httpx.AsyncClient)
            assert client.follow_redirects is True
            assert client.timeout.read == 30.0
            assert set(client.headers.keys()) == {"accept", "accept-encoding", "connection", "user-agent"}
        finally:
            run(client.aclose())

    def test_fetch_image_uses_default_client(self, image, make_client, monkeypatch):
        client = make_client(lambda request: httpx.Response(200, content=IMAGE_BYTES))
        monkeypatch.setattr(http_client, "create_client", lambda config=None: client)

        response = run(fetch_image(image))

        assert response.content == IMAGE_BYTES
        assert client.is_closed

    def test_fetch_info_uses_default_client(self, image, make_client, monkeypatch, info_document):
        client = make_client(lambda request: httpx.Response(200, json=info_document))
        monkeypatch.setattr(http_client, "create_client", lambda config=None: client)

        response = run(fetch_info(image))

        assert response.info.id == info_document["@id"]
        assert client.is_closed

    def test_fetch_rejects_bad_host_before_creating_client(self, monkeypatch):
        def fail(config=None):
            raise AssertionError("client should not be created")

        monkeypatch.setattr(http_client, "create_client", fail)

        with pytest.raises(HostParseError):
            run(fetch_image(ImageRequest("nope").with_identifier("abc")))
        with pytest.raises(HostParseError):
            run(fetch_info(ImageRequest("nope").with_identifier("abc")))
