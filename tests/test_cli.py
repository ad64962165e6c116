"""Tests for the command-line interface."""

import httpx
import pytest
from click.testing import CliRunner

from pyiiif import __version__
from pyiiif import cli as cli_module
from pyiiif.cli import cli
from pyiiif.http import client as http_client

HOST = "https://ids.lib.harvard.edu"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def serve(make_client, monkeypatch):
    """Route all client requests made by the CLI to ``handler``."""
    def install(handler):
        client = make_client(handler)
        monkeypatch.setattr(http_client, "create_client", lambda config=None: client)
        monkeypatch.setattr(cli_module, "create_client", lambda config=None: client)
        return client
    return install


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_url(runner):
    result = runner.invoke(cli, [
        "url", HOST, "25286607", "-p", "ids", "-p", "iiif", "--size", "500,",
    ])
    assert result.exit_code == 0
    assert result.output.strip() == (
        "https://ids.lib.harvard.edu/ids/iiif/25286607/full/500,/0/default.jpg"
    )


def test_url_all_parameters(runner):
    result = runner.invoke(cli, [
        "url", HOST, "abc",
        "--region", "pct:1.2345,2,3.03,4",
        "--size", "!200,200",
        "--rotation", "!90",
        "--quality", "gray",
        "--format", "png",
    ])
    assert result.exit_code == 0
    assert result.output.strip() == (
        "https://ids.lib.harvard.edu/abc/pct:1.234,2,3.03,4/!200,200/!90/gray.png"
    )


def test_url_info(runner):
    result = runner.invoke(cli, ["url", HOST, "25286607", "-p", "ids", "-p", "iiif", "--info"])
    assert result.exit_code == 0
    assert result.output.strip() == "https://ids.lib.harvard.edu/ids/iiif/25286607/info.json"


def test_url_bad_parameter(runner):
    result = runner.invoke(cli, ["url", HOST, "abc", "--size", "huge"])
    assert result.exit_code == 2
    assert "Size syntax" in result.output


def test_url_bad_host(runner):
    result = runner.invoke(cli, ["url", "ids.lib.harvard.edu", "abc"])
    assert result.exit_code == 1
    assert "Invalid host" in result.output


def test_info(runner, serve, info_document):
    serve(lambda request: httpx.Response(200, json=info_document))

    result = runner.invoke(cli, ["info", HOST, "25286607", "-p", "ids", "-p", "iiif"])

    assert result.exit_code == 0
    assert "Size: 2087 x 2550" in result.output
    assert "Formats: jpg, png, gif" in result.output
    assert "Tiles: 256 x 256 (scale factors 1,2,4,8,16)" in result.output
    assert "Attribution: Harvard University Library" in result.output


def test_info_json(runner, serve, info_document):
    serve(lambda request: httpx.Response(200, json=info_document))

    result = runner.invoke(cli, ["info", HOST, "25286607", "--json"])

    assert result.exit_code == 0
    assert '"@id"' in result.output


def test_info_not_found(runner, serve):
    serve(lambda request: httpx.Response(404))

    result = runner.invoke(cli, ["info", HOST, "missing"])

    assert result.exit_code == 1
    assert "404" in result.output


def test_download(runner, serve, tmp_path):
    client = serve(lambda request: httpx.Response(200, content=b"PNGDATA"))
    dest = tmp_path / "foo.png"

    result = runner.invoke(cli, [
        "download", HOST, "25286607", "-p", "ids", "-p", "iiif", "-s", "500,", "-o", str(dest),
    ])

    assert result.exit_code == 0, result.output
    assert dest.read_bytes() == b"PNGDATA"
    # Format taken from the output extension
    assert str(client.seen[0].url).endswith("/25286607/full/500,/0/default.png")


def test_download_transport_error(runner, serve, tmp_path):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    serve(handler)

    result = runner.invoke(cli, ["download", HOST, "abc", "-o", str(tmp_path / "a.jpg")])

    assert result.exit_code == 1
    assert "connection refused" in result.output
    assert not (tmp_path / "a.jpg").exists()


def test_batch(runner, serve, tmp_path):
    def handler(request):
        if "/missing/" in request.url.path:
            return httpx.Response(404)
        return httpx.Response(200, content=request.url.path.encode())

    client = serve(handler)
    ids = tmp_path / "ids.txt"
    ids.write_text("# identifiers\n25286607\n\nark:/1/2\nmissing\n")
    out = tmp_path / "images"

    result = runner.invoke(cli, [
        "batch", HOST, str(ids), "-o", str(out), "-c", "2", "-p", "ids", "-p", "iiif",
    ])

    assert result.exit_code == 1
    assert "Complete: 2 successful, 1 failed" in result.output
    assert len(client.seen) == 3
    assert (out / "25286607.jpg").read_bytes() == b"/ids/iiif/25286607/full/full/0/default.jpg"
    assert (out / "ark__1_2.jpg").exists()
    assert not (out / "missing.jpg").exists()


def test_batch_name_clash(runner, serve, tmp_path):
    client = serve(lambda request: httpx.Response(200, content=request.url.raw_path))
    ids = tmp_path / "ids.txt"
    ids.write_text("a/b\na_b\na:b\n")
    out = tmp_path / "images"

    result = runner.invoke(cli, ["batch", HOST, str(ids), "-o", str(out), "-c", "1"])

    assert result.exit_code == 0
    assert "Complete: 3 successful, 0 failed" in result.output
    assert len(client.seen) == 3
    assert (out / "a_b.jpg").read_bytes() == b"/a%2Fb/full/full/0/default.jpg"
    assert (out / "a_b_2.jpg").read_bytes() == b"/a_b/full/full/0/default.jpg"
    assert (out / "a_b_3.jpg").read_bytes() == b"/a:b/full/full/0/default.jpg"


def test_batch_write_error_counts_as_failure(runner, serve, tmp_path):
    client = serve(lambda request: httpx.Response(200, content=b"image"))
    ids = tmp_path / "ids.txt"
    ids.write_text("a\nb\nc\n")
    out = tmp_path / "images"
    # A directory where the file should go makes the write fail
    (out / "b.jpg").mkdir(parents=True)

    result = runner.invoke(cli, ["batch", HOST, str(ids), "-o", str(out)])

    assert result.exit_code == 1
    assert "Complete: 2 successful, 1 failed" in result.output
    assert len(client.seen) == 3
    assert (out / "a.jpg").read_bytes() == b"image"
    assert (out / "c.jpg").read_bytes() == b"image"
    assert (out / "b.jpg").is_dir()


def test_batch_empty_file(runner, tmp_path):
    ids = tmp_path / "ids.txt"
    ids.write_text("# nothing\n\n")

    result = runner.invoke(cli, ["batch", HOST, str(ids)])

    assert result.exit_code == 1
    assert "No identifiers found" in result.output


def test_batch_invalid_concurrency(runner, tmp_path):
    ids = tmp_path / "ids.txt"
    ids.write_text("abc\n")

    result = runner.invoke(cli, ["batch", HOST, str(ids), "-c", "0"])

    assert result.exit_code == 2
