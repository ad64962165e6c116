"""Command-line interface for pyiiif using Click."""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import click
import httpx
from tqdm import tqdm

from pyiiif import __version__
from pyiiif.api import ImageRequest
from pyiiif.config import Config
from pyiiif.errors import IIIFError, ParameterSyntaxError
from pyiiif.http.client import create_client, fetch_image, fetch_info, request_image
from pyiiif.models.parameters import (
    Format,
    Quality,
    Region,
    Rotation,
    Size,
    parse_format,
    parse_quality,
    parse_region,
    parse_rotation,
    parse_size,
)
from pyiiif.utils.file import ensure_dir, format_from_path, image_filename, unique_filenames


# Setup logging - default to WARNING to avoid interfering with progress bars
# INFO and DEBUG logs are only shown when --verbose is used
logging.basicConfig(
    level=logging.WARNING,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def _parameter(parser: Callable):
    """Click callback turning an IIIF parameter string into its model."""
    def callback(ctx, param, value):
        if value is None:
            return None
        try:
            return parser(value)
        except ParameterSyntaxError as e:
            raise click.BadParameter(str(e))
    return callback


def image_options(func):
    """Options describing the image request."""
    options = [
        click.option('--prefix', '-p', 'prefixes', multiple=True,
                     help='Path prefix between host and identifier (repeatable)'),
        click.option('--region', '-r', default='full', callback=_parameter(parse_region),
                     help='Region: full, square, x,y,w,h or pct:x,y,w,h'),
        click.option('--size', '-s', default='full', callback=_parameter(parse_size),
                     help='Size: full, max, w, ,h, pct:n, w,h or !w,h'),
        click.option('--rotation', default='0', callback=_parameter(parse_rotation),
                     help='Rotation in degrees, prefix with ! to mirror'),
        click.option('--quality', '-q', default='default', callback=_parameter(parse_quality),
                     help='Quality: default, color, gray, bitonal'),
        click.option('--format', '-f', 'fmt', default=None, callback=_parameter(parse_format),
                     help='Format: jpg, tif, png, gif, jp2, pdf, webp'),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def http_options(func):
    """Options for the default HTTP client and logging."""
    options = [
        click.option('--timeout', default=30.0, help='Request timeout in seconds'),
        click.option('--proxy', help='HTTP/HTTPS proxy'),
        click.option('--no-ssl-verify', is_flag=True, help='Disable SSL verification'),
        click.option('--verbose', is_flag=True, help='Enable verbose logging'),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _setup_logging(verbose: bool) -> None:
    if verbose:
        logging.getLogger().setLevel(logging.INFO)
        # Also enable httpx logging
        logging.getLogger('httpx').setLevel(logging.INFO)


def _build_request(
    host: str,
    identifier: str,
    prefixes: Tuple[str, ...],
    region: Optional[Region] = None,
    size: Optional[Size] = None,
    rotation: Optional[Rotation] = None,
    quality: Optional[Quality] = None,
    fmt: Optional[Format] = None,
) -> ImageRequest:
    image = ImageRequest(host).with_prefixes(*prefixes).with_identifier(identifier)
    if region is not None:
        image = image.with_region(region)
    if size is not None:
        image = image.with_size(size)
    if rotation is not None:
        image = image.with_rotation(rotation)
    if quality is not None:
        image = image.with_quality(quality)
    if fmt is not None:
        image = image.with_format(fmt)
    return image


def _make_config(**kwargs) -> Config:
    try:
        return Config(**kwargs)
    except ValueError as e:
        raise click.BadParameter(str(e))


def _fail(error: Exception) -> None:
    click.echo(f"✗ Failed: {error}", err=True)
    sys.exit(1)


@click.group(invoke_without_command=True)
@click.option('--version', '-v', is_flag=True, help='Show version and exit')
@click.pass_context
def cli(ctx, version):
    """pyiiif - IIIF Image API client.

    Build Image API URLs, inspect info.json documents and download images
    from any IIIF Image API 2.x server.
    """
    if version:
        click.echo(f"pyiiif version {__version__}")
        ctx.exit()

    # If no subcommand, show help
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.argument('host')
@click.argument('identifier')
@image_options
@click.option('--info', 'info_url', is_flag=True, help='Print the info.json URL instead')
def url(
    host: str,
    identifier: str,
    prefixes: Tuple[str, ...],
    region: Region,
    size: Size,
    rotation: Rotation,
    quality: Quality,
    fmt: Optional[Format],
    info_url: bool,
):
    """Print the Image API URL for an image.

    Example:
        pyiiif url https://ids.lib.harvard.edu 25286607 -p ids -p iiif -s 500,
    """
    image = _build_request(host, identifier, prefixes, region, size, rotation, quality, fmt)
    try:
        built = image.info_url() if info_url else image.image_url()
    except IIIFError as e:
        _fail(e)
    click.echo(str(built))


@cli.command()
@click.argument('host')
@click.argument('identifier')
@click.option('--prefix', '-p', 'prefixes', multiple=True,
              help='Path prefix between host and identifier (repeatable)')
@click.option('--json', 'as_json', is_flag=True, help='Print the raw info.json')
@http_options
def info(
    host: str,
    identifier: str,
    prefixes: Tuple[str, ...],
    as_json: bool,
    timeout: float,
    proxy: Optional[str],
    no_ssl_verify: bool,
    verbose: bool,
):
    """Show the image information (info.json) of an image.

    Example:
        pyiiif info https://ids.lib.harvard.edu 25286607 -p ids -p iiif
    """
    _setup_logging(verbose)

    config = _make_config(timeout=timeout, proxy=proxy, verify_ssl=not no_ssl_verify)
    image = _build_request(host, identifier, prefixes)

    try:
        response = asyncio.run(fetch_info(image, config))
    except (IIIFError, httpx.HTTPError) as e:
        _fail(e)

    if as_json:
        click.echo(response.raw_json)
        return

    click.echo(f"URL: {response.url}")
    click.echo(f"Size: {response.width} x {response.height}")
    if response.info.compliance:
        click.echo(f"Compliance: {response.info.compliance}")
    if response.formats:
        click.echo(f"Formats: {', '.join(response.formats)}")
    if response.qualities:
        click.echo(f"Qualities: {', '.join(response.qualities)}")
    if response.supports:
        click.echo(f"Supports: {', '.join(response.supports)}")
    for size in response.sizes:
        click.echo(f"Available size: {size.width} x {size.height}")
    for tile in response.tiles:
        factors = ','.join(str(n) for n in tile.scale_factors)
        click.echo(f"Tiles: {tile.width} x {tile.height} (scale factors {factors})")
    for attribution in response.attribution:
        click.echo(f"Attribution: {attribution.value}")
    for license_url in response.license:
        click.echo(f"License: {license_url}")


@cli.command()
@click.argument('host')
@click.argument('identifier')
@click.option('--output', '-o', required=True, help='Destination file')
@image_options
@http_options
def download(
    host: str,
    identifier: str,
    output: str,
    prefixes: Tuple[str, ...],
    region: Region,
    size: Size,
    rotation: Rotation,
    quality: Quality,
    fmt: Optional[Format],
    timeout: float,
    proxy: Optional[str],
    no_ssl_verify: bool,
    verbose: bool,
):
    """Download one image to a file.

    Without --format the format is taken from the output file extension.

    Example:
        pyiiif download https://ids.lib.harvard.edu 25286607 -p ids -p iiif -s 500, -o foo.jpg
    """
    _setup_logging(verbose)

    config = _make_config(timeout=timeout, proxy=proxy, verify_ssl=not no_ssl_verify)
    fmt = fmt or format_from_path(output) or Format.JPG
    image = _build_request(host, identifier, prefixes, region, size, rotation, quality, fmt)

    try:
        response = asyncio.run(fetch_image(image, config))
    except (IIIFError, httpx.HTTPError) as e:
        _fail(e)

    path = response.write_to_file(output)
    click.echo(f"✓ Saved {len(response.content)} bytes to {path}")


@cli.command()
@click.argument('host')
@click.argument('file', type=click.Path(exists=True))
@click.option('--output', '-o', default='./downloads', help='Output directory')
@click.option('--concurrent', '-c', default=4, help='Max concurrent downloads')
@image_options
@http_options
def batch(
    host: str,
    file: str,
    output: str,
    concurrent: int,
    prefixes: Tuple[str, ...],
    region: Region,
    size: Size,
    rotation: Rotation,
    quality: Quality,
    fmt: Optional[Format],
    timeout: float,
    proxy: Optional[str],
    no_ssl_verify: bool,
    verbose: bool,
):
    """Download one image per identifier listed in a file.

    The file should contain one identifier per line. All downloads share
    one HTTP client.

    Example:
        pyiiif batch https://ids.lib.harvard.edu ids.txt -p ids -p iiif -s !1000,1000 -o ./images
    """
    _setup_logging(verbose)

    # Read identifiers from file
    identifiers = []
    with open(file, 'r') as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith('#'):
                identifiers.append(line)

    if not identifiers:
        click.echo("No identifiers found in file", err=True)
        sys.exit(1)

    config = _make_config(
        timeout=timeout,
        proxy=proxy,
        verify_ssl=not no_ssl_verify,
        max_concurrent_tasks=concurrent,
        download_dir=output,
    )

    images = [
        _build_request(host, identifier, prefixes, region, size, rotation, quality, fmt)
        for identifier in identifiers
    ]
    try:
        images[0].image_url()
    except IIIFError as e:
        _fail(e)

    click.echo(f"Found {len(identifiers)} identifiers to download")

    # Distinct identifiers can sanitize to the same file name
    natural = [image_filename(image.identifier, image.format) for image in images]
    filenames = unique_filenames(natural)
    for image, name, filename in zip(images, natural, filenames):
        if filename != name:
            logger.warning(f"Saving {image.identifier} as {filename} to avoid a name clash")

    successful, failed = asyncio.run(_download_all(list(zip(images, filenames)), config))

    click.echo(f"\nComplete: {successful} successful, {failed} failed")
    if failed:
        sys.exit(1)


async def _download_all(
    downloads: List[Tuple[ImageRequest, str]], config: Config
) -> Tuple[int, int]:
    """Download images to their file names with one shared client, bounded by a semaphore."""
    save_dir = ensure_dir(Path(config.download_dir))
    semaphore = asyncio.Semaphore(config.max_concurrent_tasks)
    successful = 0
    failed = 0

    async with create_client(config) as client:

        async def download_with_semaphore(image: ImageRequest, filename: str) -> bool:
            async with semaphore:
                try:
                    response = await request_image(image, client)
                    response.write_to_file(save_dir / filename)
                except (IIIFError, httpx.HTTPError, OSError) as e:
                    logger.error(f"Failed to download {image.identifier}: {e}")
                    return False
            logger.info(f"Downloaded: {image.identifier}")
            return True

        tasks = [download_with_semaphore(image, filename) for image, filename in downloads]

        pbar = tqdm(total=len(tasks), desc="Downloading", unit="image",
                    disable=not config.show_progress)
        try:
            for coro in asyncio.as_completed(tasks):
                if await coro:
                    successful += 1
                else:
                    failed += 1
                pbar.update(1)
                pbar.set_postfix({"success": successful, "failed": failed})
        finally:
            pbar.close()

    return successful, failed


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == '__main__':
    main()
