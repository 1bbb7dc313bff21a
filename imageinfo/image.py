"""
Image metadata operations.

Provides the two operations exposed by the service: layer count and download
size of an image, and the OS identity embedded in it.
"""

import logging

from .auth import AuthTokenProvider
from .blobs import BlobArchiveScanner
from .client import RegistryClient
from .errors import ImageInfoError
from .manifest import ManifestResolver
from .models import LayerInfo, Manifest, OSReleaseRecord
from .reference import resolve_reference

logger = logging.getLogger(__name__)


def aggregate_layers(manifest: Manifest) -> tuple[int, int]:
    """
    Count distinct layers and sum their sizes.

    Layers are identified by digest; a digest listed several times is counted
    once, with the size of its first occurrence.

    Args:
        manifest: Parsed image manifest

    Returns:
        Tuple of (distinct_layer_count, total_size_in_bytes)

    Example:
        Layers [a:100, a:100, b:50] give (2, 150).
    """
    seen = set()
    total_size = 0
    for layer in manifest.layers:
        if layer.digest not in seen:
            seen.add(layer.digest)
            total_size += layer.size
    return len(seen), total_size


def get_image_layer_info(client: RegistryClient, repository: str, name: str, tag: str = "") -> LayerInfo:
    """
    Get distinct layer count and total download size of an image.

    Args:
        client: Registry client to issue requests with
        repository: Registry host or alias (e.g., "docker.io")
        name: Image name (e.g., "nginx" or "org/app")
        tag: Image tag, "latest" when empty

    Raises:
        ImageInfoError: NotFoundError when the image does not exist, another
            subclass for every other failure
    """
    ref = resolve_reference(repository, name, tag)
    try:
        manifest = ManifestResolver(client).resolve_manifest(ref)
    except ImageInfoError as e:
        logger.error(f"Failed to get manifest for layer info {ref}: {e}")
        raise

    layers_count, total_size = aggregate_layers(manifest)
    logger.info(f"Layer info for {ref}: {layers_count} layers, {total_size} bytes")
    return LayerInfo(layers_count=layers_count, total_size=total_size)


def get_os_release_info(client: RegistryClient, repository: str, name: str, tag: str = "") -> OSReleaseRecord:
    """
    Get the OS identity of an image from its os-release file.

    Args:
        client: Registry client to issue requests with
        repository: Registry host or alias (e.g., "docker.io")
        name: Image name (e.g., "nginx" or "org/app")
        tag: Image tag, "latest" when empty

    Raises:
        ImageInfoError: NotFoundError when the image or the os-release file
            does not exist, another subclass for every other failure
    """
    ref = resolve_reference(repository, name, tag)
    token_provider = AuthTokenProvider(client)
    try:
        manifest = ManifestResolver(client, token_provider).resolve_manifest(ref)
    except ImageInfoError as e:
        logger.error(f"Failed to get manifest for OS release info {ref}: {e}")
        raise

    try:
        return BlobArchiveScanner(client, token_provider).find_os_release(ref, manifest)
    except ImageInfoError as e:
        logger.error(f"Failed to get OS release info for {ref}: {e}")
        raise
