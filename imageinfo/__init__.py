"""
Container image metadata over the Docker/OCI Distribution protocol.

Answers two questions about a remote image without pulling it through a
Docker daemon: how large is it to download, and which OS does it ship.

Features:
    - Docker Hub alias and short-name normalization
    - On-demand bearer token authentication with a single retry
    - Multi-platform manifest index resolution for one target platform
    - Distinct-layer download size aggregation
    - os-release detection by scanning layer archives in memory
    - Configurable via environment variables

Operations:
    1. Layer info: manifest -> distinct layer count and total size
    2. OS release info: manifest -> layer blobs -> os-release -> OS identity

HTTP Endpoints:
    - POST /api/v1/image-download-size
    - POST /api/v1/os-release-info
"""

__version__ = "0.1.0"

# Import key components for convenience
from .config import Config
from .errors import (
    ImageInfoError,
    NotFoundError,
    RateLimitedError,
    AuthError,
    InternalError,
    ParseError,
)
from .reference import resolve, resolve_reference
from .client import RegistryClient
from .auth import AuthTokenProvider
from .manifest import ManifestResolver
from .blobs import BlobArchiveScanner
from .osrelease import parse_os_release
from .image import aggregate_layers, get_image_layer_info, get_os_release_info

__all__ = [
    "Config",
    "ImageInfoError",
    "NotFoundError",
    "RateLimitedError",
    "AuthError",
    "InternalError",
    "ParseError",
    "resolve",
    "resolve_reference",
    "RegistryClient",
    "AuthTokenProvider",
    "ManifestResolver",
    "BlobArchiveScanner",
    "parse_os_release",
    "aggregate_layers",
    "get_image_layer_info",
    "get_os_release_info",
]
