"""
Image info service: container image metadata straight from the registry.

Speaks the Docker/OCI Distribution protocol to report the download size of an
image and the OS identity found in its os-release file. No local Docker daemon
is involved.

Architecture:
    1. Client posts {"repository", "name", "tag"} to an endpoint
    2. Service normalizes the reference (docker.io -> registry-1.docker.io/library/...)
    3. Service fetches the manifest, authenticating with a bearer token on 401
    4. Manifest indexes are resolved to the configured platform's manifest
    5a. Layer info: distinct layers are counted and their sizes summed
    5b. OS release info: layer blobs are downloaded and scanned for os-release

Endpoints:
    - POST /api/v1/image-download-size - {"layers_count", "total_size"}
    - POST /api/v1/os-release-info - {"pretty_name", "name", "version_id", "id", "home_url"}

Environment Variables:
    LOG_LEVEL, FLASK_HOST, FLASK_PORT, MANIFEST_TIMEOUT, BLOB_TIMEOUT,
    TARGET_ARCHITECTURE, TARGET_OS, MAX_IMAGE_NAME_LENGTH, MAX_TAG_LENGTH

Example:
    $ LOG_LEVEL=DEBUG python app.py 127.0.0.1:8080
    $ curl -X POST localhost:8080/api/v1/os-release-info \\
        -d '{"repository": "docker.io", "name": "ubuntu", "tag": "22.04"}'
"""

import argparse
import logging

from imageinfo.config import config
from imageinfo.routes import app

# Configure logging
logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def parse_listen_address(value: str) -> tuple[str, int]:
    """Split "host:port" (or ":port") into a bind address and port."""
    host, sep, port = value.rpartition(":")
    if not sep or not port.isdigit():
        raise argparse.ArgumentTypeError(f"invalid listen address {value!r}, expected host:port")
    return host or config.FLASK_HOST, int(port)


def main(argv=None):
    """Main entry point for the image info service."""
    parser = argparse.ArgumentParser(description="Container image metadata service")
    parser.add_argument(
        "listen",
        nargs="?",
        type=parse_listen_address,
        help="Listen address as host:port (default: FLASK_HOST:FLASK_PORT)",
    )
    args = parser.parse_args(argv)
    host, port = args.listen or (config.FLASK_HOST, config.FLASK_PORT)

    debug_mode = logger.getEffectiveLevel() == logging.DEBUG
    logger.info(f"Starting image info service on {host}:{port}")
    logger.info(f"Configuration: {config}")
    logger.info(f"Log level: {logging.getLevelName(logger.getEffectiveLevel())}")
    if debug_mode:
        logger.info("Flask debug mode enabled")
    try:
        app.run(host=host, port=port, debug=debug_mode)
    except KeyboardInterrupt:
        pass
    logger.info("Shutting down server...")


if __name__ == "__main__":
    main()
