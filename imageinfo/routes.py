"""
Flask application and image metadata endpoints.

Implements the JSON API in front of the registry client.
"""

import logging
import time
from flask import Flask, abort, g, jsonify, request

from .client import RegistryClient
from .config import config
from .errors import ImageInfoError, NotFoundError
from .image import get_image_layer_info, get_os_release_info
from .validation import parse_image_request

logger = logging.getLogger(__name__)
access_logger = logging.getLogger("imageinfo.access")

# Create Flask app
app = Flask(__name__)

# Shared outbound client (pooled connections, no response caching)
registry_client = RegistryClient.from_config(config)


# -------------------------------
# Access logging
# -------------------------------


@app.before_request
def start_timer():
    g.start_time = time.perf_counter()


@app.after_request
def log_request(response):
    """Write one access log line per request: status, method, path, duration."""
    duration = time.perf_counter() - g.get("start_time", time.perf_counter())
    access_logger.info(f"{response.status_code} {request.method} {request.path} {duration * 1000:.1f}ms")
    return response


# -------------------------------
# API Endpoints
# -------------------------------


@app.route("/api/v1/image-download-size", methods=["POST"])
def image_download_size():
    """
    Get distinct layer count and total download size of an image.

    Request Body (JSON):
        {"repository": "docker.io", "name": "nginx", "tag": "latest"}
        tag is optional and defaults to "latest".

    Returns:
        JSON {"layers_count": int, "total_size": int}

    Raises:
        400: Invalid JSON, missing repository or name, invalid field format
        404: Image not found
        500: Any other registry or authentication failure
    """
    image_request = parse_image_request(request.get_json(force=True, silent=True))
    logger.info(
        f"Layer info requested: repository='{image_request.repository}', "
        f"name='{image_request.name}', tag='{image_request.tag}'"
    )

    try:
        info = get_image_layer_info(
            registry_client, image_request.repository, image_request.name, image_request.tag
        )
    except NotFoundError:
        abort(404, "Image not found")
    except ImageInfoError as e:
        logger.error(f"Layer info failed ({e.kind}): {e}")
        abort(500, "Internal server error")

    return jsonify(info.model_dump())


@app.route("/api/v1/os-release-info", methods=["POST"])
def os_release_info():
    """
    Get the OS identity embedded in an image.

    Request Body (JSON):
        {"repository": "docker.io", "name": "ubuntu", "tag": "22.04"}
        tag is optional and defaults to "latest".

    Returns:
        JSON {"pretty_name", "name", "version_id", "id", "home_url"}

    Raises:
        400: Invalid JSON, missing repository or name, invalid field format
        404: Image or os-release file not found
        500: Any other registry, authentication or parse failure
    """
    image_request = parse_image_request(request.get_json(force=True, silent=True))
    logger.info(
        f"OS release info requested: repository='{image_request.repository}', "
        f"name='{image_request.name}', tag='{image_request.tag}'"
    )

    try:
        record = get_os_release_info(
            registry_client, image_request.repository, image_request.name, image_request.tag
        )
    except NotFoundError:
        abort(404, "OS release info not found")
    except ImageInfoError as e:
        logger.error(f"OS release info failed ({e.kind}): {e}")
        abort(500, "Internal server error")

    return jsonify(record.model_dump())
