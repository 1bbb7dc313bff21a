"""
Input validation module for the image info service.

Provides validation functions for inbound request bodies, registry hosts,
image names and tags.
"""

import logging
import re
from flask import abort

from .config import config
from .models import ImageRequest
from .reference import DEFAULT_TAG

logger = logging.getLogger(__name__)


def validate_repository(repository: str) -> None:
    """
    Validate registry host to keep it usable inside an https URL.

    Args:
        repository: Registry host or alias (e.g., "docker.io", "localhost:5000")

    Raises:
        HTTPException: 400 Bad Request if the host is invalid

    Validation Rules:
        - Hostname of alphanumeric characters, dots (.) and hyphens (-)
        - Optional numeric port after a colon
    """
    if not re.match(r'^[a-zA-Z0-9.-]+(:[0-9]{1,5})?$', repository):
        logger.warning(f"Invalid repository format: {repository}")
        abort(400, "Invalid repository: expected a registry host with optional port")

    logger.debug(f"Repository validated: {repository}")


def validate_image_name(name: str) -> None:
    """
    Validate image name before it is placed in registry URLs.

    Args:
        name: Image name to validate (e.g., "nginx" or "bitnami/redis")

    Raises:
        HTTPException: 400 Bad Request if name is invalid

    Validation Rules:
        - Must be 1-{MAX_IMAGE_NAME_LENGTH} characters (configurable)
        - Only alphanumeric characters, dots (.), hyphens (-), underscores (_), and slashes (/)

    Examples:
        >>> validate_image_name("nginx")  # OK
        >>> validate_image_name("bitnami/redis")  # OK
        >>> validate_image_name("nginx?x=1")  # Raises 400 (question mark)
    """
    if not name or len(name) > config.MAX_IMAGE_NAME_LENGTH:
        logger.warning(f"Invalid image name length: {len(name)}")
        abort(400, f"Invalid image name: must be 1-{config.MAX_IMAGE_NAME_LENGTH} characters")

    if not re.match(r'^[a-zA-Z0-9._/-]+$', name):
        logger.warning(f"Invalid image name format: {name}")
        abort(400, "Invalid image name: only alphanumeric, dots, hyphens, underscores, and slashes allowed")

    logger.debug(f"Image name validated: {name}")


def validate_tag(tag: str) -> None:
    """
    Validate container image tag or digest reference.

    Args:
        tag: Tag name, or a manifest digest used in its place

    Raises:
        HTTPException: 400 Bad Request if tag is invalid

    Validation Rules:
        - Must be 1-{MAX_TAG_LENGTH} characters (configurable)
        - Only alphanumeric characters, dots (.), hyphens (-), and underscores (_)
        - Or a digest: sha256:<64 lowercase hex characters>
        - Common tags: latest, v1.0.0, 22.04, alpine, etc.
    """
    if not tag or len(tag) > config.MAX_TAG_LENGTH:
        logger.warning(f"Invalid tag length: {len(tag)}")
        abort(400, f"Invalid tag: must be 1-{config.MAX_TAG_LENGTH} characters")

    if re.match(r'^sha256:[a-f0-9]{64}$', tag):
        logger.debug(f"Digest reference validated: {tag}")
        return

    if not re.match(r'^[a-zA-Z0-9._-]+$', tag):
        logger.warning(f"Invalid tag format: {tag}")
        abort(400, "Invalid tag: only alphanumeric, dots, hyphens, underscores, or a sha256 digest allowed")

    logger.debug(f"Tag validated: {tag}")


def parse_image_request(payload) -> ImageRequest:
    """
    Validate a decoded JSON request body.

    Args:
        payload: Result of decoding the request body, None if it was not JSON

    Returns:
        ImageRequest with the tag defaulted to "latest"

    Raises:
        HTTPException: 400 if the body is not a JSON object, repository or
            name is missing, or any field fails validation

    Example:
        >>> parse_image_request({"repository": "docker.io", "name": "nginx"})
        ImageRequest(repository='docker.io', name='nginx', tag='latest')
    """
    if not isinstance(payload, dict):
        logger.warning("Request body is not a JSON object")
        abort(400, "Invalid JSON")

    repository = payload.get("repository") or ""
    name = payload.get("name") or ""
    tag = payload.get("tag") or DEFAULT_TAG
    if not all(isinstance(v, str) for v in (repository, name, tag)):
        logger.warning(f"Non-string fields in request: {payload}")
        abort(400, "Invalid JSON")

    if not repository or not name:
        logger.warning(f"Missing repository or name in request: {payload}")
        abort(400, "Missing repository or name")

    validate_repository(repository)
    validate_image_name(name)
    validate_tag(tag)
    return ImageRequest(repository=repository, name=name, tag=tag)
