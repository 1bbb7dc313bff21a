"""
Registry address resolution.

Maps user supplied registry aliases and short image names onto the canonical
upstream host and repository path. Pure functions, no I/O.
"""

import logging

from .models import ImageReference

logger = logging.getLogger(__name__)

DOCKER_HUB_HOST = "registry-1.docker.io"
DEFAULT_NAMESPACE = "library"
DEFAULT_TAG = "latest"

# Hostnames that are served by Docker Hub
REGISTRY_ALIASES = {
    "docker.io": DOCKER_HUB_HOST,
    "dockerhub.timeweb.cloud": DOCKER_HUB_HOST,
}


def resolve(host: str, image_name: str) -> tuple[str, str]:
    """
    Resolve a registry host and image name to their canonical form.

    Args:
        host: Registry host or alias (e.g., "docker.io")
        image_name: Image name with or without namespace (e.g., "nginx")

    Returns:
        Tuple of (canonical_host, canonical_image_name)

    Examples:
        >>> resolve("docker.io", "nginx")
        ('registry-1.docker.io', 'library/nginx')

        >>> resolve("ghcr.io", "org/app")
        ('ghcr.io', 'org/app')
    """
    canonical_host = REGISTRY_ALIASES.get(host, host)
    if canonical_host == DOCKER_HUB_HOST and "/" not in image_name:
        image_name = f"{DEFAULT_NAMESPACE}/{image_name}"
    return canonical_host, image_name


def resolve_reference(repository: str, name: str, tag: str = "") -> ImageReference:
    """Build a normalized ImageReference, defaulting an empty tag to "latest"."""
    host, image_name = resolve(repository, name)
    ref = ImageReference(registry_host=host, image_name=image_name, tag=tag or DEFAULT_TAG)
    logger.debug(f"Resolved {repository}/{name}:{tag or DEFAULT_TAG} to {ref}")
    return ref
