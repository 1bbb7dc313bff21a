"""
Manifest resolution against a Docker/OCI Distribution registry.

Fetches the manifest for a tag, authenticating on demand, and follows a
multi-platform manifest index down to the manifest of the configured platform.
"""

import json
import logging
from typing import Optional

import requests
from pydantic import ValidationError
from requests.exceptions import RequestException

from .auth import AuthTokenProvider
from .client import RegistryClient
from .errors import InternalError, NotFoundError, ParseError, RateLimitedError
from .models import ImageReference, Manifest, ManifestIndex, ManifestIndexEntry, Platform

logger = logging.getLogger(__name__)

DOCKER_MANIFEST_V2 = "application/vnd.docker.distribution.manifest.v2+json"
OCI_IMAGE_INDEX = "application/vnd.oci.image.index.v1+json"
OCI_IMAGE_MANIFEST = "application/vnd.oci.image.manifest.v1+json"


class ManifestResolver:
    """
    Resolves an image reference to a single-platform manifest.

    Protocol:
        1. Unauthenticated GET of the manifest
        2. On 401, fetch a pull token and retry exactly once with it
        3. Map 404/429/other failures to typed errors
        4. If the document is an OCI index, fetch the entry for the target
           platform by digest
        5. Parse the final document into a Manifest
    """

    def __init__(
        self,
        client: RegistryClient,
        token_provider: Optional[AuthTokenProvider] = None,
        platform: Optional[Platform] = None,
    ):
        self.client = client
        self.token_provider = token_provider or AuthTokenProvider(client)
        self.platform = platform or client.platform

    def resolve_manifest(self, ref: ImageReference) -> Manifest:
        """
        Fetch and parse the manifest of an image.

        Args:
            ref: Normalized image reference

        Returns:
            Parsed single-platform Manifest

        Raises:
            NotFoundError: Registry answered 404
            RateLimitedError: Registry answered 429
            AuthError: A token was needed but could not be obtained
            ParseError: The final document is not a valid manifest
            InternalError: Any other transport or status failure
        """
        url = self.client.manifest_url(ref, ref.tag)
        token = None

        response = self._get(ref, url)
        if response.status_code == requests.codes.unauthorized:
            logger.info(
                f"Received 401 for {ref}, WWW-Authenticate: {response.headers.get('WWW-Authenticate', '')}"
            )
            token = self.token_provider.fetch_token(ref.registry_host, ref.image_name)
            logger.info(f"Retrying manifest request with token for {ref}")
            response = self._get(ref, url, token)

        body = self._check_response(ref, response)

        entry = self._select_platform(ref, body)
        if entry is not None:
            if token is None:
                token = self.token_provider.fetch_token(ref.registry_host, ref.image_name)
            logger.info(f"Fetching {self._platform_label()} manifest {entry.digest} for {ref}")
            response = self._get(ref, self.client.manifest_url(ref, entry.digest), token)
            body = self._check_response(ref, response)

        return self._parse_manifest(ref, body)

    def _platform_label(self) -> str:
        return f"{self.platform.os}/{self.platform.architecture}"

    def _get(self, ref: ImageReference, url: str, token: Optional[str] = None) -> requests.Response:
        headers = {"Accept": DOCKER_MANIFEST_V2}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            return self.client.get(url, headers=headers)
        except RequestException as e:
            logger.error(f"Failed to fetch manifest for {ref}: {e}")
            raise InternalError(f"Manifest fetch failed: {e}")

    def _check_response(self, ref: ImageReference, response: requests.Response) -> bytes:
        """Return the body of a 200 response, raise the matching error otherwise."""
        status = response.status_code
        logger.debug(f"Manifest response for {ref}: status={status}, body={response.text}")

        if status == requests.codes.not_found:
            logger.info(f"Manifest not found for {ref}")
            raise NotFoundError(f"Manifest not found: {ref}")
        if status == requests.codes.too_many_requests:
            logger.error(f"Rate limit exceeded for {ref}, headers: {dict(response.headers)}")
            raise RateLimitedError(f"Registry rate limit exceeded for {ref}")
        if status != requests.codes.ok:
            logger.error(f"Unexpected status {status} for manifest {ref}, body: {response.text}")
            raise InternalError(f"Unexpected status {status} for manifest {ref}")

        return response.content

    def _select_platform(self, ref: ImageReference, body: bytes) -> Optional[ManifestIndexEntry]:
        """
        Pick the first index entry matching the target platform.

        Returns None when the body is not a manifest index or when no entry
        qualifies; in both cases the body is then parsed as a plain manifest.
        """
        try:
            document = json.loads(body)
        except ValueError:
            return None
        if not isinstance(document, dict) or document.get("mediaType") != OCI_IMAGE_INDEX:
            return None

        try:
            index = ManifestIndex.model_validate(document)
        except ValidationError as e:
            logger.warning(f"Ignoring malformed manifest index for {ref}: {e}")
            return None

        logger.info(f"Received manifest index for {ref}, selecting {self._platform_label()} manifest")
        for entry in index.manifests:
            if (
                entry.platform is not None
                and entry.platform.architecture == self.platform.architecture
                and entry.platform.os == self.platform.os
                and entry.mediaType == OCI_IMAGE_MANIFEST
            ):
                return entry

        logger.warning(f"No {self._platform_label()} manifest in index for {ref}")
        return None

    def _parse_manifest(self, ref: ImageReference, body: bytes) -> Manifest:
        try:
            manifest = Manifest.model_validate_json(body)
        except ValidationError as e:
            logger.error(f"Failed to parse manifest for {ref}: {e}")
            raise ParseError(f"Invalid manifest for {ref}: {e}")

        logger.info(f"Parsed manifest for {ref}: {len(manifest.layers)} layers")
        return manifest
