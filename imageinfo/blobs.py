"""
Layer blob retrieval and in-memory tar scanning.

Downloads image layers one by one and looks for an os-release file inside
each layer archive. The first match in manifest order wins: later layers are
not consulted, even though they would shadow the file in a real filesystem.
"""

import io
import logging
import tarfile
import zlib
from typing import Optional

import requests
from requests.exceptions import RequestException

from .auth import AuthTokenProvider
from .client import RegistryClient
from .errors import InternalError, NotFoundError
from .models import ImageReference, Manifest, OSReleaseRecord
from .osrelease import OS_RELEASE_PATHS, parse_os_release, read_os_release

logger = logging.getLogger(__name__)

# Raised by tarfile and the gzip/bz2/lzma readers behind it on corrupt input
ARCHIVE_ERRORS = (tarfile.TarError, EOFError, OSError, zlib.error)


class BlobArchiveScanner:
    """Finds and parses the os-release file of an image"""

    def __init__(self, client: RegistryClient, token_provider: Optional[AuthTokenProvider] = None):
        self.client = client
        self.token_provider = token_provider or AuthTokenProvider(client)

    def find_os_release(self, ref: ImageReference, manifest: Manifest) -> OSReleaseRecord:
        """
        Scan the layers of a manifest for an os-release file.

        One token is fetched up front and used for every blob download.

        Args:
            ref: Normalized image reference
            manifest: Manifest whose layers are scanned in listed order

        Returns:
            OSReleaseRecord parsed from the first os-release file found

        Raises:
            AuthError: If the pull token cannot be obtained
            InternalError: If any layer download fails
            ParseError: If the first os-release file found has no ID
            NotFoundError: If no layer contains an os-release file
        """
        token = self.token_provider.fetch_token(ref.registry_host, ref.image_name)

        total = len(manifest.layers)
        for idx, layer in enumerate(manifest.layers, 1):
            logger.info(f"Fetching blob {layer.digest} for {ref} (layer {idx}/{total})")
            blob = self.fetch_blob(ref, layer.digest, token)
            record = self.scan_archive(ref, layer.digest, blob)
            if record is not None:
                logger.info(f"Found os-release for {ref}: {record}")
                return record

        logger.info(f"os-release not found in any layer for {ref}")
        raise NotFoundError(f"os-release not found in {ref}")

    def fetch_blob(self, ref: ImageReference, digest: str, token: str) -> bytes:
        """Download a whole blob into memory using the bulk timeout."""
        url = self.client.blob_url(ref, digest)
        try:
            response = self.client.get(url, headers={"Authorization": f"Bearer {token}"}, bulk=True)
        except RequestException as e:
            logger.error(f"Failed to fetch blob {digest} for {ref}: {e}")
            raise InternalError(f"Blob fetch failed: {e}")

        if response.status_code != requests.codes.ok:
            logger.error(f"Unexpected status {response.status_code} for blob {digest} in {ref}")
            raise InternalError(f"Unexpected status {response.status_code} for blob {digest}")

        blob = response.content
        logger.info(f"Successfully read blob {digest} for {ref}, size: {len(blob)} bytes")
        return blob

    def scan_archive(self, ref: ImageReference, digest: str, blob: bytes) -> Optional[OSReleaseRecord]:
        """
        Look for an os-release entry in a layer archive.

        Returns the parsed record, or None if the layer has no such entry or is
        not a readable archive. Once an entry matches, failing to read it is an
        error for the whole lookup rather than a reason to skip the layer.
        """
        try:
            with tarfile.open(fileobj=io.BytesIO(blob), mode="r:*") as tar:
                member = self._find_member(ref, digest, tar)
                if member is not None:
                    return self._read_member(ref, digest, tar, member)
        except ARCHIVE_ERRORS as e:
            logger.error(f"Failed to read tar stream for {digest} in {ref}: {e}")
        return None

    def _find_member(self, ref: ImageReference, digest: str, tar: tarfile.TarFile) -> Optional[tarfile.TarInfo]:
        for member in tar:
            logger.debug(f"Found file {member.name} in layer {digest} for {ref}")
            if member.name in OS_RELEASE_PATHS:
                return member
        return None

    def _read_member(
        self, ref: ImageReference, digest: str, tar: tarfile.TarFile, member: tarfile.TarInfo
    ) -> OSReleaseRecord:
        try:
            fileobj = tar.extractfile(member)
        except KeyError:
            # Symlinks resolve anywhere in this layer, hard links only to earlier members
            logger.warning(f"Cannot resolve {member.name} -> {member.linkname} in {ref}")
            fileobj = None
        except ARCHIVE_ERRORS as e:
            raise InternalError(f"failed to read {member.name} from layer {digest} of {ref}: {e}") from e

        if fileobj is None:
            return parse_os_release(b"")
        with fileobj:
            try:
                return read_os_release(fileobj)
            except ARCHIVE_ERRORS as e:
                raise InternalError(f"failed to read {member.name} from layer {digest} of {ref}: {e}") from e
