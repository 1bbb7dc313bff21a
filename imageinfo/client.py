"""
Outbound HTTP client shared by all registry components.

Holds one pooled requests session and the two timeout budgets: a short one for
manifest and token round trips, a long one for layer blob downloads.
"""

import logging
from typing import Optional

import requests

from .config import Config, config as default_config
from .models import ImageReference, Platform

logger = logging.getLogger(__name__)

USER_AGENT = "imageinfo/0.1.0"


class RegistryClient:
    """Docker/OCI Distribution client configuration and connection pool"""

    def __init__(
        self,
        manifest_timeout: float = 30,
        blob_timeout: float = 600,
        platform: Optional[Platform] = None,
        session: Optional[requests.Session] = None,
    ):
        self.manifest_timeout = manifest_timeout
        self.blob_timeout = blob_timeout
        self.platform = platform or Platform()
        self._session = session or self._create_session()

    @classmethod
    def from_config(cls, cfg: Optional[Config] = None) -> "RegistryClient":
        """Create a client from the environment driven configuration."""
        cfg = cfg or default_config
        return cls(
            manifest_timeout=cfg.MANIFEST_TIMEOUT,
            blob_timeout=cfg.BLOB_TIMEOUT,
            platform=Platform(architecture=cfg.TARGET_ARCHITECTURE, os=cfg.TARGET_OS),
        )

    def _create_session(self) -> requests.Session:
        """Create configured requests session"""
        session = requests.Session()
        session.headers.update({"User-Agent": USER_AGENT})
        return session

    def get(
        self,
        url: str,
        headers: Optional[dict] = None,
        params: Optional[dict] = None,
        bulk: bool = False,
    ) -> requests.Response:
        """
        Issue a GET request through the pooled session.

        Args:
            url: Absolute URL
            headers: Extra request headers
            params: Query string parameters
            bulk: Use the blob download timeout instead of the manifest timeout

        Raises:
            requests.RequestException: On transport or body read failure
        """
        timeout = self.blob_timeout if bulk else self.manifest_timeout
        logger.debug(f"GET {url} (timeout={timeout}s)")
        return self._session.get(url, headers=headers, params=params, timeout=timeout)

    @staticmethod
    def manifest_url(ref: ImageReference, reference: str) -> str:
        """URL of a manifest addressed by tag or digest."""
        return f"https://{ref.registry_host}/v2/{ref.image_name}/manifests/{reference}"

    @staticmethod
    def blob_url(ref: ImageReference, digest: str) -> str:
        """URL of a blob addressed by digest."""
        return f"https://{ref.registry_host}/v2/{ref.image_name}/blobs/{digest}"

    def close(self):
        """Close the underlying session"""
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, exec_type, exec_val, exec_tb):
        self.close()
