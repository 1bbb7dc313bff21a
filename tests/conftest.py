"""Shared test fixtures for imageinfo."""

from __future__ import annotations

import io
import json
import tarfile
from typing import Any
from unittest.mock import MagicMock

import pytest
import requests

from imageinfo.client import RegistryClient
from imageinfo.models import ImageReference, Manifest, Platform

DOCKER_MANIFEST_V2 = "application/vnd.docker.distribution.manifest.v2+json"
OCI_INDEX = "application/vnd.oci.image.index.v1+json"
OCI_MANIFEST = "application/vnd.oci.image.manifest.v1+json"
LAYER_MEDIA_TYPE = "application/vnd.docker.image.rootfs.diff.tar.gzip"


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def make_response(
    status_code: int = 200,
    body: bytes = b"",
    json_body: Any = None,
    headers: dict | None = None,
) -> requests.Response:
    """Build a real requests.Response with a preloaded body."""
    response = requests.Response()
    response.status_code = status_code
    if json_body is not None:
        body = json.dumps(json_body).encode("utf-8")
    response._content = body
    response.encoding = "utf-8"
    response.headers.update(headers or {})
    return response


def token_response(token: str = "test-token-0123456789abcdef") -> requests.Response:
    return make_response(200, json_body={"token": token})


def manifest_doc(*layers: tuple[str, int]) -> dict:
    """Docker v2 manifest document with (digest, size) layers."""
    return {
        "schemaVersion": 2,
        "mediaType": DOCKER_MANIFEST_V2,
        "config": {
            "mediaType": "application/vnd.docker.container.image.v1+json",
            "digest": "sha256:config",
            "size": 1000,
        },
        "layers": [
            {"mediaType": LAYER_MEDIA_TYPE, "digest": digest, "size": size}
            for digest, size in layers
        ],
    }


def index_doc(*entries: tuple[str, str, str, str]) -> dict:
    """OCI index document with (digest, architecture, os, mediaType) entries."""
    return {
        "schemaVersion": 2,
        "mediaType": OCI_INDEX,
        "manifests": [
            {
                "mediaType": media_type,
                "digest": digest,
                "size": 500,
                "platform": {"architecture": arch, "os": os_name},
            }
            for digest, arch, os_name, media_type in entries
        ],
    }


def make_layer(entries: list[tuple[str, bytes | str]], compress: bool = True) -> bytes:
    """
    Build a layer tarball in memory.

    Each entry is (name, content): bytes content makes a regular file, a str
    content makes a symlink pointing at that target.
    """
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz" if compress else "w") as tar:
        for name, content in entries:
            info = tarfile.TarInfo(name)
            if isinstance(content, str):
                info.type = tarfile.SYMTYPE
                info.linkname = content
                tar.addfile(info)
            else:
                info.size = len(content)
                tar.addfile(info, io.BytesIO(content))
    return buf.getvalue()


def urls_called(session: MagicMock) -> list[str]:
    return [c.args[0] for c in session.get.call_args_list]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


UBUNTU_OS_RELEASE = (
    b'PRETTY_NAME="Ubuntu 22.04.4 LTS"\n'
    b'NAME="Ubuntu"\n'
    b'VERSION_ID="22.04"\n'
    b'VERSION="22.04.4 LTS (Jammy Jellyfish)"\n'
    b"ID=ubuntu\n"
    b"ID_LIKE=debian\n"
    b'HOME_URL="https://www.ubuntu.com/"\n'
)


@pytest.fixture()
def session() -> MagicMock:
    """Mock requests session; tests queue responses on session.get.side_effect."""
    return MagicMock(spec=requests.Session)


@pytest.fixture()
def client(session: MagicMock) -> RegistryClient:
    return RegistryClient(manifest_timeout=5, blob_timeout=60, session=session)


@pytest.fixture()
def nginx_ref() -> ImageReference:
    return ImageReference(registry_host="registry-1.docker.io", image_name="library/nginx", tag="latest")


@pytest.fixture()
def arm_platform() -> Platform:
    return Platform(architecture="arm64", os="linux")


@pytest.fixture()
def two_layer_manifest() -> Manifest:
    return Manifest.model_validate(manifest_doc(("sha256:base", 100), ("sha256:app", 50)))
