"""Tests for imageinfo.config and client construction from it."""

from __future__ import annotations

import argparse

import pytest

from app import parse_listen_address
from imageinfo.client import RegistryClient
from imageinfo.config import Config
from imageinfo.models import ImageReference, Platform


class TestConfig:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for var in ("MANIFEST_TIMEOUT", "BLOB_TIMEOUT", "TARGET_ARCHITECTURE", "TARGET_OS", "FLASK_PORT"):
            monkeypatch.delenv(var, raising=False)
        cfg = Config()
        assert cfg.MANIFEST_TIMEOUT == 30
        assert cfg.BLOB_TIMEOUT == 600
        assert (cfg.TARGET_OS, cfg.TARGET_ARCHITECTURE) == ("linux", "amd64")
        assert cfg.FLASK_PORT == 8080

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MANIFEST_TIMEOUT", "5")
        monkeypatch.setenv("BLOB_TIMEOUT", "120")
        monkeypatch.setenv("TARGET_ARCHITECTURE", "arm64")
        cfg = Config()
        assert cfg.MANIFEST_TIMEOUT == 5
        assert cfg.BLOB_TIMEOUT == 120
        assert cfg.TARGET_ARCHITECTURE == "arm64"
        assert "linux/arm64" in repr(cfg)


class TestRegistryClient:
    def test_from_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MANIFEST_TIMEOUT", "7")
        monkeypatch.setenv("BLOB_TIMEOUT", "70")
        monkeypatch.setenv("TARGET_ARCHITECTURE", "s390x")
        with RegistryClient.from_config(Config()) as client:
            assert client.manifest_timeout == 7
            assert client.blob_timeout == 70
            assert client.platform == Platform(architecture="s390x", os="linux")

    def test_urls(self) -> None:
        ref = ImageReference(registry_host="ghcr.io", image_name="org/app", tag="1.0")
        assert RegistryClient.manifest_url(ref, ref.tag) == "https://ghcr.io/v2/org/app/manifests/1.0"
        assert RegistryClient.blob_url(ref, "sha256:abc") == "https://ghcr.io/v2/org/app/blobs/sha256:abc"

    def test_digest_reference_url(self) -> None:
        digest = "sha256:" + "0f" * 32
        ref = ImageReference(registry_host="ghcr.io", image_name="org/app", tag=digest)
        assert RegistryClient.manifest_url(ref, ref.tag) == f"https://ghcr.io/v2/org/app/manifests/{digest}"


class TestListenAddress:
    def test_host_and_port(self) -> None:
        assert parse_listen_address("127.0.0.1:9000") == ("127.0.0.1", 9000)

    def test_port_only_uses_configured_host(self) -> None:
        host, port = parse_listen_address(":9000")
        assert port == 9000
        assert host

    @pytest.mark.parametrize("value", ["localhost", "localhost:http"])
    def test_invalid(self, value: str) -> None:
        with pytest.raises(argparse.ArgumentTypeError, match="invalid listen address"):
            parse_listen_address(value)
