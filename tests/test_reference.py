"""Tests for imageinfo.reference."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from imageinfo.reference import resolve, resolve_reference


class TestResolve:
    @pytest.mark.parametrize("alias", ["docker.io", "dockerhub.timeweb.cloud"])
    def test_aliases_map_to_docker_hub(self, alias: str) -> None:
        assert resolve(alias, "nginx") == ("registry-1.docker.io", "library/nginx")

    def test_canonical_host_gets_default_namespace(self) -> None:
        assert resolve("registry-1.docker.io", "redis") == ("registry-1.docker.io", "library/redis")

    def test_namespaced_name_is_untouched(self) -> None:
        assert resolve("docker.io", "bitnami/redis") == ("registry-1.docker.io", "bitnami/redis")

    def test_other_registry_is_untouched(self) -> None:
        assert resolve("ghcr.io", "nginx") == ("ghcr.io", "nginx")

    def test_idempotent(self) -> None:
        once = resolve("docker.io", "nginx")
        assert resolve(*once) == once


class TestResolveReference:
    def test_timeweb_mirror_with_empty_tag(self) -> None:
        ref = resolve_reference("dockerhub.timeweb.cloud", "nginx", "")
        assert ref.registry_host == "registry-1.docker.io"
        assert ref.image_name == "library/nginx"
        assert ref.tag == "latest"

    def test_explicit_tag_is_kept(self) -> None:
        assert resolve_reference("docker.io", "ubuntu", "22.04").tag == "22.04"

    def test_str_form(self) -> None:
        ref = resolve_reference("quay.io", "coreos/etcd", "v3.5.0")
        assert str(ref) == "quay.io/coreos/etcd:v3.5.0"

    def test_reference_is_frozen(self) -> None:
        ref = resolve_reference("docker.io", "nginx")
        with pytest.raises(ValidationError):
            ref.tag = "other"
