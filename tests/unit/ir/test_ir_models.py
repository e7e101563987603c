"""Unit tests for the IR models."""

import pytest
from pydantic import ValidationError

from kubetranslate.ir.models import (
    IR,
    Container,
    ContainerBuild,
    EnhancedIR,
    Service,
    Storage,
    StorageKind,
)
from kubetranslate.models.objects import K8sObject


class TestContainer:
    def test_manual_build_when_new_without_files(self) -> None:
        assert Container(image_names=["manual:1"], new=True).needs_manual_build
        assert not Container(image_names=["x:1"], new=False).needs_manual_build
        assert not Container(
            image_names=["x:1"], new=True, new_files={"Dockerfile": "FROM x"}
        ).needs_manual_build

    def test_requires_an_image_name(self) -> None:
        with pytest.raises(ValidationError):
            Container(image_names=[])

    @pytest.mark.parametrize("path", ["/etc/passwd", "../escape.sh", "a/../../b"])
    def test_new_files_must_stay_relative(self, path: str) -> None:
        with pytest.raises(ValidationError, match="relative"):
            Container(image_names=["x"], new=True, new_files={path: ""})


class TestIR:
    def test_defaults(self) -> None:
        ir = IR()
        assert ir.name == "app"
        assert ir.kubernetes.registry_url == "quay.io"
        assert ir.kubernetes.cluster.supports("Deployment", "apps/v1")
        assert not ir.kubernetes.ignore_unsupported_kinds

    def test_cached_objects_parsed_from_dicts(self) -> None:
        ir = IR(
            cached_objects=[
                {"apiVersion": "v1", "kind": "ConfigMap", "metadata": {"name": "c"}}
            ]
        )
        assert isinstance(ir.cached_objects[0], K8sObject)
        assert ir.cached_objects[0].identity() == ("ConfigMap", "c", None)

    def test_duplicate_service_names_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Duplicate service names: web"):
            IR(services=[Service(name="web", image="a"), Service(name="web", image="b")])

    def test_unknown_fields_rejected(self) -> None:
        with pytest.raises(ValidationError):
            IR.model_validate({"name": "x", "surprise": True})

    def test_get_storage(self) -> None:
        storage = Storage(name="cfg", kind=StorageKind.CONFIGMAP)
        ir = IR(storages=[storage])
        assert ir.get_storage("cfg") == storage
        assert ir.get_storage("missing") is None


class TestEnhancedIR:
    def test_build_sources_from_new_containers_with_build_info(self) -> None:
        build = ContainerBuild(git_repo_url="https://git.example.com/web.git")
        ir = IR(
            name="shop",
            containers=[
                Container(image_names=["web:1", "web:latest"], new=True, build=build),
                Container(image_names=["db:1"], new=False, build=build),
                Container(image_names=["cache:1"], new=True),
            ],
        )
        enhanced = EnhancedIR.from_ir(ir)
        assert enhanced.name == "shop"
        assert [s.image_name for s in enhanced.build_sources] == ["web:1"]
        assert enhanced.build_sources[0].build.git_branch == "main"
        assert enhanced.containers == ir.containers
