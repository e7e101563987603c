"""Cluster capability descriptors."""

import logging
from importlib import resources
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from ruamel.yaml import YAML

from kubetranslate.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

CLUSTER_METADATA_KIND = "ClusterMetadata"
BUILTIN_CLUSTERS_PACKAGE = "kubetranslate.clusters"

_yaml_parser = YAML(typ="safe")


class ClusterMetadataSpec(BaseModel):
    """Kinds and API versions a target cluster accepts."""

    api_kind_version_map: dict[str, list[str]] = Field(
        default_factory=dict,
        alias="apiKindVersionMap",
        description="Kind -> supported apiVersions, most preferred first.",
    )
    storage_classes: list[str] = Field(
        default_factory=lambda: ["default"], alias="storageClasses"
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def supports(self, kind: str, api_version: str) -> bool:
        return api_version in self.api_kind_version_map.get(kind, [])

    def supports_kind(self, kind: str) -> bool:
        return bool(self.api_kind_version_map.get(kind))

    def get_supported_versions(self, kind: str) -> list[str]:
        return list(self.api_kind_version_map.get(kind, []))

    def get_supported_kinds(self) -> list[str]:
        return [k for k, versions in self.api_kind_version_map.items() if versions]


class ClusterMetadata(BaseModel):
    """A named cluster descriptor as stored on disk."""

    name: str = "kubernetes"
    spec: ClusterMetadataSpec = Field(default_factory=ClusterMetadataSpec)

    model_config = ConfigDict(frozen=True)


def _parse_cluster_metadata(data: Any, source: str) -> ClusterMetadata:
    if not isinstance(data, dict):
        raise ConfigError(f"Cluster metadata in {source} must be a mapping")
    kind = data.get("kind")
    if kind and kind != CLUSTER_METADATA_KIND:
        raise ConfigError(
            f"Expected kind '{CLUSTER_METADATA_KIND}' in {source}, got '{kind}'"
        )
    name = (data.get("metadata") or {}).get("name") or Path(source).stem
    try:
        return ClusterMetadata(
            name=name, spec=ClusterMetadataSpec.model_validate(data.get("spec") or {})
        )
    except ValidationError as e:
        raise ConfigError(f"Invalid cluster metadata in {source}: {e}") from e


def load_cluster_metadata(path: str | Path) -> ClusterMetadata:
    """Load a ClusterMetadata YAML document from disk."""
    file_path = Path(path)
    if not file_path.is_file():
        raise ConfigError(f"Cluster metadata file not found: {file_path}", "cluster")
    try:
        data = _yaml_parser.load(file_path.read_text(encoding="utf-8"))
    except Exception as e:
        raise ConfigError(f"Cannot parse {file_path.name}: {e}", "cluster") from e
    return _parse_cluster_metadata(data, str(file_path))


def get_builtin_cluster_names() -> list[str]:
    package = resources.files(BUILTIN_CLUSTERS_PACKAGE)
    return sorted(
        entry.name.removesuffix(".yaml")
        for entry in package.iterdir()
        if entry.name.endswith(".yaml")
    )


def get_builtin_cluster(name: str) -> ClusterMetadata:
    """Return one of the cluster descriptors shipped with the package."""
    entry = resources.files(BUILTIN_CLUSTERS_PACKAGE).joinpath(f"{name}.yaml")
    if not entry.is_file():
        available = ", ".join(get_builtin_cluster_names()) or "none"
        raise ConfigError(
            f"Unknown cluster '{name}'. Available clusters: {available}", "cluster"
        )
    data = _yaml_parser.load(entry.read_text(encoding="utf-8"))
    return _parse_cluster_metadata(data, f"{name}.yaml")


def resolve_cluster(name_or_path: str) -> ClusterMetadata:
    """Resolve a builtin cluster name or a path to a ClusterMetadata file."""
    if name_or_path in get_builtin_cluster_names():
        return get_builtin_cluster(name_or_path)
    return load_cluster_metadata(name_or_path)
