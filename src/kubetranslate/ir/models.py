"""
models.py – Intermediate Representation (IR)
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Application-level description of what has to be deployed. The IR is owned by
the caller and is read-only to the pipeline; every model here is frozen.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from kubetranslate.k8sschema.cluster import ClusterMetadataSpec, get_builtin_cluster
from kubetranslate.models.objects import K8sObject

SCHEMA_VERSION: str = "0.3.0"

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class StorageKind(str, Enum):
    """Storage flavours the IR can request."""

    CONFIGMAP = "ConfigMap"
    SECRET = "Secret"
    PVC = "PersistentVolumeClaim"


# ---------------------------------------------------------------------------
# Containers
# ---------------------------------------------------------------------------


class ContainerBuild(BaseModel):
    """Where the sources of a buildable container image live."""

    git_repo_url: str = Field(..., description="Clone URL of the source repo.")
    git_branch: str = Field("main", description="Branch to build from.")
    context_dir: str = Field(".", description="Build context inside the repo.")
    dockerfile: str = Field("Dockerfile", description="Dockerfile path.")

    model_config = ConfigDict(extra="forbid", frozen=True)


class Container(BaseModel):
    """A container image the application needs."""

    image_names: List[str] = Field(
        ..., min_length=1, description="Image names, the first is canonical."
    )
    new: bool = Field(
        False, description="True when build material has to be emitted."
    )
    new_files: Dict[str, str] = Field(
        default_factory=dict,
        description="Relative path -> content of generated build files.",
    )
    build: Optional[ContainerBuild] = Field(
        None, description="Git build information, when known."
    )

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def needs_manual_build(self) -> bool:
        return self.new and not self.new_files

    @field_validator("new_files")
    @classmethod
    def _relative_paths(cls, v: Dict[str, str]) -> Dict[str, str]:
        for rel_path in v:
            if Path(rel_path).is_absolute() or ".." in Path(rel_path).parts:
                raise ValueError(f"new_files path must be relative: '{rel_path}'")
        return v


# ---------------------------------------------------------------------------
# Services & storage
# ---------------------------------------------------------------------------


class ServicePort(BaseModel):
    """A port a service listens on."""

    port: int = Field(..., ge=1, le=65535)
    target_port: Optional[int] = Field(None, ge=1, le=65535)
    name: Optional[str] = None
    protocol: str = "TCP"

    model_config = ConfigDict(extra="forbid", frozen=True)


class Service(BaseModel):
    """A workload of the application."""

    name: str = Field(..., description="Service name, used for object names.")
    image: str = Field(..., description="Image the workload runs.")
    replicas: int = Field(1, ge=0)
    ports: List[ServicePort] = Field(default_factory=list)
    env: Dict[str, str] = Field(default_factory=dict)
    labels: Dict[str, str] = Field(default_factory=dict)
    expose: bool = Field(False, description="Expose through an Ingress.")
    path: str = Field("/", description="HTTP path used when exposed.")
    volumes: List[str] = Field(
        default_factory=list, description="Names of storages mounted by the service."
    )

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("name")
    @classmethod
    def _not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("Service.name must not be empty")
        return v


class Storage(BaseModel):
    """Configuration or persistent storage used by services."""

    name: str
    kind: StorageKind
    content: Dict[str, str] = Field(default_factory=dict)
    size: str = Field("1Gi", description="Requested size for claims.")
    mount_path: Optional[str] = None

    model_config = ConfigDict(extra="forbid", frozen=True)


class KubernetesOptions(BaseModel):
    """Target cluster and registry settings."""

    registry_url: str = "quay.io"
    registry_namespace: str = ""
    cluster: ClusterMetadataSpec = Field(
        default_factory=lambda: get_builtin_cluster("kubernetes").spec,
        description="Target cluster capabilities, vanilla Kubernetes by default.",
    )
    ignore_unsupported_kinds: bool = False

    model_config = ConfigDict(extra="forbid", frozen=True)


# ---------------------------------------------------------------------------
# Top level
# ---------------------------------------------------------------------------


class IR(BaseModel):
    """Intermediate Representation consumed by every transformer."""

    name: str = Field("app", description="Application name.")
    services: List[Service] = Field(default_factory=list)
    storages: List[Storage] = Field(default_factory=list)
    containers: List[Container] = Field(default_factory=list)
    cached_objects: List[K8sObject] = Field(
        default_factory=list,
        description="Pre-existing objects not produced by any converter.",
    )
    root_dir: Optional[Path] = Field(
        None, description="Source root copied next to generated build scripts."
    )
    kubernetes: KubernetesOptions = Field(default_factory=KubernetesOptions)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("cached_objects", mode="before")
    @classmethod
    def _parse_cached(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [K8sObject.from_dict(o) if isinstance(o, dict) else o for o in v]
        return v

    @model_validator(mode="after")
    def _unique_service_names(self) -> IR:
        names = [s.name for s in self.services]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate service names: {', '.join(duplicates)}")
        return self

    def get_storage(self, name: str) -> Optional[Storage]:
        return next((s for s in self.storages if s.name == name), None)


class BuildSource(BaseModel):
    """A buildable image together with the git coordinates it builds from."""

    image_name: str
    build: ContainerBuild

    model_config = ConfigDict(frozen=True)


class EnhancedIR(IR):
    """IR plus information derived for build-oriented transformers."""

    build_sources: List[BuildSource] = Field(default_factory=list)

    @classmethod
    def from_ir(cls, ir: IR) -> EnhancedIR:
        sources = [
            BuildSource(image_name=c.image_names[0], build=c.build)
            for c in ir.containers
            if c.new and c.build is not None
        ]
        return cls(**dict(ir), build_sources=sources)
