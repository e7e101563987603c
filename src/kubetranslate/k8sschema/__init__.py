"""Schema compatibility: fixing objects and converting them between versions."""

from .cluster import (
    ClusterMetadata,
    ClusterMetadataSpec,
    get_builtin_cluster,
    load_cluster_metadata,
    resolve_cluster,
)
from .conversion import convert_to_supported_version, convert_version
from .fixer import fix
from .utils import intersection, merge

__all__ = [
    "ClusterMetadata",
    "ClusterMetadataSpec",
    "get_builtin_cluster",
    "load_cluster_metadata",
    "resolve_cluster",
    "convert_to_supported_version",
    "convert_version",
    "fix",
    "intersection",
    "merge",
]
