"""Intermediate Representation models."""

from .loader import load_ir
from .models import (
    IR,
    BuildSource,
    Container,
    ContainerBuild,
    EnhancedIR,
    KubernetesOptions,
    Service,
    ServicePort,
    Storage,
    StorageKind,
)

__all__ = [
    "IR",
    "BuildSource",
    "Container",
    "ContainerBuild",
    "EnhancedIR",
    "KubernetesOptions",
    "Service",
    "ServicePort",
    "Storage",
    "StorageKind",
    "load_ir",
]
