"""Built-in transformation strategies."""

from .base import BaseTransformer
from .buildconfig import BuildconfigTransformer
from .knative import KnativeTransformer
from .kubernetes import K8sTransformer
from .tekton import TektonTransformer

__all__ = [
    "BaseTransformer",
    "BuildconfigTransformer",
    "KnativeTransformer",
    "K8sTransformer",
    "TektonTransformer",
]
