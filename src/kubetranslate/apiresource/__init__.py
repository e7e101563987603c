"""Resource converters: IR -> versioned objects of the kinds each one owns."""

from .base import BaseAPIResource, convert_ir_to_objects
from .buildconfig import BuildConfigAPIResource
from .deployment import DeploymentAPIResource
from .knative import KnativeServiceAPIResource
from .service import ServiceAPIResource
from .storage import StorageAPIResource
from .tekton import TektonAPIResource

__all__ = [
    "BaseAPIResource",
    "convert_ir_to_objects",
    "BuildConfigAPIResource",
    "DeploymentAPIResource",
    "KnativeServiceAPIResource",
    "ServiceAPIResource",
    "StorageAPIResource",
    "TektonAPIResource",
]
