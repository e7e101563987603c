from kubetranslate.apiresource.tekton import TektonAPIResource
from kubetranslate.core.protocols import ResourceConverter

from .base import BaseTransformer


class TektonTransformer(BaseTransformer):
    """Builds the application images in-cluster with a Tekton pipeline."""

    name = "tekton"
    output_dir = "deploy/cicd/tekton"

    def create_converters(self) -> list[ResourceConverter]:
        return [TektonAPIResource(self._logger)]
