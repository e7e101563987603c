from kubetranslate.apiresource.knative import KnativeServiceAPIResource
from kubetranslate.core.protocols import ResourceConverter

from .base import BaseTransformer


class KnativeTransformer(BaseTransformer):
    """Serves the application services with Knative."""

    name = "knative"
    output_dir = "deploy/knative"

    def create_converters(self) -> list[ResourceConverter]:
        return [KnativeServiceAPIResource(self._logger)]
