from kubetranslate.apiresource.buildconfig import BuildConfigAPIResource
from kubetranslate.core.protocols import ResourceConverter

from .base import BaseTransformer


class BuildconfigTransformer(BaseTransformer):
    """Builds the application images with OpenShift BuildConfigs."""

    name = "buildconfig"
    output_dir = "deploy/cicd/buildconfig"

    def create_converters(self) -> list[ResourceConverter]:
        return [BuildConfigAPIResource(self._logger)]
