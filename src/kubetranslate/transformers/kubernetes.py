from pathlib import Path

from kubetranslate.apiresource.deployment import DeploymentAPIResource
from kubetranslate.apiresource.service import ServiceAPIResource
from kubetranslate.apiresource.storage import StorageAPIResource
from kubetranslate.core.protocols import ResourceConverter
from kubetranslate.output.containers import (
    SCRIPTS_DIR,
    WriteContainersResult,
    write_containers,
)
from kubetranslate.output.templates import (
    DEFAULT_EXECUTABLE_PERMISSION,
    DEPLOY_SH,
    README_MD,
    write_template_to_file,
)

from .base import BaseTransformer

DEPLOY_SCRIPT = "deploy.sh"
README_FILE = "Readme.md"


class K8sTransformer(BaseTransformer):
    """
    Plain Kubernetes deployment of the application.

    Besides the manifests, writes the build material of new containers, a
    deploy script and a Readme describing the next steps.
    """

    name = "kubernetes"
    output_dir = "deploy/yamls"

    def create_converters(self) -> list[ResourceConverter]:
        return [
            DeploymentAPIResource(self._logger),
            ServiceAPIResource(self._logger),
            StorageAPIResource(self._logger),
        ]

    def write_objects(self, output_path: Path, transform_paths: list[Path]) -> None:
        ir = self._require_ir()
        output_path = Path(output_path)
        super().write_objects(output_path, transform_paths)

        containers = write_containers(
            ir.containers,
            output_path,
            ir.root_dir,
            ir.kubernetes.registry_url,
            ir.kubernetes.registry_namespace,
        )
        for item, error in containers.failures:
            self._logger.debug(f"Container material not written: {item}: {error}")

        context = {
            "project": ir.name,
            "manifests_dir": self.output_dir,
        }
        write_template_to_file(
            DEPLOY_SH,
            context,
            output_path / SCRIPTS_DIR / DEPLOY_SCRIPT,
            DEFAULT_EXECUTABLE_PERMISSION,
        )
        write_template_to_file(
            README_MD,
            self._readme_context(context, containers),
            output_path / README_FILE,
        )

    def _readme_context(self, base: dict, containers: WriteContainersResult) -> dict:
        ir = self._require_ir()
        return {
            **base,
            "build_images": bool(containers.build_steps),
            "push_images": containers.push_required,
            "manual_images": containers.manual_images,
            "registry_url": ir.kubernetes.registry_url,
            "registry_namespace": ir.kubernetes.registry_namespace,
        }
