from kubetranslate.ir.models import BuildSource, EnhancedIR
from kubetranslate.models.objects import K8sObject, new_object

from .base import BaseAPIResource

BUILDCONFIG_API_VERSION = "build.openshift.io/v1"
IMAGESTREAM_API_VERSION = "image.openshift.io/v1"


def image_short_name(image: str) -> str:
    """Return the repository part of an image reference ("a/b/app:1" -> "app")."""
    name = image.rsplit("/", 1)[-1]
    return name.split("@", 1)[0].split(":", 1)[0]


def image_tag(image: str) -> str:
    last = image.rsplit("/", 1)[-1]
    if "@" not in last and ":" in last:
        return last.split(":", 1)[1]
    return "latest"


class BuildConfigAPIResource(BaseAPIResource):
    """Creates an ImageStream and a docker-strategy BuildConfig per buildable image."""

    groups = ("build.openshift.io", "image.openshift.io")

    def get_supported_kinds(self) -> list[str]:
        return ["ImageStream", "BuildConfig"]

    def create_new_resources(
        self, ir: EnhancedIR, supported_kinds: list[str]
    ) -> list[K8sObject]:
        if "BuildConfig" not in supported_kinds:
            self._logger.info("Target cluster does not support BuildConfig")
            return []
        objs = []
        for source in ir.build_sources:
            name = image_short_name(source.image_name)
            if "ImageStream" in supported_kinds:
                objs.append(new_object(IMAGESTREAM_API_VERSION, "ImageStream", name))
            objs.append(self._build_config(name, source))
        return objs

    def _build_config(self, name: str, source: BuildSource) -> K8sObject:
        build = source.build
        return new_object(
            BUILDCONFIG_API_VERSION,
            "BuildConfig",
            name,
            spec={
                "source": {
                    "type": "Git",
                    "git": {"uri": build.git_repo_url, "ref": build.git_branch},
                    "contextDir": build.context_dir,
                },
                "strategy": {
                    "type": "Docker",
                    "dockerStrategy": {"dockerfilePath": build.dockerfile},
                },
                "output": {
                    "to": {
                        "kind": "ImageStreamTag",
                        "name": f"{name}:{image_tag(source.image_name)}",
                    }
                },
                "triggers": [{"type": "ConfigChange"}],
            },
        )
