from typing import Any

from kubetranslate.ir.models import EnhancedIR
from kubetranslate.models.objects import K8sObject, new_object

from .base import BaseAPIResource
from .buildconfig import image_short_name

TEKTON_API_VERSION = "tekton.dev/v1beta1"
WORKSPACE_NAME = "shared-data"


class TektonAPIResource(BaseAPIResource):
    """Creates a clone-build-push Pipeline, its PipelineRun and a ServiceAccount."""

    groups = ("tekton.dev", "")

    def get_supported_kinds(self) -> list[str]:
        return ["ServiceAccount", "Pipeline", "PipelineRun"]

    def claims(self, obj: K8sObject) -> bool:
        # service accounts are only claimed when they belong to a pipeline
        if obj.kind == "ServiceAccount":
            return obj.metadata.labels.get("kubetranslate.io/pipeline") is not None
        return super().claims(obj)

    def create_new_resources(
        self, ir: EnhancedIR, supported_kinds: list[str]
    ) -> list[K8sObject]:
        if not {"Pipeline", "PipelineRun"} <= set(supported_kinds):
            self._logger.info("Target cluster does not support Tekton pipelines")
            return []
        if not ir.build_sources:
            self._logger.debug("No buildable images, no pipeline created")
            return []

        pipeline_name = f"{ir.name}-clone-build-push"
        sa_name = f"{ir.name}-pipeline"
        objs = [
            new_object(
                "v1",
                "ServiceAccount",
                sa_name,
                labels={"kubetranslate.io/pipeline": pipeline_name},
            ),
            new_object(
                TEKTON_API_VERSION,
                "Pipeline",
                pipeline_name,
                spec={
                    "workspaces": [{"name": WORKSPACE_NAME}],
                    "tasks": self._tasks(ir),
                },
            ),
            new_object(
                TEKTON_API_VERSION,
                "PipelineRun",
                f"{pipeline_name}-run",
                spec={
                    "pipelineRef": {"name": pipeline_name},
                    "serviceAccountName": sa_name,
                    "workspaces": [
                        {
                            "name": WORKSPACE_NAME,
                            "volumeClaimTemplate": {
                                "spec": {
                                    "accessModes": ["ReadWriteOnce"],
                                    "resources": {"requests": {"storage": "1Gi"}},
                                }
                            },
                        }
                    ],
                },
            ),
        ]
        return objs

    def _tasks(self, ir: EnhancedIR) -> list[dict[str, Any]]:
        tasks: list[dict[str, Any]] = []
        registry = ir.kubernetes.registry_url
        namespace = ir.kubernetes.registry_namespace
        for source in ir.build_sources:
            short_name = image_short_name(source.image_name)
            clone_task = f"clone-{short_name}"
            image_ref = "/".join(p for p in (registry, namespace, source.image_name) if p)
            tasks.append(
                {
                    "name": clone_task,
                    "taskRef": {"name": "git-clone", "kind": "ClusterTask"},
                    "workspaces": [{"name": "output", "workspace": WORKSPACE_NAME}],
                    "params": [
                        {"name": "url", "value": source.build.git_repo_url},
                        {"name": "revision", "value": source.build.git_branch},
                        {"name": "subdirectory", "value": short_name},
                    ],
                }
            )
            tasks.append(
                {
                    "name": f"build-push-{short_name}",
                    "runAfter": [clone_task],
                    "taskRef": {"name": "kaniko", "kind": "ClusterTask"},
                    "workspaces": [{"name": "source", "workspace": WORKSPACE_NAME}],
                    "params": [
                        {"name": "IMAGE", "value": image_ref},
                        {
                            "name": "CONTEXT",
                            "value": f"{short_name}/{source.build.context_dir}",
                        },
                        {"name": "DOCKERFILE", "value": source.build.dockerfile},
                    ],
                }
            )
        return tasks
