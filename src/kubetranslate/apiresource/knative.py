from kubetranslate.ir.models import IR, EnhancedIR
from kubetranslate.models.objects import K8sObject, new_object

from .base import BaseAPIResource
from .deployment import pod_spec

KNATIVE_SERVICE_API_VERSION = "serving.knative.dev/v1"


class KnativeServiceAPIResource(BaseAPIResource):
    """Creates a Knative serving Service per IR service."""

    groups = ("serving.knative.dev",)

    def get_supported_kinds(self) -> list[str]:
        return ["Service"]

    def get_cluster_supported_kinds(self, ir: IR) -> list[str]:
        if ir.kubernetes.cluster.supports("Service", KNATIVE_SERVICE_API_VERSION):
            return ["Service"]
        return []

    def create_new_resources(
        self, ir: EnhancedIR, supported_kinds: list[str]
    ) -> list[K8sObject]:
        if "Service" not in supported_kinds:
            self._logger.info("Target cluster does not support Knative serving")
            return []
        objs = []
        for service in ir.services:
            spec = pod_spec(service, ir)
            spec.pop("volumes", None)
            for container in spec["containers"]:
                container.pop("volumeMounts", None)
                # knative allows a single port per container
                container["ports"] = container.get("ports", [])[:1]
                if not container["ports"]:
                    del container["ports"]
            objs.append(
                new_object(
                    KNATIVE_SERVICE_API_VERSION,
                    "Service",
                    service.name,
                    labels=dict(service.labels),
                    spec={"template": {"spec": spec}},
                )
            )
        return objs
