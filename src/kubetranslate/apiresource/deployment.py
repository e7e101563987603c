from typing import Any

from kubetranslate.ir.models import EnhancedIR, Service, StorageKind
from kubetranslate.models.objects import K8sObject, new_object

from .base import BaseAPIResource

SERVICE_LABEL = "kubetranslate.io/service"


def service_selector(service: Service) -> dict[str, str]:
    return {SERVICE_LABEL: service.name}


def pod_spec(service: Service, ir: EnhancedIR) -> dict[str, Any]:
    """Build the pod spec running a single IR service."""
    container: dict[str, Any] = {"name": service.name, "image": service.image}
    if service.ports:
        container["ports"] = [
            {"containerPort": p.target_port or p.port, "protocol": p.protocol}
            for p in service.ports
        ]
    if service.env:
        container["env"] = [{"name": k, "value": v} for k, v in service.env.items()]

    volumes = []
    mounts = []
    for volume_name in service.volumes:
        storage = ir.get_storage(volume_name)
        if storage is None:
            continue
        if storage.kind is StorageKind.CONFIGMAP:
            source = {"configMap": {"name": storage.name}}
        elif storage.kind is StorageKind.SECRET:
            source = {"secret": {"secretName": storage.name}}
        else:
            source = {"persistentVolumeClaim": {"claimName": storage.name}}
        volumes.append({"name": storage.name, **source})
        mounts.append(
            {"name": storage.name, "mountPath": storage.mount_path or f"/{storage.name}"}
        )
    if mounts:
        container["volumeMounts"] = mounts

    spec: dict[str, Any] = {"containers": [container]}
    if volumes:
        spec["volumes"] = volumes
    return spec


class DeploymentAPIResource(BaseAPIResource):
    """Creates one Deployment per IR service."""

    groups = ("apps", "extensions", "batch")

    def get_supported_kinds(self) -> list[str]:
        return ["Deployment", "DaemonSet", "StatefulSet", "ReplicaSet", "Job"]

    def create_new_resources(
        self, ir: EnhancedIR, supported_kinds: list[str]
    ) -> list[K8sObject]:
        if "Deployment" not in supported_kinds:
            self._logger.warning(
                "Target cluster does not support Deployment, no workloads created"
            )
            return []

        objs = []
        for service in ir.services:
            labels = {**service.labels, **service_selector(service)}
            objs.append(
                new_object(
                    "apps/v1",
                    "Deployment",
                    service.name,
                    labels=labels,
                    spec={
                        "replicas": service.replicas,
                        "selector": {"matchLabels": service_selector(service)},
                        "template": {
                            "metadata": {"labels": labels},
                            "spec": pod_spec(service, ir),
                        },
                    },
                )
            )
        return objs
