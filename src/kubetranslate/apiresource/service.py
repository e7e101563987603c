from typing import Any

from kubetranslate.ir.models import EnhancedIR
from kubetranslate.models.objects import K8sObject, new_object

from .base import BaseAPIResource
from .deployment import service_selector


class ServiceAPIResource(BaseAPIResource):
    """Creates a Service per IR service with ports, and one Ingress for exposed ones."""

    groups = ("", "networking.k8s.io", "extensions")

    def get_supported_kinds(self) -> list[str]:
        return ["Service", "Ingress"]

    def create_new_resources(
        self, ir: EnhancedIR, supported_kinds: list[str]
    ) -> list[K8sObject]:
        objs = []
        if "Service" in supported_kinds:
            objs.extend(self._create_services(ir))
        if "Ingress" in supported_kinds:
            ingress = self._create_ingress(ir)
            if ingress is not None:
                objs.append(ingress)
        return objs

    def _create_services(self, ir: EnhancedIR) -> list[K8sObject]:
        objs = []
        for service in ir.services:
            if not service.ports:
                self._logger.debug(f"Service '{service.name}' has no ports, skipping")
                continue
            ports = []
            for port in service.ports:
                entry: dict[str, Any] = {"port": port.port, "protocol": port.protocol}
                if port.name:
                    entry["name"] = port.name
                if port.target_port:
                    entry["targetPort"] = port.target_port
                ports.append(entry)
            objs.append(
                new_object(
                    "v1",
                    "Service",
                    service.name,
                    labels=service_selector(service),
                    spec={"selector": service_selector(service), "ports": ports},
                )
            )
        return objs

    def _create_ingress(self, ir: EnhancedIR) -> K8sObject | None:
        paths = []
        for service in ir.services:
            if not service.expose or not service.ports:
                continue
            paths.append(
                {
                    "path": service.path,
                    "pathType": "Prefix",
                    "backend": {
                        "service": {
                            "name": service.name,
                            "port": {"number": service.ports[0].port},
                        }
                    },
                }
            )
        if not paths:
            return None
        return new_object(
            "networking.k8s.io/v1",
            "Ingress",
            ir.name,
            spec={"rules": [{"http": {"paths": paths}}]},
        )
