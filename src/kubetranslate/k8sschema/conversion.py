"""
Version conversion between API versions of the same kind.

Every convertible kind has a hub version (the newest stable one). Converting
from version A to version B goes A -> hub -> B; versions without a registered
converter are structurally identical to the hub.
"""

import copy
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from kubetranslate.core.exceptions import UnsupportedKindError
from kubetranslate.models.objects import K8sObject

from .cluster import ClusterMetadataSpec

logger = logging.getLogger(__name__)

Body = dict[str, Any]
BodyConverter = Callable[[Body], Body]

# Kind -> versions the converter knows, hub first.
KIND_VERSIONS: dict[str, list[str]] = {
    "Deployment": [
        "apps/v1",
        "apps/v1beta2",
        "apps/v1beta1",
        "extensions/v1beta1",
    ],
    "DaemonSet": ["apps/v1", "apps/v1beta2", "extensions/v1beta1"],
    "ReplicaSet": ["apps/v1", "apps/v1beta2", "extensions/v1beta1"],
    "StatefulSet": ["apps/v1", "apps/v1beta2", "apps/v1beta1"],
    "Ingress": [
        "networking.k8s.io/v1",
        "networking.k8s.io/v1beta1",
        "extensions/v1beta1",
    ],
    "NetworkPolicy": ["networking.k8s.io/v1", "extensions/v1beta1"],
    "CronJob": ["batch/v1", "batch/v1beta1", "batch/v2alpha1"],
    "HorizontalPodAutoscaler": [
        "autoscaling/v2",
        "autoscaling/v2beta2",
        "autoscaling/v2beta1",
        "autoscaling/v1",
    ],
    "PodDisruptionBudget": ["policy/v1", "policy/v1beta1"],
}

_VERSION_RE = re.compile(r"^v(\d+)(?:(alpha|beta)(\d+))?$")
_STABILITY_RANK = {None: 2, "beta": 1, "alpha": 0}


@dataclass(frozen=True)
class SpokeConverter:
    """Converts a spoke version body to and from the hub version body."""

    to_hub: BodyConverter
    from_hub: BodyConverter


def _identity(body: Body) -> Body:
    return body


# ----- Ingress ---------------------------------------------------------------


def _backend_to_hub(backend: Any) -> Any:
    if not isinstance(backend, dict) or "serviceName" not in backend:
        return backend
    port = backend.get("servicePort")
    port_ref = {"number": port} if isinstance(port, int) else {"name": port}
    converted = {k: v for k, v in backend.items() if k not in ("serviceName", "servicePort")}
    converted["service"] = {"name": backend["serviceName"], "port": port_ref}
    return converted


def _backend_from_hub(backend: Any) -> Any:
    if not isinstance(backend, dict) or not isinstance(backend.get("service"), dict):
        return backend
    service = backend["service"]
    port = service.get("port") or {}
    converted = {k: v for k, v in backend.items() if k != "service"}
    converted["serviceName"] = service.get("name")
    converted["servicePort"] = port.get("number", port.get("name"))
    return converted


def _ingress_paths(spec: Body) -> list[Body]:
    paths = []
    for rule in spec.get("rules") or []:
        http = rule.get("http") if isinstance(rule, dict) else None
        if isinstance(http, dict):
            paths.extend(p for p in http.get("paths") or [] if isinstance(p, dict))
    return paths


def _map_ingress_backends(spec: Body, fn: Callable[[Any], Any]) -> None:
    for path in _ingress_paths(spec):
        if "backend" in path:
            path["backend"] = fn(path["backend"])


def _ingress_to_hub(body: Body) -> Body:
    spec = body.get("spec")
    if isinstance(spec, dict):
        if "backend" in spec:
            spec["defaultBackend"] = _backend_to_hub(spec.pop("backend"))
        _map_ingress_backends(spec, _backend_to_hub)
        for path in _ingress_paths(spec):
            path.setdefault("pathType", "ImplementationSpecific")
    return body


def _ingress_from_hub(body: Body) -> Body:
    spec = body.get("spec")
    if isinstance(spec, dict):
        if "defaultBackend" in spec:
            spec["backend"] = _backend_from_hub(spec.pop("defaultBackend"))
        _map_ingress_backends(spec, _backend_from_hub)
    return body


# ----- HorizontalPodAutoscaler ----------------------------------------------


def _hpa_v1_to_hub(body: Body) -> Body:
    spec = body.get("spec")
    if isinstance(spec, dict) and "targetCPUUtilizationPercentage" in spec:
        utilization = spec.pop("targetCPUUtilizationPercentage")
        spec["metrics"] = [
            {
                "type": "Resource",
                "resource": {
                    "name": "cpu",
                    "target": {"type": "Utilization", "averageUtilization": utilization},
                },
            }
        ]
    return body


def _hpa_v1_from_hub(body: Body) -> Body:
    spec = body.get("spec")
    if not isinstance(spec, dict):
        return body
    for metric in spec.pop("metrics", None) or []:
        resource = metric.get("resource") if isinstance(metric, dict) else None
        if isinstance(resource, dict) and resource.get("name") == "cpu":
            target = resource.get("target") or {}
            if "averageUtilization" in target:
                spec["targetCPUUtilizationPercentage"] = target["averageUtilization"]
    spec.pop("behavior", None)
    return body


def _hpa_v2beta1_to_hub(body: Body) -> Body:
    spec = body.get("spec")
    if not isinstance(spec, dict):
        return body
    for metric in spec.get("metrics") or []:
        resource = metric.get("resource") if isinstance(metric, dict) else None
        if isinstance(resource, dict) and "targetAverageUtilization" in resource:
            resource["target"] = {
                "type": "Utilization",
                "averageUtilization": resource.pop("targetAverageUtilization"),
            }
    return body


def _hpa_v2beta1_from_hub(body: Body) -> Body:
    spec = body.get("spec")
    if not isinstance(spec, dict):
        return body
    for metric in spec.get("metrics") or []:
        resource = metric.get("resource") if isinstance(metric, dict) else None
        if isinstance(resource, dict) and isinstance(resource.get("target"), dict):
            target = resource.pop("target")
            if "averageUtilization" in target:
                resource["targetAverageUtilization"] = target["averageUtilization"]
    spec.pop("behavior", None)
    return body


# ----- Workloads ---------------------------------------------------------------


def _workload_beta_to_hub(body: Body) -> Body:
    spec = body.get("spec")
    if isinstance(spec, dict):
        spec.pop("rollbackTo", None)
        spec.pop("templateGeneration", None)
    return body


_SPOKES: dict[tuple[str, str], SpokeConverter] = {
    ("Ingress", "networking.k8s.io/v1beta1"): SpokeConverter(
        _ingress_to_hub, _ingress_from_hub
    ),
    ("Ingress", "extensions/v1beta1"): SpokeConverter(_ingress_to_hub, _ingress_from_hub),
    ("HorizontalPodAutoscaler", "autoscaling/v1"): SpokeConverter(
        _hpa_v1_to_hub, _hpa_v1_from_hub
    ),
    ("HorizontalPodAutoscaler", "autoscaling/v2beta1"): SpokeConverter(
        _hpa_v2beta1_to_hub, _hpa_v2beta1_from_hub
    ),
    ("Deployment", "extensions/v1beta1"): SpokeConverter(
        _workload_beta_to_hub, _identity
    ),
    ("Deployment", "apps/v1beta1"): SpokeConverter(_workload_beta_to_hub, _identity),
    ("DaemonSet", "extensions/v1beta1"): SpokeConverter(
        _workload_beta_to_hub, _identity
    ),
}


def version_sort_key(api_version: str) -> tuple[int, int, int, str]:
    """
    Sort key for API versions, smaller is preferred.

    GA beats beta beats alpha, then higher major, then higher pre-release
    number, then group name ascending. Unparseable versions sort last.
    """
    group, _, version = api_version.rpartition("/")
    match = _VERSION_RE.match(version)
    if not match:
        return (1, 0, 0, group)
    major, stability, minor = match.groups()
    return (-_STABILITY_RANK[stability], -int(major), -int(minor or 0), group)


def get_convertible_versions(kind: str) -> list[str]:
    return list(KIND_VERSIONS.get(kind, []))


def find_closest_supported_version(
    kind: str, api_version: str, cluster_spec: ClusterMetadataSpec
) -> str | None:
    """Pick the preferred cluster-supported version ``api_version`` converts to."""
    known = get_convertible_versions(kind)
    if api_version not in known:
        return None
    candidates = [v for v in cluster_spec.get_supported_versions(kind) if v in known]
    if not candidates:
        return None
    return min(candidates, key=version_sort_key)


def convert_version(obj: K8sObject, target_version: str) -> K8sObject:
    """Convert ``obj`` to ``target_version`` of the same kind via the hub."""
    if obj.api_version == target_version:
        return obj
    known = get_convertible_versions(obj.kind)
    if obj.api_version not in known or target_version not in known:
        raise UnsupportedKindError(obj.kind, obj.api_version, obj.get_name())

    default = SpokeConverter(_identity, _identity)
    body = copy.deepcopy(obj.body)
    body = _SPOKES.get((obj.kind, obj.api_version), default).to_hub(body)
    body = _SPOKES.get((obj.kind, target_version), default).from_hub(body)
    logger.debug(
        f"Converted {obj.kind} '{obj.get_name()}' "
        f"from {obj.api_version} to {target_version}"
    )
    return obj.replace(api_version=target_version, body=body)


def convert_to_supported_version(
    obj: K8sObject, cluster_spec: ClusterMetadataSpec, ignore_unsupported_kinds: bool
) -> K8sObject | None:
    """
    Convert an object to a version the target cluster supports.

    Returns:
        The object unchanged if already supported, the converted object, or
        None when no supported version exists and ``ignore_unsupported_kinds``
        is set (the caller drops it).

    Raises:
        UnsupportedKindError: If no supported version exists and unsupported
            kinds are not ignored.
    """
    if cluster_spec.supports(obj.kind, obj.api_version):
        return obj

    target = find_closest_supported_version(obj.kind, obj.api_version, cluster_spec)
    if target is not None:
        return convert_version(obj, target)

    if ignore_unsupported_kinds:
        logger.warning(
            f"Dropping {obj.kind} '{obj.get_name()}' ({obj.api_version}): "
            "not supported by the target cluster"
        )
        return None
    raise UnsupportedKindError(obj.kind, obj.api_version, obj.get_name())
