"""
Schema fixer.

Normalizes defaulted or missing fields so that generated objects are valid
before version conversion. ``fix`` is total and idempotent: every fixer only
fills in what is missing or canonicalizes a value into a form it would leave
unchanged on a second pass.
"""

import copy
import logging
import re
from collections.abc import Callable
from typing import Any

from kubetranslate.models.objects import K8sObject

logger = logging.getLogger(__name__)

WORKLOAD_KINDS = ("Deployment", "DaemonSet", "ReplicaSet", "StatefulSet")
MAX_NAME_LENGTH = 63

_INVALID_NAME_CHARS = re.compile(r"[^a-z0-9.-]+")

BodyFixer = Callable[[K8sObject, dict[str, Any]], dict[str, Any]]


def normalize_name(name: str) -> str:
    """Return a DNS-1123 compatible version of ``name``."""
    normalized = _INVALID_NAME_CHARS.sub("-", name.lower())
    normalized = normalized[:MAX_NAME_LENGTH].strip("-.")
    return normalized or name


def _fix_workload(obj: K8sObject, body: dict[str, Any]) -> dict[str, Any]:
    spec = body.get("spec")
    if not isinstance(spec, dict):
        return body
    template = spec.get("template")
    if not isinstance(template, dict):
        return body
    template_meta = template.get("metadata")
    labels = template_meta.get("labels") if isinstance(template_meta, dict) else None
    if not spec.get("selector") and isinstance(labels, dict) and labels:
        spec["selector"] = {"matchLabels": dict(labels)}
    return body


def _fix_service(obj: K8sObject, body: dict[str, Any]) -> dict[str, Any]:
    if obj.group:
        # Knative and other non-core services share the kind name
        return body
    spec = body.get("spec")
    if not isinstance(spec, dict) or not isinstance(spec.get("ports"), list):
        return body
    ports = [p for p in spec["ports"] if isinstance(p, dict)]
    for port in ports:
        port.setdefault("protocol", "TCP")
        if "targetPort" not in port and "port" in port:
            port["targetPort"] = port["port"]
    if len(ports) > 1:
        unnamed = [p["port"] for p in ports if not p.get("name") and "port" in p]
        for port in ports:
            if not port.get("name") and "port" in port:
                name = f"port-{port['port']}"
                # Same number over several protocols, e.g. DNS on 53/TCP and 53/UDP
                if unnamed.count(port["port"]) > 1:
                    name = f"{name}-{str(port['protocol']).lower()}"
                port["name"] = name
    return body


def _fix_ingress(obj: K8sObject, body: dict[str, Any]) -> dict[str, Any]:
    if obj.api_version != "networking.k8s.io/v1":
        return body
    spec = body.get("spec")
    if not isinstance(spec, dict):
        return body
    for rule in spec.get("rules") or []:
        http = rule.get("http") if isinstance(rule, dict) else None
        if not isinstance(http, dict):
            continue
        for path in http.get("paths") or []:
            if isinstance(path, dict) and not path.get("pathType"):
                path["pathType"] = "ImplementationSpecific"
    return body


_FIXERS: dict[str, list[BodyFixer]] = {
    **{kind: [_fix_workload] for kind in WORKLOAD_KINDS},
    "Service": [_fix_service],
    "Ingress": [_fix_ingress],
}


def get_fixers(kind: str) -> list[BodyFixer]:
    return list(_FIXERS.get(kind, []))


def fix(obj: K8sObject) -> K8sObject:
    """Return a fixed copy of ``obj``, or ``obj`` itself if nothing changed."""
    metadata = obj.metadata
    fixed_name = normalize_name(metadata.name)
    body = copy.deepcopy(obj.body)
    original_body = obj.body

    for fixer in get_fixers(obj.kind):
        body = fixer(obj, body)

    if fixed_name == metadata.name and body == original_body:
        return obj

    logger.debug(f"Fixed {obj.kind} '{metadata.name}'")
    return obj.replace(
        metadata=metadata.model_copy(update={"name": fixed_name}), body=body
    )
