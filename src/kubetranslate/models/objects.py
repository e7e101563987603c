"""
Versioned cluster objects.

A ``K8sObject`` is a kind-tagged, version-tagged configuration record. It is
frozen: pipeline stages never mutate an object, they build a replacement with
``replace()``.
"""

import copy
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

_RESERVED_KEYS = ("apiVersion", "kind", "metadata")


class ObjectMeta(BaseModel):
    """Subset of object metadata used for identity and labelling."""

    name: str = Field(..., description="Object name, unique per kind/namespace.")
    namespace: str | None = Field(default=None, description="Optional namespace.")
    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)
    extra: dict[str, Any] = Field(
        default_factory=dict,
        description="Any other metadata fields, carried through unchanged.",
    )

    model_config = ConfigDict(frozen=True, extra="forbid")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name}
        if self.namespace:
            data["namespace"] = self.namespace
        if self.labels:
            data["labels"] = dict(self.labels)
        if self.annotations:
            data["annotations"] = dict(self.annotations)
        for key, value in self.extra.items():
            data[key] = copy.deepcopy(value)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ObjectMeta":
        known = {"name", "namespace", "labels", "annotations"}
        return cls(
            name=data.get("name", ""),
            namespace=data.get("namespace"),
            labels=data.get("labels") or {},
            annotations=data.get("annotations") or {},
            extra={k: v for k, v in data.items() if k not in known},
        )


class K8sObject(BaseModel):
    """An immutable versioned object (apiVersion, kind, metadata, body)."""

    api_version: str = Field(..., description="Group/version, e.g. 'apps/v1'.")
    kind: str = Field(..., description="Object kind, e.g. 'Deployment'.")
    metadata: ObjectMeta
    body: dict[str, Any] = Field(
        default_factory=dict,
        description="All other top-level fields (spec, data, status, ...).",
    )

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("kind", "api_version")
    @classmethod
    def _not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("kind and api_version must not be empty")
        return v

    # ----- accessors ---------------------------------------------------------

    def get_name(self) -> str:
        return self.metadata.name

    def get_kind(self) -> str:
        return self.kind

    def identity(self) -> tuple[str, str, str | None]:
        """Return the (kind, name, namespace) identity of the object."""
        return (self.kind, self.metadata.name, self.metadata.namespace)

    @property
    def group(self) -> str:
        """API group; empty for the core group."""
        if "/" in self.api_version:
            return self.api_version.split("/", 1)[0]
        return ""

    @property
    def version(self) -> str:
        return self.api_version.rsplit("/", 1)[-1]

    # ----- conversion --------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": self.metadata.to_dict(),
        }
        for key, value in self.body.items():
            data[key] = copy.deepcopy(value)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "K8sObject":
        return cls(
            api_version=data.get("apiVersion", ""),
            kind=data.get("kind", ""),
            metadata=ObjectMeta.from_dict(dict(data.get("metadata") or {})),
            body={
                k: copy.deepcopy(v) for k, v in data.items() if k not in _RESERVED_KEYS
            },
        )

    def replace(self, **changes: Any) -> "K8sObject":
        """Return a new object with the given fields replaced."""
        return self.model_copy(update=changes, deep=True)

    def with_body(self, body: dict[str, Any]) -> "K8sObject":
        return self.replace(body=body)

    def spec(self) -> dict[str, Any]:
        """Return a deep copy of the object's spec (empty if absent)."""
        spec = self.body.get("spec")
        return copy.deepcopy(spec) if isinstance(spec, dict) else {}


def new_object(
    api_version: str,
    kind: str,
    name: str,
    namespace: str | None = None,
    labels: dict[str, str] | None = None,
    annotations: dict[str, str] | None = None,
    **body: Any,
) -> K8sObject:
    """Convenience constructor used by the resource converters."""
    return K8sObject(
        api_version=api_version,
        kind=kind,
        metadata=ObjectMeta(
            name=name,
            namespace=namespace,
            labels=labels or {},
            annotations=annotations or {},
        ),
        body=body,
    )
