import base64

from kubetranslate.ir.models import EnhancedIR, Storage, StorageKind
from kubetranslate.models.objects import K8sObject, new_object

from .base import BaseAPIResource


class StorageAPIResource(BaseAPIResource):
    """Creates ConfigMaps, Secrets and PersistentVolumeClaims from IR storages."""

    groups = ("",)

    def get_supported_kinds(self) -> list[str]:
        return [kind.value for kind in StorageKind]

    def create_new_resources(
        self, ir: EnhancedIR, supported_kinds: list[str]
    ) -> list[K8sObject]:
        objs = []
        for storage in ir.storages:
            if storage.kind.value not in supported_kinds:
                self._logger.warning(
                    f"Target cluster does not support {storage.kind.value}, "
                    f"skipping storage '{storage.name}'"
                )
                continue
            objs.append(self._create(storage, ir))
        return objs

    def _create(self, storage: Storage, ir: EnhancedIR) -> K8sObject:
        if storage.kind is StorageKind.CONFIGMAP:
            return new_object("v1", "ConfigMap", storage.name, data=dict(storage.content))
        if storage.kind is StorageKind.SECRET:
            data = {
                key: base64.b64encode(value.encode("utf-8")).decode("ascii")
                for key, value in storage.content.items()
            }
            return new_object("v1", "Secret", storage.name, type="Opaque", data=data)
        storage_classes = ir.kubernetes.cluster.storage_classes
        spec = {
            "accessModes": ["ReadWriteOnce"],
            "resources": {"requests": {"storage": storage.size}},
        }
        if storage_classes:
            spec["storageClassName"] = storage_classes[0]
        return new_object("v1", "PersistentVolumeClaim", storage.name, spec=spec)
