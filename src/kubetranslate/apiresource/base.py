import logging
from abc import ABC, abstractmethod

from kubetranslate.core.protocols import ResourceConverter
from kubetranslate.ir.models import IR, EnhancedIR
from kubetranslate.k8sschema.utils import intersection, merge
from kubetranslate.models.objects import K8sObject

logger = logging.getLogger(__name__)


class BaseAPIResource(ResourceConverter, ABC):
    """
    Base class for resource converters.

    Provides the common logic for claiming cached objects of the owned kinds
    and merging them with the newly created ones, keeping the kind-specific
    creation logic abstract.

    Subclasses must implement:
    - get_supported_kinds(): The kinds this converter owns
    - create_new_resources(): Build new objects from the IR
    """

    # API groups the converter accepts for its kinds; None accepts any group
    groups: tuple[str, ...] | None = None

    def __init__(self, parent_logger: logging.Logger | None = None):
        self._logger = (parent_logger or logger).getChild(self.__class__.__name__)

    @abstractmethod
    def get_supported_kinds(self) -> list[str]:
        pass

    @abstractmethod
    def create_new_resources(
        self, ir: EnhancedIR, supported_kinds: list[str]
    ) -> list[K8sObject]:
        """
        Create new objects from the IR.

        Args:
            ir: The enhanced IR
            supported_kinds: Owned kinds the target cluster can host

        Returns:
            The created objects
        """
        pass

    def claims(self, obj: K8sObject) -> bool:
        """Check whether a cached object belongs to this converter."""
        if obj.kind not in self.get_supported_kinds():
            return False
        return self.groups is None or obj.group in self.groups

    def convert_to_cluster_supported_kinds(
        self, obj: K8sObject, supported_kinds: list[str], ir: IR
    ) -> list[K8sObject] | None:
        """
        Convert a claimed cached object into objects of supported kinds.

        The default keeps the object as is when its kind is supported.
        Returns None when the object cannot be handled.
        """
        if obj.kind in supported_kinds:
            return [obj]
        return None

    def get_cluster_supported_kinds(self, ir: IR) -> list[str]:
        cluster = ir.kubernetes.cluster
        return [k for k in self.get_supported_kinds() if cluster.supports_kind(k)]

    def convert_ir_to_objects(
        self, ir: EnhancedIR
    ) -> tuple[list[K8sObject], list[K8sObject]]:
        supported_kinds = self.get_cluster_supported_kinds(ir)
        new_objs = self.create_new_resources(ir, supported_kinds)
        self._logger.debug(
            f"Created {len(new_objs)} objects for kinds {supported_kinds}"
        )

        claimed: list[K8sObject] = []
        ignored: list[K8sObject] = []
        for obj in ir.cached_objects:
            if not self.claims(obj):
                ignored.append(obj)
                continue
            converted = self.convert_to_cluster_supported_kinds(
                obj, supported_kinds, ir
            )
            if converted is None:
                self._logger.debug(
                    f"Cannot handle cached {obj.kind} '{obj.get_name()}'"
                )
                ignored.append(obj)
                continue
            claimed.extend(converted)

        return merge(new_objs, claimed), ignored


def convert_ir_to_objects(
    ir: EnhancedIR, converters: list[ResourceConverter]
) -> list[K8sObject]:
    """
    Run every converter over the IR and collect their objects.

    A cached object is passed through only when every converter declined it.
    Produced objects keep converter order; passed-through objects come last
    in their original order.
    """
    target_objs: list[K8sObject] = []
    ignored_objs = list(ir.cached_objects)
    for converter in converters:
        new_objs, declined = converter.convert_ir_to_objects(ir)
        ignored_objs = intersection(ignored_objs, declined)
        target_objs.extend(new_objs)
    target_objs.extend(ignored_objs)
    return target_objs
