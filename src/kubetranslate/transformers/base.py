"""Abstract base class for transformation strategies."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from kubetranslate.apiresource.base import convert_ir_to_objects
from kubetranslate.core.exceptions import TransformerError
from kubetranslate.core.protocols import ResourceConverter, Transformer
from kubetranslate.ir.models import IR, EnhancedIR
from kubetranslate.models.objects import K8sObject
from kubetranslate.output.objects import WriteObjectsResult, write_transformed_objects
from kubetranslate.scripting.loader import get_transforms_from_paths
from kubetranslate.scripting.questions import QuestionResolvers

logger = logging.getLogger(__name__)


class BaseTransformer(Transformer, ABC):
    """
    Base class for transformers.

    Runs the transformer's resource converters over the IR and writes the
    resulting objects through the fix/convert/rule-set/write stages into the
    transformer's own output directory.

    Subclasses must implement:
    - name: Short identifier of the strategy
    - output_dir: Directory, relative to the output root, of written objects
    - create_converters(): The resource converters of the strategy
    """

    name: str = ""
    output_dir: str = ""

    def __init__(
        self,
        resolvers: QuestionResolvers,
        parent_logger: logging.Logger | None = None,
    ):
        """
        Initialize the transformer.

        Args:
            resolvers: Question resolvers shared by every transformer of a run
            parent_logger: Logger the transformer logs under
        """
        self._resolvers = resolvers
        self._logger = (parent_logger or logger).getChild(self.__class__.__name__)
        self._ir: IR | None = None
        self._objects: list[K8sObject] = []
        self.last_result: WriteObjectsResult | None = None

    @abstractmethod
    def create_converters(self) -> list[ResourceConverter]:
        pass

    @property
    def objects(self) -> list[K8sObject]:
        """Objects produced by the last ``transform`` call."""
        return list(self._objects)

    def transform(self, ir: IR) -> None:
        self._ir = ir
        enhanced = EnhancedIR.from_ir(ir)
        self._objects = convert_ir_to_objects(enhanced, self.create_converters())
        self._logger.info(f"Transformed IR into {len(self._objects)} objects")

    def write_objects(self, output_path: Path, transform_paths: list[Path]) -> None:
        ir = self._require_ir()
        if not self._objects:
            # Rule-sets are still loaded so that a bad path fails the run
            get_transforms_from_paths(
                transform_paths,
                self._resolvers.answer_fn,
                self._resolvers.ask_static,
                self._resolvers.ask_dynamic,
                self._resolvers.cache,
            )
            self._logger.info("Nothing to write")
            return
        self.last_result = write_transformed_objects(
            Path(output_path) / self.output_dir,
            self._objects,
            ir.kubernetes.cluster,
            ir.kubernetes.ignore_unsupported_kinds,
            transform_paths,
            self._resolvers,
        )
        self._logger.info(
            f"Wrote {len(self.last_result.paths)} files to {self.output_dir}"
        )

    def _require_ir(self) -> IR:
        if self._ir is None:
            raise TransformerError(
                "write_objects called before transform", self.name, "write"
            )
        return self._ir
