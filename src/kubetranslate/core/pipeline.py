"""Pipeline runner executing transformers over one IR."""

import logging
from collections.abc import Callable
from pathlib import Path

from kubetranslate.ir.models import IR
from kubetranslate.scripting.answers import default_resolvers
from kubetranslate.scripting.questions import QuestionResolvers

from .exceptions import TransformerError
from .protocols import Transformer
from .registry import get_transformers

logger = logging.getLogger(__name__)


class PipelineRunner:
    """
    Runs every transformer over the same IR, in order.

    The run is fail-fast: the first transformer that fails stops the pipeline
    and its error is raised as a ``TransformerError`` chaining the original.
    """

    def __init__(
        self,
        transformers: list[Transformer],
        parent_logger: logging.Logger | None = None,
    ):
        self._transformers = list(transformers)
        self._logger = (parent_logger or logger).getChild(self.__class__.__name__)

    def get_transformers(self) -> list[Transformer]:
        return self._transformers.copy()

    def execute(
        self, ir: IR, output_path: Path, transform_paths: list[Path] | None = None
    ) -> None:
        """
        Transform the IR and write every transformer's output.

        Args:
            ir: The IR, left untouched
            output_path: Root output directory
            transform_paths: Rule-sets applied to each transformer's resources

        Raises:
            TransformerError: If any transformer fails
        """
        transform_paths = list(transform_paths or [])
        output_path = Path(output_path)
        self._logger.info(
            f"Running {len(self._transformers)} transformers on '{ir.name}'"
        )
        for i, transformer in enumerate(self._transformers):
            self._logger.info(
                f"Executing transformer {i + 1}/{len(self._transformers)}: "
                f"{transformer.name}"
            )
            self._run_stage(transformer, "transform", lambda: transformer.transform(ir))
            self._run_stage(
                transformer,
                "write",
                lambda: transformer.write_objects(output_path, transform_paths),
            )
        self._logger.info("Pipeline execution completed successfully")

    def _run_stage(
        self, transformer: Transformer, stage: str, action: Callable[[], None]
    ) -> None:
        try:
            action()
        except TransformerError:
            raise
        except Exception as e:
            self._logger.error(f"Transformer {transformer.name} failed to {stage}: {e}")
            raise TransformerError(
                f"Transformer '{transformer.name}' failed: {e}",
                transformer.name,
                stage,
            ) from e


def transform(
    ir: IR,
    output_path: Path,
    transform_paths: list[Path] | None = None,
    resolvers: QuestionResolvers | None = None,
    transformer_names: list[str] | None = None,
) -> QuestionResolvers:
    """
    Run the built-in transformers over the IR.

    Returns:
        The resolvers used, their cache holding every answer of the run
    """
    resolvers = resolvers or default_resolvers()
    runner = PipelineRunner(get_transformers(resolvers, names=transformer_names))
    runner.execute(ir, output_path, transform_paths)
    return resolvers
