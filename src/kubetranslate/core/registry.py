"""Registry of the built-in transformers."""

import logging

from kubetranslate.scripting.questions import QuestionResolvers
from kubetranslate.transformers import (
    BaseTransformer,
    BuildconfigTransformer,
    K8sTransformer,
    KnativeTransformer,
    TektonTransformer,
)

logger = logging.getLogger(__name__)

# Registration order is execution order
TRANSFORMER_CLASSES: tuple[type[BaseTransformer], ...] = (
    TektonTransformer,
    BuildconfigTransformer,
    KnativeTransformer,
    K8sTransformer,
)


def get_transformer_names() -> list[str]:
    """Names of the built-in transformers, in execution order."""
    return [cls.name for cls in TRANSFORMER_CLASSES]


def get_transformers(
    resolvers: QuestionResolvers,
    parent_logger: logging.Logger | None = None,
    names: list[str] | None = None,
) -> list[BaseTransformer]:
    """
    Instantiate the built-in transformers.

    Args:
        resolvers: Question resolvers shared by all the transformers
        parent_logger: Logger the transformers log under
        names: Restrict to these transformers; execution order is unchanged

    Returns:
        The transformers in execution order

    Raises:
        ValueError: If a name does not match any transformer
    """
    if names is not None:
        known = set(get_transformer_names())
        unknown = [n for n in names if n not in known]
        if unknown:
            raise ValueError(
                f"Unknown transformer(s) {', '.join(unknown)}. "
                f"Available: {', '.join(get_transformer_names())}"
            )
    transformers = [
        cls(resolvers, parent_logger)
        for cls in TRANSFORMER_CLASSES
        if names is None or cls.name in names
    ]
    logger.debug(f"Using transformers: {[t.name for t in transformers]}")
    return transformers
