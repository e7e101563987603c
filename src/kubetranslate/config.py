"""
Pipeline configuration.

Settings come from an optional YAML file and are overridden by command line
flags. Settings that concern the target cluster are applied on top of the
IR's own ``kubernetes`` options.
"""

import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from kubetranslate.core.exceptions import ConfigError
from kubetranslate.ir.models import IR
from kubetranslate.k8sschema.cluster import resolve_cluster

logger = logging.getLogger(__name__)


class PipelineConfig(BaseModel):
    """Settings of one pipeline run."""

    output_dir: Path | None = None
    transform_paths: list[Path] = Field(
        default_factory=list, description="Rule-set files or directories, in order."
    )
    cluster: str | None = Field(
        None, description="Builtin cluster name or path to a ClusterMetadata file."
    )
    ignore_unsupported_kinds: bool | None = None
    registry_url: str | None = None
    registry_namespace: str | None = None
    transformers: list[str] | None = Field(
        None, description="Restrict the run to these transformers."
    )
    qa_answers_file: Path | None = None
    qa_skip: bool = False
    qa_cache_file: Path | None = None

    model_config = ConfigDict(extra="forbid")

    def with_overrides(self, **overrides: Any) -> "PipelineConfig":
        """Return a copy with every override that is not None applied."""
        values = self.model_dump()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return PipelineConfig.model_validate(values)

    def apply_to_ir(self, ir: IR) -> IR:
        """Return the IR with the cluster and registry settings applied."""
        updates: dict[str, Any] = {}
        if self.cluster:
            updates["cluster"] = resolve_cluster(self.cluster).spec
        if self.ignore_unsupported_kinds is not None:
            updates["ignore_unsupported_kinds"] = self.ignore_unsupported_kinds
        if self.registry_url is not None:
            updates["registry_url"] = self.registry_url
        if self.registry_namespace is not None:
            updates["registry_namespace"] = self.registry_namespace
        if not updates:
            return ir
        kubernetes = ir.kubernetes.model_copy(update=updates)
        return ir.model_copy(update={"kubernetes": kubernetes})


def load_config(path: str | Path) -> PipelineConfig:
    """
    Load a pipeline configuration file.

    Raises:
        ConfigError: If the file cannot be read or is not a valid configuration
    """
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as f:
            data = YAML(typ="safe").load(f)
    except (OSError, YAMLError) as e:
        raise ConfigError(f"Cannot read configuration {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration {path} must be a mapping")
    try:
        config = PipelineConfig.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        field_name = ".".join(str(p) for p in first["loc"]) or None
        raise ConfigError(
            f"Invalid configuration {path}: {first['msg']}", field_name
        ) from e
    logger.debug(f"Loaded configuration from {path}")
    return config
