"""Read a serialized IR document from a local YAML / JSON file."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Final

from pydantic import ValidationError
from ruamel.yaml import YAML

from kubetranslate.core.exceptions import IRLoadError

from .models import IR

logger = logging.getLogger(__name__)

_YAML_EXTS: Final[set[str]] = {".yaml", ".yml"}
_JSON_EXTS: Final[set[str]] = {".json"}

_yaml_parser = YAML(typ="safe")  # safe loader, YAML 1.2


def load_ir(path: str | Path) -> IR:
    """Load and validate an IR document."""
    file_path = Path(path)

    if not file_path.is_file():
        logger.error("IR file not found: %s", file_path)
        raise IRLoadError(f"File not found: {file_path}", file_path)

    suffix = file_path.suffix.lower()
    if suffix not in _YAML_EXTS | _JSON_EXTS:
        raise IRLoadError(
            f"Unsupported extension '{file_path.suffix}'. "
            f"Supported: {', '.join(sorted(_YAML_EXTS | _JSON_EXTS))}",
            file_path,
        )

    raw_text = file_path.read_text(encoding="utf-8")
    try:
        if suffix in _YAML_EXTS:
            data: Dict[str, Any] = _yaml_parser.load(raw_text)
        else:
            data = json.loads(raw_text)
    except Exception as exc:
        raise IRLoadError(f"Cannot parse {file_path.name}: {exc}", file_path) from exc

    if not isinstance(data, dict):
        raise IRLoadError("Top-level object must be a mapping", file_path)

    try:
        ir = IR.model_validate(data)
    except ValidationError as exc:
        raise IRLoadError(f"Invalid IR: {exc}", file_path) from exc

    logger.debug(
        "IR loaded (%d services, %d containers, %d cached objects)",
        len(ir.services),
        len(ir.containers),
        len(ir.cached_objects),
    )
    return ir
