"""YAML marshalling for versioned objects and post-serialization resources."""

import logging
import re
from io import StringIO
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.scalarstring import DoubleQuotedScalarString

from .objects import K8sObject

logger = logging.getLogger(__name__)

# A resource is the plain mapping form of an object after the YAML stage.
K8sResource = dict[str, Any]

_yaml_parser = YAML(typ="safe")  # safe loader, YAML 1.2

# Plain scalars that YAML 1.1 readers such as kubectl load as booleans
_YAML11_BOOL = re.compile(
    r"(y|Y|yes|Yes|YES|n|N|no|No|NO|true|True|TRUE|false|False|FALSE"
    r"|on|On|ON|off|Off|OFF)"
)


def _new_dumper() -> YAML:
    yaml = YAML()
    yaml.default_flow_style = False
    yaml.allow_unicode = True
    yaml.width = 4096
    yaml.indent(mapping=2, sequence=4, offset=2)
    return yaml


def _to_commented(value: Any) -> Any:
    """
    Recursively convert plain containers so key order survives dumping.

    Strings a YAML 1.1 reader would take for booleans are forced into quotes.
    """
    if isinstance(value, dict):
        mapping = CommentedMap()
        for key, item in value.items():
            mapping[_to_commented(key)] = _to_commented(item)
        return mapping
    if isinstance(value, (list, tuple)):
        return CommentedSeq(_to_commented(item) for item in value)
    if isinstance(value, str) and _YAML11_BOOL.fullmatch(value):
        return DoubleQuotedScalarString(value)
    return value


def dump_yaml(data: Any) -> str:
    """Serialize a single document to YAML text."""
    stream = StringIO()
    _new_dumper().dump(_to_commented(data), stream)
    return stream.getvalue()


def dump_all_yaml(documents: list[Any]) -> str:
    """Serialize several documents into one multi-document YAML text."""
    stream = StringIO()
    _new_dumper().dump_all([_to_commented(doc) for doc in documents], stream)
    return stream.getvalue()


def marshal_object_to_yaml(obj: K8sObject) -> str:
    """Marshal a versioned object to YAML text."""
    return dump_yaml(obj.to_dict())


def parse_resources_from_yaml(text: str) -> list[K8sResource]:
    """
    Parse YAML text into resources.

    A document may be a single resource, a ``List`` kind wrapping ``items``,
    or empty. All resources are returned flattened, in document order.

    Raises:
        ValueError: If a document is not a mapping.
    """
    resources: list[K8sResource] = []
    for document in _yaml_parser.load_all(text):
        if document is None:
            continue
        if not isinstance(document, dict):
            raise ValueError(
                f"Expected a mapping document, got {type(document).__name__}"
            )
        if document.get("kind") == "List" and isinstance(document.get("items"), list):
            for item in document["items"]:
                if not isinstance(item, dict):
                    raise ValueError("List items must be mappings")
                resources.append(item)
            continue
        resources.append(document)
    logger.debug(f"Parsed {len(resources)} resources from YAML")
    return resources


def get_resource_kind(resource: K8sResource) -> str:
    kind = resource.get("kind")
    return kind if isinstance(kind, str) else ""


def get_resource_name(resource: K8sResource) -> str:
    metadata = resource.get("metadata")
    if isinstance(metadata, dict) and isinstance(metadata.get("name"), str):
        return metadata["name"]
    return ""


def get_filename(name: str, kind: str) -> str:
    """Return the file name for a single object: ``<name>-<kind>.yaml``."""
    return f"{name}-{kind.lower()}.yaml"
