"""Versioned object model and YAML codec."""

from .objects import K8sObject, ObjectMeta, new_object
from .yaml_io import (
    K8sResource,
    dump_yaml,
    get_filename,
    marshal_object_to_yaml,
    parse_resources_from_yaml,
)

__all__ = [
    "K8sObject",
    "ObjectMeta",
    "new_object",
    "K8sResource",
    "dump_yaml",
    "get_filename",
    "marshal_object_to_yaml",
    "parse_resources_from_yaml",
]
