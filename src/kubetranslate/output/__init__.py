"""Writing of generated resources, build material and helper documents."""

from .containers import BuildStep, WriteContainersResult, write_containers
from .objects import WriteObjectsResult, write_resources, write_transformed_objects
from .tree import render_tree

__all__ = [
    "BuildStep",
    "WriteContainersResult",
    "write_containers",
    "WriteObjectsResult",
    "write_resources",
    "write_transformed_objects",
    "render_tree",
]
