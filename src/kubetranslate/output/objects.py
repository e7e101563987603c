import logging
from dataclasses import dataclass, field
from pathlib import Path

from kubetranslate.k8sschema.cluster import ClusterMetadataSpec
from kubetranslate.k8sschema.conversion import convert_to_supported_version
from kubetranslate.k8sschema.fixer import fix
from kubetranslate.models.objects import K8sObject
from kubetranslate.models.yaml_io import (
    K8sResource,
    dump_yaml,
    get_filename,
    get_resource_kind,
    get_resource_name,
    marshal_object_to_yaml,
    parse_resources_from_yaml,
)
from kubetranslate.scripting.loader import get_transforms_from_paths
from kubetranslate.scripting.questions import QuestionResolvers
from kubetranslate.scripting.runner import apply_transforms

from .templates import DEFAULT_DIRECTORY_PERMISSION, DEFAULT_FILE_PERMISSION

logger = logging.getLogger(__name__)

_UNNAMED = "unnamed"


@dataclass
class WriteObjectsResult:
    """Paths written, plus the objects skipped or dropped on the way."""

    paths: list[Path] = field(default_factory=list)
    skipped: list[tuple[K8sObject, Exception]] = field(default_factory=list)
    dropped: list[K8sObject] = field(default_factory=list)


def _unique_filename(resource: K8sResource, used: set[str]) -> str:
    name = get_resource_name(resource) or _UNNAMED
    kind = get_resource_kind(resource) or "resource"
    filename = get_filename(name, kind)
    counter = 1
    while filename in used:
        counter += 1
        filename = get_filename(f"{name}-{counter}", kind)
    used.add(filename)
    return filename


def write_resources(resources: list[K8sResource], output_path: Path) -> list[Path]:
    """
    Write each resource to its own file under ``output_path``.

    Resources that would share a file name get a numeric suffix, in order.

    Raises:
        OSError: If the directory or a file cannot be written
    """
    output_path = Path(output_path)
    output_path.mkdir(mode=DEFAULT_DIRECTORY_PERMISSION, parents=True, exist_ok=True)
    used: set[str] = set()
    paths: list[Path] = []
    for resource in resources:
        path = output_path / _unique_filename(resource, used)
        path.write_text(dump_yaml(resource), encoding="utf-8")
        path.chmod(DEFAULT_FILE_PERMISSION)
        paths.append(path)
    return paths


def write_transformed_objects(
    output_path: Path,
    objs: list[K8sObject],
    cluster_spec: ClusterMetadataSpec,
    ignore_unsupported_kinds: bool,
    transform_paths: list[Path],
    resolvers: QuestionResolvers,
) -> WriteObjectsResult:
    """
    Fix, convert and marshal objects, run the rule-sets over the resulting
    resources and write them, one file per resource.

    An object that cannot be fixed, converted or marshalled is logged and
    skipped. Unsupported kinds are dropped when ``ignore_unsupported_kinds``
    is set.

    Raises:
        RuleSetLoadError: If a rule-set cannot be loaded
        RuleSetApplyError: If a rule fails
        OSError: If the resources cannot be written
    """
    result = WriteObjectsResult()
    resources: list[K8sResource] = []
    for obj in objs:
        try:
            fixed = fix(obj)
            converted = convert_to_supported_version(
                fixed, cluster_spec, ignore_unsupported_kinds
            )
            if converted is None:
                result.dropped.append(obj)
                continue
            resources.extend(parse_resources_from_yaml(marshal_object_to_yaml(converted)))
        except Exception as e:
            logger.warning(f"Skipping {obj.kind} '{obj.get_name()}': {e}")
            result.skipped.append((obj, e))

    rule_sets = get_transforms_from_paths(
        transform_paths,
        resolvers.answer_fn,
        resolvers.ask_static,
        resolvers.ask_dynamic,
        resolvers.cache,
    )
    if rule_sets:
        resources = apply_transforms(rule_sets, resources)

    result.paths = write_resources(resources, output_path)
    logger.debug(f"Wrote {len(result.paths)} resources to {output_path}")
    return result
