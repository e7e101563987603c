"""
Materialization of new container images: build contexts, build and push
scripts, and the notice for images that must be built by hand.
"""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from kubetranslate.ir.models import Container

from .templates import (
    BUILDIMAGES_SH,
    DEFAULT_DIRECTORY_PERMISSION,
    DEFAULT_EXECUTABLE_PERMISSION,
    DEFAULT_FILE_PERMISSION,
    MANUALIMAGES_MD,
    PUSHIMAGES_SH,
    write_template_to_file,
)
from .tree import render_tree

logger = logging.getLogger(__name__)

SOURCE_DIR = "source"
SCRIPTS_DIR = "scripts"
NEWFILES_TXT = "newfiles.txt"
MANUALIMAGES_FILE = "Manualimages.md"
BUILDIMAGES_FILE = "buildimages.sh"
PUSHIMAGES_FILE = "pushimages.sh"

_SHELL_SUFFIXES = (".sh",)
_DOCKERFILE = "Dockerfile"


@dataclass(frozen=True, order=True)
class BuildStep:
    """
    One entry of the aggregate build script.

    ``directory`` is relative to the output directory. A step with an
    ``image`` builds ``filename`` as a Dockerfile, otherwise ``filename`` is a
    generated build script that is executed.
    """

    directory: str
    filename: str
    image: str = ""


@dataclass
class WriteContainersResult:
    """What ``write_containers`` produced, and what it could not."""

    push_required: bool = False
    build_steps: list[BuildStep] = field(default_factory=list)
    manual_images: list[str] = field(default_factory=list)
    images: list[str] = field(default_factory=list)
    written_files: list[Path] = field(default_factory=list)
    failures: list[tuple[str, Exception]] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.push_required


def _make_dir(path: Path, result: WriteContainersResult) -> None:
    try:
        path.mkdir(mode=DEFAULT_DIRECTORY_PERMISSION, parents=True, exist_ok=True)
    except OSError as e:
        logger.warning(f"Unable to create directory {path}: {e}")
        result.failures.append((str(path), e))


def _write_new_files(
    container: Container,
    output_path: Path,
    source_path: Path,
    result: WriteContainersResult,
) -> None:
    scripts_found = False
    dockerfiles: list[Path] = []
    for rel_path in sorted(container.new_files):
        target = source_path / rel_path
        executable = target.suffix in _SHELL_SUFFIXES
        try:
            target.parent.mkdir(
                mode=DEFAULT_DIRECTORY_PERMISSION, parents=True, exist_ok=True
            )
            target.write_text(container.new_files[rel_path], encoding="utf-8")
            target.chmod(
                DEFAULT_EXECUTABLE_PERMISSION if executable else DEFAULT_FILE_PERMISSION
            )
        except OSError as e:
            logger.warning(f"Unable to write {target}: {e}")
            result.failures.append((rel_path, e))
            continue

        result.written_files.append(target)
        directory = target.parent.relative_to(output_path).as_posix()
        if executable:
            scripts_found = True
            result.build_steps.append(BuildStep(directory, target.name))
        elif target.name == _DOCKERFILE:
            dockerfiles.append(target)

    # Containers that ship only a Dockerfile are built from it directly
    if not scripts_found:
        for dockerfile in dockerfiles:
            directory = dockerfile.parent.relative_to(output_path).as_posix()
            result.build_steps.append(
                BuildStep(directory, dockerfile.name, container.image_names[0])
            )


def _add_images(images: list[str], names: list[str]) -> None:
    for name in names:
        if name not in images:
            images.append(name)


def write_containers(
    containers: list[Container],
    output_path: Path,
    source_root_dir: Path | None,
    registry_url: str,
    registry_namespace: str,
) -> WriteContainersResult:
    """
    Write build material for every new container under ``output_path``.

    Failures on single files, directories or the source tree copy are logged
    and collected in ``WriteContainersResult.failures``; whatever could be
    written stays in place.

    Args:
        containers: Containers of the IR
        output_path: Root output directory
        source_root_dir: Application source tree copied next to the build
            scripts, if any
        registry_url: Default registry of the push script
        registry_namespace: Default registry namespace of the push script

    Returns:
        The result, truthy when images were collected for pushing
    """
    output_path = Path(output_path)
    result = WriteContainersResult()
    source_path = output_path / SOURCE_DIR
    scripts_path = output_path / SCRIPTS_DIR
    _make_dir(source_path, result)
    _make_dir(scripts_path, result)

    for container in containers:
        if not container.new:
            continue
        if not container.new_files:
            logger.debug(f"No build material for {container.image_names}")
            _add_images(result.manual_images, container.image_names)
            continue
        _write_new_files(container, output_path, source_path, result)
        _add_images(result.images, container.image_names)

    result.build_steps.sort()

    if result.manual_images:
        _render(
            MANUALIMAGES_MD,
            {"images": result.manual_images},
            output_path / MANUALIMAGES_FILE,
            DEFAULT_FILE_PERMISSION,
            result,
        )

    _write_newfiles_listing(source_path, output_path / NEWFILES_TXT, result)

    if result.build_steps:
        _render(
            BUILDIMAGES_SH,
            {"steps": result.build_steps},
            scripts_path / BUILDIMAGES_FILE,
            DEFAULT_EXECUTABLE_PERMISSION,
            result,
        )
        _copy_source_tree(source_root_dir, output_path, source_path, result)

    if result.images:
        _render(
            PUSHIMAGES_SH,
            {
                "images": result.images,
                "registry_url": registry_url,
                "registry_namespace": registry_namespace,
            },
            scripts_path / PUSHIMAGES_FILE,
            DEFAULT_EXECUTABLE_PERMISSION,
            result,
        )
        result.push_required = True

    logger.info(
        f"Wrote build material for {len(result.images)} images "
        f"({len(result.manual_images)} to build manually)"
    )
    return result


def _render(
    template_name: str,
    context: dict,
    path: Path,
    permission: int,
    result: WriteContainersResult,
) -> None:
    try:
        write_template_to_file(template_name, context, path, permission)
    except OSError as e:
        logger.warning(f"Unable to write {path}: {e}")
        result.failures.append((str(path), e))


def _write_newfiles_listing(
    source_path: Path, listing_path: Path, result: WriteContainersResult
) -> None:
    tree = render_tree(source_path)
    # The header line carries the absolute path; replace it with a stable marker
    _, _, rest = tree.partition("\n")
    try:
        listing_path.write_text(f"{SOURCE_DIR}/\n{rest}", encoding="utf-8")
        listing_path.chmod(DEFAULT_FILE_PERMISSION)
    except OSError as e:
        logger.warning(f"Unable to write {listing_path}: {e}")
        result.failures.append((str(listing_path), e))


def _ignore_paths(*paths: Path) -> Callable[[str, list[str]], set[str]]:
    """Return a ``copytree`` ignore callable that skips the given paths."""
    excluded = {path.resolve() for path in paths}

    def ignore(directory: str, names: list[str]) -> set[str]:
        base = Path(directory).resolve()
        return {name for name in names if base / name in excluded}

    return ignore


def _copy_source_tree(
    source_root_dir: Path | None,
    output_path: Path,
    source_path: Path,
    result: WriteContainersResult,
) -> None:
    if source_root_dir is None:
        logger.debug("No source root directory to copy")
        return
    # The output directory may live inside the source tree
    try:
        shutil.copytree(
            source_root_dir,
            source_path,
            ignore=_ignore_paths(output_path, source_path),
            dirs_exist_ok=True,
        )
    except OSError as e:
        logger.warning(f"Unable to copy {source_root_dir} to {source_path}: {e}")
        result.failures.append((str(source_root_dir), e))
