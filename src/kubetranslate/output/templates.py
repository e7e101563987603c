"""Rendering of the jinja2 templates shipped with the package."""

from pathlib import Path
from typing import Any

from jinja2 import Environment, PackageLoader, StrictUndefined

DEFAULT_FILE_PERMISSION = 0o644
DEFAULT_EXECUTABLE_PERMISSION = 0o744
DEFAULT_DIRECTORY_PERMISSION = 0o755

BUILDIMAGES_SH = "buildimages.sh.j2"
PUSHIMAGES_SH = "pushimages.sh.j2"
MANUALIMAGES_MD = "Manualimages.md.j2"
DEPLOY_SH = "deploy.sh.j2"
README_MD = "Readme.md.j2"

_env = Environment(
    loader=PackageLoader("kubetranslate", "templates"),
    autoescape=False,
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    undefined=StrictUndefined,
)


def render_template(template_name: str, context: dict[str, Any]) -> str:
    return _env.get_template(template_name).render(**context)


def write_template_to_file(
    template_name: str,
    context: dict[str, Any],
    path: Path,
    permission: int = DEFAULT_FILE_PERMISSION,
) -> None:
    """Render a template and write it with the given permission bits."""
    path.write_text(render_template(template_name, context), encoding="utf-8")
    path.chmod(permission)
