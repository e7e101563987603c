"""Render a directory as an indented tree, in the style of the ``tree`` command."""

from pathlib import Path

_BRANCH = "├── "
_LAST = "└── "
_PIPE = "│   "
_SPACE = "    "


def render_tree(root: Path) -> str:
    """
    Render ``root`` and everything below it, entries sorted by name.

    The first line is the root path itself.
    """
    lines = [str(root)]
    _walk(root, "", lines)
    return "\n".join(lines) + "\n"


def _walk(directory: Path, prefix: str, lines: list[str]) -> None:
    try:
        entries = sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError:
        return
    for index, entry in enumerate(entries):
        last = index == len(entries) - 1
        lines.append(f"{prefix}{_LAST if last else _BRANCH}{entry.name}")
        if entry.is_dir() and not entry.is_symlink():
            _walk(entry, prefix + (_SPACE if last else _PIPE), lines)
