"""Archive path helpers shared by install-source resolution."""

from __future__ import annotations

import pathlib

ARCHIVE_SUFFIXES: tuple[tuple[str, str], ...] = (
    (".tar.gz", "tar"),
    (".tgz", "tar"),
    (".tar", "tar"),
    (".zip", "zip"),
)


def resolve_user_path(value: str) -> pathlib.Path:
    """Expand ``~`` and make *value* absolute."""
    return pathlib.Path(value.strip()).expanduser().resolve()


def file_exists(path: pathlib.Path) -> bool:
    try:
        return path.is_file()
    except OSError:
        return False


def resolve_archive_kind(path: pathlib.Path | str) -> str | None:
    """Return ``"tar"`` or ``"zip"`` for a supported archive name, else None."""
    name = pathlib.Path(path).name.lower()
    for suffix, kind in ARCHIVE_SUFFIXES:
        if name.endswith(suffix):
            return kind
    return None
