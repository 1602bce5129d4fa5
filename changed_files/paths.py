from __future__ import annotations

import posixpath
import re
from typing import Iterable

from changed_files.models import Platform

_WHITESPACE_RE = re.compile(r"\s+")


def replace_spaces_in_path(file_path: str) -> str:
    """Collapse each whitespace run in ``file_path`` into a single hyphen."""
    return _WHITESPACE_RE.sub("-", file_path)


def replace_spaces_in_paths(file_paths: Iterable[str]) -> list[str]:
    return [replace_spaces_in_path(p) for p in file_paths]


def normalize_separators(file_path: str, platform: Platform) -> str:
    if platform.is_windows:
        return file_path.replace("/", "\\")
    return file_path.replace("\\", "/")


def to_posix_path(file_path: str) -> str:
    """Convert a Windows path to the mixed form (drive letter kept, forward slashes)."""
    return file_path.replace("\\", "/")


def join_path(parent: str, child: str, platform: Platform) -> str:
    joined = posixpath.normpath(posixpath.join(to_posix_path(parent), to_posix_path(child)))
    return normalize_separators(joined, platform)


def get_dirname_max_depth(
    relative_path: str,
    platform: Platform,
    dir_names_max_depth: int | None = None,
    exclude_current_dir: bool = False,
) -> str:
    """Return the directory of ``relative_path`` cut down to its leading segments.

    A ``dir_names_max_depth`` of 0 or None keeps every segment. Files at the
    repository root yield ``"."``, or ``""`` when ``exclude_current_dir`` is set.
    """
    dirname = posixpath.dirname(to_posix_path(relative_path)) or "."
    parts = dirname.split("/")
    max_depth = min(dir_names_max_depth or len(parts), len(parts))

    output = "/".join(parts[:max_depth])
    if exclude_current_dir and output == ".":
        return ""
    return normalize_separators(output, platform)
