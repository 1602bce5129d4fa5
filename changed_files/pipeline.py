"""Lazy path pipeline that turns classified diff output into deduplicated path lists.

Each requested change type is expanded path by path:

1. in dir-names mode, a path matching ``dir_names_include_files`` is also
   emitted as-is (normalized), in addition to its collapsed directory;
2. in dir-names mode, the path is collapsed to its leading directories;
3. whitespace runs become hyphens;
4. on Windows with ``use_posix_path_separator``, separators become ``/``.

The generators are consumed through a dict (first-seen order wins), then empty
entries are dropped.
"""

from __future__ import annotations

from itertools import chain
from typing import Iterable, Iterator
import logging

from changed_files.config import Inputs
from changed_files.models import ALL_CHANGE_TYPES, ChangeType, ChangedFiles, Platform
from changed_files.paths import get_dirname_max_depth, replace_spaces_in_path, to_posix_path
from changed_files.patterns import is_match, split_patterns

logger = logging.getLogger(__name__)


def get_dir_names_include_files_patterns(inputs: Inputs) -> list[str]:
    if not inputs.dir_names:
        return []
    return split_patterns(inputs.dir_names_include_files, inputs.dir_names_include_files_separator)


def _iter_file_paths(
    inputs: Inputs,
    file_paths: Iterable[str],
    dir_names_include_files_patterns: list[str],
    platform: Platform,
) -> Iterator[str]:
    for file_path in file_paths:
        processed_path = file_path

        if inputs.dir_names:
            if dir_names_include_files_patterns and is_match(
                file_path, dir_names_include_files_patterns, platform
            ):
                yield replace_spaces_in_path(file_path)
            processed_path = get_dirname_max_depth(
                file_path,
                platform,
                dir_names_max_depth=inputs.dir_names_max_depth,
                exclude_current_dir=inputs.dir_names_exclude_current_dir,
            )

        yield replace_spaces_in_path(processed_path)


def _iter_output_paths(inputs: Inputs, file_paths: Iterable[str], platform: Platform) -> Iterator[str]:
    patterns = get_dir_names_include_files_patterns(inputs)
    if patterns:
        logger.debug("Dir names include file patterns: %s", patterns)

    for file_path in _iter_file_paths(inputs, file_paths, patterns, platform):
        if platform.is_windows and inputs.use_posix_path_separator:
            yield replace_spaces_in_path(to_posix_path(file_path))
        else:
            yield replace_spaces_in_path(file_path)


def iter_change_type_files(
    inputs: Inputs,
    changed_files: ChangedFiles,
    change_types: Iterable[ChangeType],
    platform: Platform,
) -> Iterator[str]:
    file_paths = chain.from_iterable(changed_files.get(change_type, []) for change_type in change_types)
    return _iter_output_paths(inputs, file_paths, platform)


def unique_paths(paths: Iterable[str]) -> list[str]:
    return [p for p in dict.fromkeys(paths) if p]


def _serialize(inputs: Inputs, files: list[str]) -> dict[str, str | list[str]]:
    return {
        "paths": files if inputs.json else inputs.separator.join(files),
        "count": str(len(files)),
    }


def get_change_type_file_list(
    inputs: Inputs,
    changed_files: ChangedFiles,
    change_types: Iterable[ChangeType],
    platform: Platform,
) -> list[str]:
    return unique_paths(iter_change_type_files(inputs, changed_files, change_types, platform))


def get_change_type_files(
    inputs: Inputs,
    changed_files: ChangedFiles,
    change_types: Iterable[ChangeType],
    platform: Platform,
) -> dict[str, str | list[str]]:
    files = get_change_type_file_list(inputs, changed_files, change_types, platform)
    return _serialize(inputs, files)


def get_all_change_type_files(
    inputs: Inputs,
    changed_files: ChangedFiles,
    platform: Platform,
) -> dict[str, str | list[str]]:
    return get_change_type_files(inputs, changed_files, ALL_CHANGE_TYPES, platform)
