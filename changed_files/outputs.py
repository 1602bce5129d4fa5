from __future__ import annotations

from pathlib import Path
from typing import Any
import json
import logging
import os
import uuid

from changed_files.config import Inputs
from changed_files.models import (
    ALL_CHANGE_TYPES,
    CHANGED_TYPES,
    MODIFIED_TYPES,
    ChangeType,
    ChangedFiles,
    GroupStatus,
    Platform,
)
from changed_files.pipeline import get_change_type_file_list

logger = logging.getLogger(__name__)


CHANGE_TYPE_OUTPUT_NAMES = {
    ChangeType.ADDED: "added_files",
    ChangeType.COPIED: "copied_files",
    ChangeType.DELETED: "deleted_files",
    ChangeType.MODIFIED: "modified_files",
    ChangeType.RENAMED: "renamed_files",
    ChangeType.TYPE_CHANGED: "type_changed_files",
    ChangeType.UNMERGED: "unmerged_files",
    ChangeType.UNKNOWN: "unknown_files",
}


def json_output(value: Any, should_escape: bool = False) -> str:
    result = json.dumps(value)
    if should_escape:
        return result.replace('"', '\\"')
    return result


def write_github_output(key: str, value: str) -> None:
    """Append ``key`` to GITHUB_OUTPUT, using the heredoc form for multiline values."""
    output_file = os.environ.get("GITHUB_OUTPUT")
    if not output_file:
        logger.debug("GITHUB_OUTPUT not set, would output: %s=%s", key, value[:100])
        return
    with open(output_file, "a") as f:
        if "\n" in value:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            f.write(f"{key}<<{delimiter}\n{value}\n{delimiter}\n")
        else:
            f.write(f"{key}={value}\n")


def _render(value: Any, inputs: Inputs, escape: bool) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        if inputs.json:
            return json_output(list(value), escape)
        return inputs.separator.join(value)
    return str(value).strip()


def set_output(key: str, value: Any, inputs: Inputs, output_prefix: str = "") -> None:
    name = f"{output_prefix}_{key}" if output_prefix else key
    rendered = _render(value, inputs, escape=inputs.escape_json)
    logger.debug("%s: %s", name, rendered)
    write_github_output(name, rendered)

    if inputs.write_output_files:
        output_dir = Path(inputs.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        extension = "json" if inputs.json else "txt"
        (output_dir / f"{name}.{extension}").write_text(_render(value, inputs, escape=False))


def set_array_output(key: str, value: list[str], inputs: Inputs, output_prefix: str = "") -> None:
    set_output(key, list(value), inputs, output_prefix=output_prefix)


def _set_files_output(
    key: str,
    files: list[str],
    inputs: Inputs,
    output_prefix: str,
) -> None:
    set_output(key, files, inputs, output_prefix=output_prefix)
    set_output(f"{key}_count", str(len(files)), inputs, output_prefix=output_prefix)


def _other_files(
    inputs: Inputs,
    all_diff_files: ChangedFiles,
    matched: list[str],
    change_types: tuple[ChangeType, ...],
    platform: Platform,
) -> list[str]:
    seen = set(matched)
    every = get_change_type_file_list(inputs, all_diff_files, change_types, platform)
    return [p for p in every if p not in seen]


def set_outputs_and_get_modified_and_changed_files_status(
    all_diff_files: ChangedFiles,
    all_filtered_diff_files: ChangedFiles,
    inputs: Inputs,
    platform: Platform,
    file_patterns: list[str] | None = None,
    output_prefix: str = "",
) -> GroupStatus:
    """Write the per change type outputs of one filtered set and report its status.

    ``only_*`` and ``other_*_files`` are written only when patterns were
    supplied; ``only_*`` is true when every matching file lies inside the
    filtered set.
    """
    has_patterns = bool(file_patterns)

    for change_type in ALL_CHANGE_TYPES:
        files = get_change_type_file_list(inputs, all_filtered_diff_files, [change_type], platform)
        _set_files_output(CHANGE_TYPE_OUTPUT_NAMES[change_type], files, inputs, output_prefix)

    all_changed_and_modified = get_change_type_file_list(
        inputs, all_filtered_diff_files, ALL_CHANGE_TYPES, platform
    )
    _set_files_output("all_changed_and_modified_files", all_changed_and_modified, inputs, output_prefix)

    all_changed = get_change_type_file_list(inputs, all_filtered_diff_files, CHANGED_TYPES, platform)
    _set_files_output("all_changed_files", all_changed, inputs, output_prefix)
    set_output("any_changed", bool(all_changed), inputs, output_prefix=output_prefix)
    if has_patterns:
        other_changed = _other_files(inputs, all_diff_files, all_changed, CHANGED_TYPES, platform)
        set_output("only_changed", bool(all_changed) and not other_changed, inputs, output_prefix)
        set_array_output("other_changed_files", other_changed, inputs, output_prefix=output_prefix)

    all_modified = get_change_type_file_list(inputs, all_filtered_diff_files, MODIFIED_TYPES, platform)
    _set_files_output("all_modified_files", all_modified, inputs, output_prefix)
    set_output("any_modified", bool(all_modified), inputs, output_prefix=output_prefix)
    if has_patterns:
        other_modified = _other_files(inputs, all_diff_files, all_modified, MODIFIED_TYPES, platform)
        set_output("only_modified", bool(all_modified) and not other_modified, inputs, output_prefix)
        set_array_output("other_modified_files", other_modified, inputs, output_prefix=output_prefix)

    deleted_types = (ChangeType.DELETED,)
    deleted = get_change_type_file_list(inputs, all_filtered_diff_files, deleted_types, platform)
    set_output("any_deleted", bool(deleted), inputs, output_prefix=output_prefix)
    if has_patterns:
        other_deleted = _other_files(inputs, all_diff_files, deleted, deleted_types, platform)
        set_output("only_deleted", bool(deleted) and not other_deleted, inputs, output_prefix)
        set_array_output("other_deleted_files", other_deleted, inputs, output_prefix=output_prefix)

    return GroupStatus(any_changed=bool(all_changed), any_modified=bool(all_modified))
