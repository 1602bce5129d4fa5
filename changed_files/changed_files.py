"""Changed file resolution: local diffs (with submodules), renames, and PR file lists."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable
import logging

from changed_files import git_diff, github_api
from changed_files.config import Inputs
from changed_files.models import (
    ChangeType,
    ChangedFiles,
    DiffResult,
    Platform,
    SubmoduleRange,
    merge_changed_files,
    new_changed_files,
)
from changed_files.outputs import (
    json_output,
    set_array_output,
    set_outputs_and_get_modified_and_changed_files_status,
)
from changed_files.paths import replace_spaces_in_path, replace_spaces_in_paths
from changed_files.patterns import get_filtered_changed_files
from changed_files.workflow import log_group

logger = logging.getLogger(__name__)


def _submodule_ranges(
    working_directory: Path,
    diff_result: DiffResult,
    submodule_paths: Iterable[str],
    fetch_additional_submodule_history: bool,
    log: Callable[[str], None],
    fallback_message: str,
) -> Iterable[tuple[str, Path, SubmoduleRange, str]]:
    """Yield ``(path, cwd, range, diff)`` for every submodule whose revisions resolve.

    Three dot diffs are preferred; when the submodule history lacks a merge
    base the range degrades to a two dot diff and ``log`` reports it.
    """
    for submodule_path in submodule_paths:
        submodule_range = git_diff.git_submodule_diff_sha(
            working_directory,
            diff_result.previous_sha,
            diff_result.current_sha,
            submodule_path,
            diff_result.diff,
        )
        if not submodule_range.resolved:
            continue

        submodule_working_directory = working_directory / submodule_path
        diff = "..."
        if not git_diff.can_diff_commits(
            submodule_working_directory,
            submodule_range.previous_sha or "",
            submodule_range.current_sha or "",
            diff,
        ):
            message = fallback_message.format(path=submodule_path)
            if fetch_additional_submodule_history:
                message = (
                    f"To fetch additional submodule history for: {submodule_path} "
                    "you can increase history depth using 'fetch_depth' input"
                )
            log(message)
            diff = ".."

        yield submodule_path, submodule_working_directory, submodule_range, diff


def get_all_diff_files(
    working_directory: Path | str,
    diff_result: DiffResult,
    platform: Platform,
    diff_submodule: bool = False,
    submodule_paths: Iterable[str] = (),
    output_renamed_files_as_deleted_and_added: bool = False,
    fetch_additional_submodule_history: bool = False,
    fail_on_initial_diff_error: bool = False,
    fail_on_submodule_diff_error: bool = False,
) -> ChangedFiles:
    working_directory = Path(working_directory)
    files = git_diff.get_all_changed_files(
        working_directory,
        diff_result.previous_sha,
        diff_result.current_sha,
        diff_result.diff,
        platform,
        output_renamed_files_as_deleted_and_added=output_renamed_files_as_deleted_and_added,
        fail_on_error=fail_on_initial_diff_error,
    )

    if diff_submodule:
        ranges = _submodule_ranges(
            working_directory,
            diff_result,
            submodule_paths,
            fetch_additional_submodule_history,
            logger.warning,
            "Set 'fetch_additional_submodule_history: true' to fetch additional submodule history for: {path}",
        )
        for submodule_path, submodule_cwd, submodule_range, diff in ranges:
            submodule_files = git_diff.get_all_changed_files(
                submodule_cwd,
                submodule_range.previous_sha or "",
                submodule_range.current_sha or "",
                diff,
                platform,
                is_submodule=True,
                parent_dir=submodule_path,
                output_renamed_files_as_deleted_and_added=output_renamed_files_as_deleted_and_added,
                fail_on_error=fail_on_submodule_diff_error,
            )
            merge_changed_files(files, submodule_files)

    for change_type in list(files):
        files[change_type] = replace_spaces_in_paths(files[change_type])

    return files


def get_renamed_files(
    inputs: Inputs,
    working_directory: Path | str,
    diff_result: DiffResult,
    platform: Platform,
    diff_submodule: bool = False,
    submodule_paths: Iterable[str] = (),
) -> dict[str, str]:
    working_directory = Path(working_directory)
    renamed_files = git_diff.git_renamed_files(
        working_directory,
        diff_result.previous_sha,
        diff_result.current_sha,
        diff_result.diff,
        inputs.old_new_separator,
        platform,
    )

    if diff_submodule:
        ranges = _submodule_ranges(
            working_directory,
            diff_result,
            submodule_paths,
            inputs.fetch_additional_submodule_history,
            logger.info,
            "Unable to use three dot diff for: {path} submodule. Falling back to two dot diff. "
            "You can set 'fetch_additional_submodule_history: true' to fetch additional "
            "submodule history in order to use three dot diff",
        )
        for submodule_path, submodule_cwd, submodule_range, diff in ranges:
            renamed_files.extend(
                git_diff.git_renamed_files(
                    submodule_cwd,
                    submodule_range.previous_sha or "",
                    submodule_range.current_sha or "",
                    diff,
                    inputs.old_new_separator,
                    platform,
                    is_submodule=True,
                    parent_dir=submodule_path,
                )
            )

    processed = replace_spaces_in_paths(renamed_files)
    if inputs.json:
        paths = json_output(processed, should_escape=inputs.escape_json)
    else:
        paths = inputs.old_new_files_separator.join(processed)
    return {"paths": paths, "count": str(len(processed))}


def process_changed_files(
    inputs: Inputs,
    all_diff_files: ChangedFiles,
    platform: Platform,
    file_patterns: list[str],
    yaml_file_patterns: dict[str, list[str]],
) -> None:
    """Write outputs for the flat patterns, for each YAML group, or for every file."""
    if file_patterns:
        with log_group("changed-files-patterns"):
            filtered = get_filtered_changed_files(all_diff_files, file_patterns, platform)
            logger.debug("All filtered diff files: %s", filtered)
            set_outputs_and_get_modified_and_changed_files_status(
                all_diff_files,
                filtered,
                inputs,
                platform,
                file_patterns=file_patterns,
            )
            logger.info("All Done!")
        return

    if yaml_file_patterns:
        modified_keys: list[str] = []
        changed_keys: list[str] = []

        for key, patterns in yaml_file_patterns.items():
            with log_group(f"changed-files-yaml-{key}"):
                filtered = get_filtered_changed_files(all_diff_files, patterns, platform)
                logger.debug("All filtered diff files for %s: %s", key, filtered)
                status = set_outputs_and_get_modified_and_changed_files_status(
                    all_diff_files,
                    filtered,
                    inputs,
                    platform,
                    file_patterns=patterns,
                    output_prefix=key,
                )
                if status.any_modified:
                    modified_keys.append(key)
                if status.any_changed:
                    changed_keys.append(key)
                logger.info("All Done!")

        set_array_output("modified_keys", modified_keys, inputs)
        set_array_output("changed_keys", changed_keys, inputs)
        return

    with log_group("changed-files-all"):
        set_outputs_and_get_modified_and_changed_files_status(
            all_diff_files,
            all_diff_files,
            inputs,
            platform,
        )
        logger.info("All Done!")


def get_changed_files_from_github_api(
    inputs: Inputs,
    owner: str,
    repo: str,
    pr_number: int,
) -> ChangedFiles:
    changed_files = new_changed_files()

    logger.info("Getting changed files from GitHub API...")
    items = github_api.list_pull_request_files(
        inputs.api_url,
        inputs.token,
        owner,
        repo,
        pr_number,
        timeout_seconds=inputs.api_timeout_seconds,
    )

    total = 0
    for item in items:
        total += 1
        filename = replace_spaces_in_path(item.get("filename") or "")
        change_type = ChangeType.from_api_status(item.get("status"))

        if change_type is ChangeType.RENAMED and inputs.output_renamed_files_as_deleted_and_added:
            previous = replace_spaces_in_path(item.get("previous_filename") or "")
            changed_files[ChangeType.DELETED].append(previous)
            changed_files[ChangeType.ADDED].append(filename)
        else:
            changed_files[change_type].append(filename)

    logger.info("Found %d changed files from GitHub API", total)
    return changed_files
