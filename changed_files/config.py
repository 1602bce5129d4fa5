from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any
import json
import os


TRUE_VALUES = {"true", "1", "yes", "on"}
FALSE_VALUES = {"false", "0", "no", "off", ""}


@dataclass
class Inputs:
    path: str = "."
    files: str = ""
    files_separator: str = "\n"
    files_ignore: str = ""
    files_ignore_separator: str = "\n"
    files_yaml: str = ""
    files_yaml_from_source_file: str = ""
    files_yaml_from_source_file_separator: str = "\n"
    separator: str = " "
    old_new_separator: str = ","
    old_new_files_separator: str = " "
    include_all_old_new_renamed_files: bool = False
    json: bool = False
    escape_json: bool = True
    dir_names: bool = False
    dir_names_max_depth: int | None = None
    dir_names_exclude_current_dir: bool = False
    dir_names_include_files: str = ""
    dir_names_include_files_separator: str = "\n"
    use_posix_path_separator: bool = False
    output_renamed_files_as_deleted_and_added: bool = False
    fetch_additional_submodule_history: bool = False
    fail_on_initial_diff_error: bool = False
    fail_on_submodule_diff_error: bool = False
    write_output_files: bool = False
    output_dir: str = ".github/outputs"
    base_sha: str = ""
    sha: str = ""
    token: str = ""
    api_url: str = "https://api.github.com"
    api_timeout_seconds: int = 30
    use_rest_api: bool = False


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def load_env_file(path: Path) -> list[str]:
    """Seed environment variables such as ``INPUT_*`` from a local ``.env`` file.

    Variables already present in the environment are left alone. Quoted values
    keep their inner whitespace so a separator such as ``' '`` survives.
    Returns the names that were set.
    """
    if not path.is_file():
        return []

    applied: list[str] = []
    for line in path.read_text(errors="ignore").splitlines():
        line = line.strip()
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        name, eq, raw_value = line.partition("=")
        name = name.strip()
        if not eq or not name or name.startswith("#") or name in os.environ:
            continue
        os.environ[name] = _unquote(raw_value.strip())
        applied.append(name)
    return applied


def _env_name(name: str) -> str:
    return f"INPUT_{name.upper()}"


def _get_str(name: str, default: str) -> str:
    value = os.getenv(_env_name(name))
    if value is None:
        return default
    return value


def _get_bool(name: str, default: bool) -> bool:
    value = os.getenv(_env_name(name))
    if value is None:
        return default
    text = value.strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise ValueError(f"Input '{name}' must be a boolean, got: {value!r}")


def _get_int(name: str, default: int | None) -> int | None:
    value = (os.getenv(_env_name(name)) or "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"Input '{name}' must be an integer, got: {value!r}") from exc


def load_inputs(**overrides: Any) -> Inputs:
    """Read action inputs from ``INPUT_*`` environment variables.

    Keyword overrides that are not None win over the environment (used by the CLI).
    """
    defaults = Inputs()
    inputs = Inputs(
        path=_get_str("path", defaults.path) or defaults.path,
        files=_get_str("files", defaults.files),
        files_separator=_get_str("files_separator", defaults.files_separator),
        files_ignore=_get_str("files_ignore", defaults.files_ignore),
        files_ignore_separator=_get_str("files_ignore_separator", defaults.files_ignore_separator),
        files_yaml=_get_str("files_yaml", defaults.files_yaml),
        files_yaml_from_source_file=_get_str("files_yaml_from_source_file", defaults.files_yaml_from_source_file),
        files_yaml_from_source_file_separator=_get_str(
            "files_yaml_from_source_file_separator", defaults.files_yaml_from_source_file_separator
        ),
        separator=_get_str("separator", defaults.separator),
        old_new_separator=_get_str("old_new_separator", defaults.old_new_separator),
        old_new_files_separator=_get_str("old_new_files_separator", defaults.old_new_files_separator),
        include_all_old_new_renamed_files=_get_bool(
            "include_all_old_new_renamed_files", defaults.include_all_old_new_renamed_files
        ),
        json=_get_bool("json", defaults.json),
        escape_json=_get_bool("escape_json", defaults.escape_json),
        dir_names=_get_bool("dir_names", defaults.dir_names),
        dir_names_max_depth=_get_int("dir_names_max_depth", defaults.dir_names_max_depth),
        dir_names_exclude_current_dir=_get_bool("dir_names_exclude_current_dir", defaults.dir_names_exclude_current_dir),
        dir_names_include_files=_get_str("dir_names_include_files", defaults.dir_names_include_files),
        dir_names_include_files_separator=_get_str(
            "dir_names_include_files_separator", defaults.dir_names_include_files_separator
        ),
        use_posix_path_separator=_get_bool("use_posix_path_separator", defaults.use_posix_path_separator),
        output_renamed_files_as_deleted_and_added=_get_bool(
            "output_renamed_files_as_deleted_and_added", defaults.output_renamed_files_as_deleted_and_added
        ),
        fetch_additional_submodule_history=_get_bool(
            "fetch_additional_submodule_history", defaults.fetch_additional_submodule_history
        ),
        fail_on_initial_diff_error=_get_bool("fail_on_initial_diff_error", defaults.fail_on_initial_diff_error),
        fail_on_submodule_diff_error=_get_bool("fail_on_submodule_diff_error", defaults.fail_on_submodule_diff_error),
        write_output_files=_get_bool("write_output_files", defaults.write_output_files),
        output_dir=_get_str("output_dir", defaults.output_dir) or defaults.output_dir,
        base_sha=_get_str("base_sha", defaults.base_sha),
        sha=_get_str("sha", defaults.sha),
        token=_get_str("token", "") or os.getenv("GITHUB_TOKEN", ""),
        api_url=_get_str("api_url", "") or os.getenv("GITHUB_API_URL", defaults.api_url),
        api_timeout_seconds=_get_int("api_timeout_seconds", defaults.api_timeout_seconds) or defaults.api_timeout_seconds,
        use_rest_api=_get_bool("use_rest_api", defaults.use_rest_api),
    )

    if inputs.dir_names_max_depth is not None and inputs.dir_names_max_depth < 0:
        raise ValueError("Input 'dir_names_max_depth' must be a positive integer")

    for key, value in overrides.items():
        if value is None:
            continue
        if not hasattr(inputs, key):
            raise ValueError(f"Unknown input: {key}")
        setattr(inputs, key, value)

    return inputs


def load_event_payload() -> dict[str, Any]:
    """Return the webhook payload of the triggering event, or {} outside a workflow."""
    event_path = os.getenv("GITHUB_EVENT_PATH")
    if not event_path:
        return {}
    path = Path(event_path)
    if not path.exists():
        return {}
    return json.loads(path.read_text()) or {}


def get_repository() -> tuple[str, str]:
    repository = os.getenv("GITHUB_REPOSITORY", "")
    if "/" not in repository:
        raise ValueError("GITHUB_REPOSITORY must be set as '<owner>/<repo>'")
    owner, repo = repository.split("/", 1)
    return owner, repo
