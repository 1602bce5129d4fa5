from __future__ import annotations

from pathlib import Path
from typing import Iterable

import yaml
from wcmatch import glob

from changed_files.config import Inputs
from changed_files.models import ChangedFiles, Platform, new_changed_files
from changed_files.paths import to_posix_path


def split_patterns(text: str, separator: str = "\n") -> list[str]:
    """Split a raw input into patterns, dropping blanks and ``#`` comments."""
    if not text:
        return []
    chunks = text.split(separator) if separator else [text]
    out: list[str] = []
    for chunk in chunks:
        for raw in chunk.splitlines() or [chunk]:
            p = raw.strip()
            if not p or p.startswith("#"):
                continue
            out.append(p)
    return out


def parse_yaml_patterns(text: str) -> dict[str, list[str]]:
    """Parse ``group: [patterns]`` YAML into an ordered mapping of pattern lists."""
    data = yaml.safe_load(text) if text and text.strip() else None
    if not data:
        return {}
    if not isinstance(data, dict):
        raise ValueError("files_yaml must be a mapping of group name to patterns")

    groups: dict[str, list[str]] = {}
    for key, value in data.items():
        if isinstance(value, str):
            patterns = split_patterns(value)
        elif isinstance(value, list):
            patterns = [str(x).strip() for x in value if str(x).strip()]
        else:
            raise ValueError(f"files_yaml group '{key}' must be a string or a list of patterns")
        groups[str(key)] = patterns
    return groups


GLOB_FLAGS = glob.GLOBSTAR | glob.DOTGLOB | glob.BRACE | glob.FORCEUNIX


def _matches(file_path: str, patterns: list[str]) -> bool:
    if not patterns:
        return False
    if glob.globmatch(file_path, patterns, flags=GLOB_FLAGS):
        return True
    # `dir/**` also covers `dir` itself.
    return any(p.endswith("/**") and file_path == p[:-3] for p in patterns)


def is_match(file_path: str, patterns: Iterable[str], platform: Platform) -> bool:
    """Case-sensitive glob match; ``!pattern`` entries exclude, dot files are matched."""
    rel = to_posix_path(file_path) if platform.is_windows else file_path
    positives: list[str] = []
    negatives: list[str] = []
    for pattern in patterns:
        p = pattern.strip()
        if not p:
            continue
        if p.startswith("!"):
            negatives.append(to_posix_path(p[1:]) if platform.is_windows else p[1:])
        else:
            positives.append(to_posix_path(p) if platform.is_windows else p)

    if positives:
        included = _matches(rel, positives)
    else:
        included = bool(negatives)
    if not included:
        return False
    return not _matches(rel, negatives)


def get_filtered_changed_files(
    all_diff_files: ChangedFiles,
    file_patterns: list[str],
    platform: Platform,
) -> ChangedFiles:
    filtered = new_changed_files()
    for change_type, paths in all_diff_files.items():
        filtered[change_type] = [p for p in paths if is_match(p, file_patterns, platform)]
    return filtered


def get_file_patterns(inputs: Inputs) -> list[str]:
    """Combine ``files`` and ``files_ignore`` into one list; ignores become ``!`` patterns."""
    patterns = split_patterns(inputs.files, inputs.files_separator)
    for p in split_patterns(inputs.files_ignore, inputs.files_ignore_separator):
        patterns.append(p if p.startswith("!") else f"!{p}")
    return patterns


def get_yaml_file_patterns(inputs: Inputs, root: Path) -> dict[str, list[str]]:
    groups = parse_yaml_patterns(inputs.files_yaml)

    sources = split_patterns(inputs.files_yaml_from_source_file, inputs.files_yaml_from_source_file_separator)
    for source in sources:
        source_path = root / source
        if not source_path.exists():
            raise FileNotFoundError(f"files_yaml_from_source_file not found: {source}")
        for key, patterns in parse_yaml_patterns(source_path.read_text()).items():
            groups.setdefault(key, []).extend(patterns)

    return groups
