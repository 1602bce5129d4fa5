from __future__ import annotations

from pathlib import Path
import logging
import re
import subprocess

from changed_files.models import (
    ChangeType,
    ChangedFiles,
    DiffResult,
    Platform,
    SubmoduleRange,
    new_changed_files,
)
from changed_files.paths import join_path, normalize_separators

logger = logging.getLogger(__name__)

# `git hash-object -t tree /dev/null`
EMPTY_TREE_SHA = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"

_SUBPROJECT_PREVIOUS_RE = re.compile(r"^-Subproject commit (?P<sha>\S+)", re.M)
_SUBPROJECT_CURRENT_RE = re.compile(r"^\+Subproject commit (?P<sha>\S+)", re.M)


class GitDiffError(RuntimeError):
    pass


def _run_git(args: list[str], cwd: Path | str) -> subprocess.CompletedProcess[str]:
    cmd = ["git", "-c", "core.quotepath=off", *args]
    logger.debug("Running: %s (cwd=%s)", " ".join(cmd), cwd)
    try:
        return subprocess.run(
            cmd,
            cwd=str(cwd),
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError as exc:
        raise GitDiffError("git is not installed or not available in PATH") from exc


def _prefixed(file_path: str, parent_dir: str, is_submodule: bool, platform: Platform) -> str:
    if is_submodule and parent_dir:
        return join_path(parent_dir, file_path, platform)
    return normalize_separators(file_path, platform)


def get_all_changed_files(
    cwd: Path | str,
    sha1: str,
    sha2: str,
    diff: str,
    platform: Platform,
    is_submodule: bool = False,
    parent_dir: str = "",
    output_renamed_files_as_deleted_and_added: bool = False,
    fail_on_error: bool = False,
) -> ChangedFiles:
    """Classify every file changed in ``sha1<diff>sha2`` by its git status letter."""
    args = [
        "diff",
        "--name-status",
        "--ignore-submodules=all",
        "--diff-filter=ACDMRTUX",
    ]
    if output_renamed_files_as_deleted_and_added:
        args.append("--no-renames")
    args.append(f"{sha1}{diff}{sha2}")

    proc = _run_git(args, cwd)
    changed_files = new_changed_files()

    if proc.returncode != 0:
        stderr = (proc.stderr or "").strip()
        target = f"submodule {parent_dir}" if is_submodule else "the repository"
        message = f"Failed to get changed files for {target} between {sha1}{diff}{sha2}. {stderr}".strip()
        if fail_on_error:
            raise GitDiffError(message)
        logger.warning(message)
        return changed_files

    for line in (proc.stdout or "").splitlines():
        if not line.strip():
            continue
        parts = line.split("\t")
        change_type = ChangeType.from_git_status(parts[0])
        # Renames and copies report `<status>\t<old>\t<new>`; keep the new path.
        file_path = parts[-1]
        changed_files[change_type].append(_prefixed(file_path, parent_dir, is_submodule, platform))

    return changed_files


def git_renamed_files(
    cwd: Path | str,
    sha1: str,
    sha2: str,
    diff: str,
    old_new_separator: str,
    platform: Platform,
    is_submodule: bool = False,
    parent_dir: str = "",
) -> list[str]:
    proc = _run_git(
        [
            "diff",
            "--name-status",
            "--ignore-submodules=all",
            "--diff-filter=R",
            f"{sha1}{diff}{sha2}",
        ],
        cwd,
    )
    if proc.returncode != 0:
        stderr = (proc.stderr or "").strip()
        logger.warning(stderr or f"Failed to get renamed files between {sha1}{diff}{sha2}")
        return []

    renamed: list[str] = []
    for line in (proc.stdout or "").splitlines():
        parts = line.split("\t")
        if len(parts) < 3:
            continue
        old_path = _prefixed(parts[1], parent_dir, is_submodule, platform)
        new_path = _prefixed(parts[2], parent_dir, is_submodule, platform)
        renamed.append(f"{old_path}{old_new_separator}{new_path}")
    return renamed


def git_submodule_diff_sha(
    cwd: Path | str,
    parent_sha1: str,
    parent_sha2: str,
    submodule_path: str,
    diff: str,
) -> SubmoduleRange:
    """Resolve the commits a submodule is pinned to on either side of the parent range."""
    proc = _run_git(["diff", f"{parent_sha1}{diff}{parent_sha2}", "--", submodule_path], cwd)
    if proc.returncode != 0:
        logger.debug("Unable to diff submodule %s: %s", submodule_path, (proc.stderr or "").strip())
        return SubmoduleRange()

    stdout = proc.stdout or ""
    current = _SUBPROJECT_CURRENT_RE.search(stdout)
    if not current:
        return SubmoduleRange()

    previous = _SUBPROJECT_PREVIOUS_RE.search(stdout)
    return SubmoduleRange(
        previous_sha=previous.group("sha") if previous else EMPTY_TREE_SHA,
        current_sha=current.group("sha"),
    )


def can_diff_commits(cwd: Path | str, sha1: str, sha2: str, diff: str) -> bool:
    if diff == "...":
        proc = _run_git(["merge-base", sha1, sha2], cwd)
    else:
        proc = _run_git(
            ["diff", "--name-only", "--ignore-submodules=all", f"{sha1}{diff}{sha2}"],
            cwd,
        )
    if proc.returncode != 0:
        logger.debug("Cannot diff %s%s%s: %s", sha1, diff, sha2, (proc.stderr or "").strip())
        return False
    return True


def get_submodule_paths(cwd: Path | str) -> list[str]:
    proc = _run_git(["submodule", "status", "--recursive"], cwd)
    if proc.returncode != 0:
        logger.warning((proc.stderr or "").strip() or "Failed to list submodules")
        return []

    paths: list[str] = []
    for line in (proc.stdout or "").splitlines():
        # `[ +-U]<sha> <path> (<describe>)`
        parts = line[1:].strip().split()
        if len(parts) >= 2:
            paths.append(parts[1])
    return paths


def _rev_parse(cwd: Path | str, rev: str) -> str:
    proc = _run_git(["rev-parse", "--verify", f"{rev}^{{commit}}"], cwd)
    if proc.returncode != 0:
        stderr = (proc.stderr or "").strip()
        raise GitDiffError(
            f"Failed to resolve revision '{rev}'. {stderr or 'Check git history and ref availability.'}"
        )
    return proc.stdout.strip()


def resolve_diff_result(cwd: Path | str, base_sha: str = "", sha: str = "") -> DiffResult:
    current_sha = _rev_parse(cwd, sha or "HEAD")
    previous_sha = _rev_parse(cwd, base_sha or f"{current_sha}^")

    diff = "..."
    if not can_diff_commits(cwd, previous_sha, current_sha, diff):
        logger.info(
            "Unable to find a merge base between %s and %s. Falling back to two dot diff.",
            previous_sha,
            current_sha,
        )
        diff = ".."

    logger.debug("Resolved diff range: %s%s%s", previous_sha, diff, current_sha)
    return DiffResult(previous_sha=previous_sha, current_sha=current_sha, diff=diff)
