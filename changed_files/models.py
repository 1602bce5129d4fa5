from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import os


class ChangeType(str, Enum):
    ADDED = "A"
    COPIED = "C"
    DELETED = "D"
    MODIFIED = "M"
    RENAMED = "R"
    TYPE_CHANGED = "T"
    UNMERGED = "U"
    UNKNOWN = "X"

    @classmethod
    def from_git_status(cls, status: str) -> "ChangeType":
        """Map a `git diff --name-status` code (e.g. ``R100``) to a change type."""
        code = status.strip()[:1].upper()
        for member in cls:
            if member.value == code:
                return member
        return cls.UNKNOWN

    @classmethod
    def from_api_status(cls, status: str | None) -> "ChangeType":
        """Map a pull request "list files" status to a change type."""
        if status == "added":
            return cls.ADDED
        if status == "removed":
            return cls.DELETED
        if status == "modified":
            return cls.MODIFIED
        if status == "renamed":
            return cls.RENAMED
        if status == "copied":
            return cls.COPIED
        if status == "changed":
            return cls.TYPE_CHANGED
        if status == "unchanged":
            return cls.UNMERGED
        return cls.UNKNOWN


# Every change type, in output order.
ALL_CHANGE_TYPES: tuple[ChangeType, ...] = tuple(ChangeType)

# Files still present after the change.
CHANGED_TYPES: tuple[ChangeType, ...] = (
    ChangeType.ADDED,
    ChangeType.COPIED,
    ChangeType.MODIFIED,
    ChangeType.RENAMED,
)

# Changed files plus deletions.
MODIFIED_TYPES: tuple[ChangeType, ...] = (
    ChangeType.ADDED,
    ChangeType.COPIED,
    ChangeType.MODIFIED,
    ChangeType.RENAMED,
    ChangeType.DELETED,
)

ChangedFiles = dict[ChangeType, list[str]]


def new_changed_files() -> ChangedFiles:
    return {change_type: [] for change_type in ALL_CHANGE_TYPES}


def merge_changed_files(target: ChangedFiles, other: ChangedFiles) -> ChangedFiles:
    """Append every bucket of ``other`` onto ``target`` in place and return it."""
    for change_type, paths in other.items():
        target.setdefault(change_type, []).extend(paths)
    return target


@dataclass(frozen=True)
class DiffResult:
    previous_sha: str
    current_sha: str
    diff: str = "..."


@dataclass(frozen=True)
class SubmoduleRange:
    previous_sha: str | None = None
    current_sha: str | None = None

    @property
    def resolved(self) -> bool:
        return bool(self.previous_sha and self.current_sha)


@dataclass(frozen=True)
class Platform:
    is_windows: bool = False

    @classmethod
    def detect(cls) -> "Platform":
        return cls(is_windows=os.name == "nt")


@dataclass(frozen=True)
class GroupStatus:
    any_changed: bool
    any_modified: bool
