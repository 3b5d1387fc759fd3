from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING
import logging

from .commit_helpers import commit_overlay
from .errors import CannotMergeSelf, NoSuchBranch, PigletError, UncommittedChanges
from .file_helpers import write_file
from .graph_utils import find_split_point
from .models import Snapshot
from .recreatedirectory import check_untracked_files, recreate_directory
from .staging_helpers import add_file, remove_file

if TYPE_CHECKING:
    from .repo_utils import Repository

logger = logging.getLogger(__name__)

CONFLICT_START = b"<<<<<<< HEAD\n"
CONFLICT_SEPARATOR = b"=======\n"
CONFLICT_END = b">>>>>>>\n"


class Resolution(Enum):
    KEEP_HEAD = "keep"
    TAKE_OTHER = "take"
    REMOVE = "remove"
    CONFLICT = "conflict"


class MergeOutcome(Enum):
    ALREADY_MERGED = "Given branch is an ancestor of the current branch."
    FAST_FORWARD = "Current branch fast-forwarded."
    MERGED = "merged"


@dataclass
class MergeResult:
    outcome: MergeOutcome
    commit_id: str | None = None
    conflicts: list[str] | None = None

    @property
    def conflicted(self) -> bool:
        return bool(self.conflicts)


def classify(split_hash: str | None, head_hash: str | None, other_hash: str | None) -> Resolution:
    """Decide what a three-way merge does with one file.

    Each argument is the file's blob id on that side, or None when absent.
    """
    if head_hash == other_hash:
        return Resolution.KEEP_HEAD    # unchanged, same change on both sides, or deleted on both
    if head_hash == split_hash:
        return Resolution.TAKE_OTHER if other_hash is not None else Resolution.REMOVE
    if other_hash == split_hash:
        return Resolution.KEEP_HEAD
    return Resolution.CONFLICT

def classify_snapshots(split_files: Snapshot, head_files: Snapshot, other_files: Snapshot) -> dict[str, Resolution]:
    names = set(split_files) | set(head_files) | set(other_files)
    return {
        name: classify(split_files.get(name), head_files.get(name), other_files.get(name))
        for name in sorted(names)
    }

def conflict_content(head_content: bytes | None, other_content: bytes | None) -> bytes:
    return (
        CONFLICT_START
        + (head_content or b"")
        + CONFLICT_SEPARATOR
        + (other_content or b"")
        + CONFLICT_END
    )

def check_merge_preconditions(repo: "Repository", branch_name: str) -> str:
    """Everything that can refuse a merge, checked before any write. Returns the branch tip."""
    if not repo.overlay.is_empty():
        raise UncommittedChanges()
    branches = repo.refs.branches()
    if branch_name not in branches:
        raise NoSuchBranch()
    if branch_name == repo.refs.current_branch():
        raise CannotMergeSelf()
    other_commit = branches[branch_name]
    check_untracked_files(repo, repo.head_snapshot(), repo.objects.get_commit(other_commit).files)
    return other_commit

def merge_branch(repo: "Repository", branch_name: str) -> MergeResult:
    other_commit = check_merge_preconditions(repo, branch_name)
    head_commit = repo.head_commit_id()
    current_branch = repo.refs.current_branch()

    split_commit = find_split_point(repo, head_commit, other_commit)
    if split_commit is None:
        raise PigletError("no common ancestor found")
    if split_commit == other_commit:
        return MergeResult(MergeOutcome.ALREADY_MERGED)
    if split_commit == head_commit:
        recreate_directory(repo, repo.head_snapshot(), repo.objects.get_commit(other_commit).files)
        repo.refs.move_branch(current_branch, other_commit)
        logger.debug("fast-forwarded %s to %s", current_branch, other_commit[:8])
        return MergeResult(MergeOutcome.FAST_FORWARD, commit_id=other_commit)

    split_files = repo.objects.get_commit(split_commit).files
    head_files = repo.head_snapshot()
    other_files = repo.objects.get_commit(other_commit).files

    conflicts = []
    for name, resolution in classify_snapshots(split_files, head_files, other_files).items():
        logger.debug("merge %s: %s", name, resolution.value)
        if resolution is Resolution.TAKE_OTHER:
            write_file(repo.root, name, repo.objects.get_blob(other_files[name]))
            add_file(repo, name)
        elif resolution is Resolution.REMOVE:
            remove_file(repo, name)
        elif resolution is Resolution.CONFLICT:
            head_content = repo.objects.get_blob(head_files[name]) if name in head_files else None
            other_content = repo.objects.get_blob(other_files[name]) if name in other_files else None
            write_file(repo.root, name, conflict_content(head_content, other_content))
            add_file(repo, name)
            conflicts.append(name)

    merge_commit = commit_overlay(
        repo,
        f"Merged {branch_name} into {current_branch}.",
        second_parent=other_commit,
    )
    return MergeResult(MergeOutcome.MERGED, commit_id=merge_commit, conflicts=conflicts)
