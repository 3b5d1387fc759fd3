from typing import TYPE_CHECKING
import logging
import time

from .errors import CommitNotFound, MissingCommitMessage, NothingToCommit
from .models import CommitInfo, Snapshot
from .object_store import FULL_ID_LENGTH

if TYPE_CHECKING:
    from .repo_utils import Repository

logger = logging.getLogger(__name__)

ROOT_COMMIT_MESSAGE = "initial commit"
ROOT_COMMIT_TIMESTAMP = 0


def root_commit_info() -> CommitInfo:
    return CommitInfo(
        message=ROOT_COMMIT_MESSAGE,
        timestamp=ROOT_COMMIT_TIMESTAMP,
        parent=None,
        files={},
    )

def create_commit(
    repo: "Repository",
    message: str,
    parent: str | None,
    files: Snapshot,
    second_parent: str | None = None,
    timestamp: int | None = None,
) -> tuple[str, CommitInfo]:
    info = CommitInfo(
        message=message,
        timestamp=int(time.time()) if timestamp is None else timestamp,
        parent=parent,
        second_parent=second_parent,
        files=dict(files),
    )
    return repo.objects.put_commit(info), info

def resolve_commit(repo: "Repository", commit_id: str) -> tuple[str, CommitInfo]:
    """Find a commit by full id or by a unique id prefix.

    A prefix matching zero or several commits is reported as not found.
    """
    if not commit_id:
        raise CommitNotFound()
    if len(commit_id) >= FULL_ID_LENGTH:
        return commit_id, repo.objects.get_commit(commit_id)
    matches = [cid for cid in repo.objects.commit_ids() if cid.startswith(commit_id)]
    if len(matches) != 1:
        logger.debug("prefix %s matched %d commits", commit_id, len(matches))
        raise CommitNotFound()
    return matches[0], repo.objects.get_commit(matches[0])

def all_commits(repo: "Repository") -> list[tuple[str, CommitInfo]]:
    return [(cid, repo.objects.get_commit(cid)) for cid in repo.objects.commit_ids()]

def commit_overlay(repo: "Repository", message: str, second_parent: str | None = None) -> str:
    """Fold the staged and removed files into HEAD's snapshot and commit the result."""
    if not message:
        raise MissingCommitMessage()
    overlay = repo.overlay
    staged = overlay.staged()
    removed = overlay.removed()
    if not staged and not removed:
        raise NothingToCommit()

    parent_id = repo.head_commit_id()
    files = dict(repo.objects.get_commit(parent_id).files)
    for name in removed:
        files.pop(name, None)
    for name in staged:
        files[name] = repo.objects.put_blob(overlay.read_staged(name))

    new_commit_id, _ = create_commit(repo, message, parent_id, files, second_parent=second_parent)
    repo.refs.move_branch(repo.refs.current_branch(), new_commit_id)
    overlay.clear()
    logger.debug("committed %s (%d staged, %d removed)", new_commit_id[:8], len(staged), len(removed))
    return new_commit_id
