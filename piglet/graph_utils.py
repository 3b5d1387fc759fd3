from collections import deque
from typing import TYPE_CHECKING, Iterator

from .models import CommitInfo

if TYPE_CHECKING:
    from .repo_utils import Repository


def history(repo: "Repository", start: str) -> Iterator[tuple[str, CommitInfo]]:
    """First-parent chain from ``start`` back to the root commit."""
    commit_hash = start
    while commit_hash:
        commit_info = repo.objects.get_commit(commit_hash)
        yield commit_hash, commit_info
        commit_hash = commit_info.parent

def ancestors_bfs(repo: "Repository", start: str) -> list[str]:
    """Every ancestor of ``start`` (itself included) in breadth-first discovery order.

    Both parents of merge commits are followed, first parent first.
    """
    discovered = [start]
    seen = {start}
    queue = deque([start])
    while queue:
        commit_info = repo.objects.get_commit(queue.popleft())
        for parent_hash in (commit_info.parent, commit_info.second_parent):
            if parent_hash is None or parent_hash in seen:
                continue
            seen.add(parent_hash)
            discovered.append(parent_hash)
            queue.append(parent_hash)
    return discovered

def find_split_point(repo: "Repository", head_commit: str, other_commit: str) -> str | None:
    """First commit in HEAD's discovery order that the other side also reaches.

    This is the first meeting of the two searches, not necessarily the
    lowest common ancestor when criss-cross merges are involved.
    """
    other_ancestors = set(ancestors_bfs(repo, other_commit))
    for commit_hash in ancestors_bfs(repo, head_commit):
        if commit_hash in other_ancestors:
            return commit_hash
    return None
