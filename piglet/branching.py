from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator
import fcntl
import logging
import os
import tempfile

from .errors import (
    BranchAlreadyExists,
    CannotRemoveCurrentBranch,
    CommitNotFound,
    NoSuchBranch,
    PigletError,
)
from .models import RefTable

logger = logging.getLogger(__name__)


class RefStore:
    """Branch pointers plus the HEAD indicator, kept in a single JSON file.

    Every mutation is a full read-modify-write under an exclusive lock, and
    the new table replaces the old one atomically.
    """

    def __init__(self, refs_path: Path, commit_exists: Callable[[str], bool]):
        self.refs_path = refs_path
        self.lock_path = refs_path.with_name(refs_path.name + ".lock")
        self.commit_exists = commit_exists

    def read(self) -> RefTable:
        if not self.refs_path.exists():
            raise PigletError("reference table does not exist")
        return RefTable.model_validate_json(self.refs_path.read_text())

    def write(self, table: RefTable) -> None:
        tmp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                "w", dir=self.refs_path.parent, prefix=".refs-", delete=False
            ) as f:
                tmp_path = Path(f.name)
                f.write(table.model_dump_json(indent=4))
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.refs_path)
            tmp_path = None
        finally:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)

    @contextmanager
    def transaction(self) -> Iterator[RefTable]:
        """Yield the current table; it is written back if the block exits cleanly."""
        with open(self.lock_path, "a") as lock_file:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
            try:
                table = self.read()
                yield table
                self.write(table)
            finally:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)

    def initialize(self, branch_name: str, commit_id: str) -> None:
        self.write(RefTable(head=branch_name, branches={branch_name: commit_id}))

    # queries

    def branches(self) -> dict[str, str]:
        return dict(self.read().branches)

    def current_branch(self) -> str:
        return self.read().head

    def head_commit_id(self) -> str:
        table = self.read()
        if table.head not in table.branches:
            raise PigletError(f"HEAD names missing branch '{table.head}'")
        return table.branches[table.head]

    # mutations

    def create_branch(self, branch_name: str, commit_id: str) -> None:
        self._require_commit(commit_id)
        with self.transaction() as table:
            if branch_name in table.branches:
                raise BranchAlreadyExists()
            table.branches[branch_name] = commit_id
        logger.debug("created branch %s at %s", branch_name, commit_id[:8])

    def move_branch(self, branch_name: str, commit_id: str) -> None:
        self._require_commit(commit_id)
        with self.transaction() as table:
            table.branches[branch_name] = commit_id
        logger.debug("moved branch %s to %s", branch_name, commit_id[:8])

    def delete_branch(self, branch_name: str) -> None:
        with self.transaction() as table:
            if branch_name not in table.branches:
                raise NoSuchBranch()
            if table.head == branch_name:
                raise CannotRemoveCurrentBranch()
            del table.branches[branch_name]
        logger.debug("deleted branch %s", branch_name)

    def set_current_branch(self, branch_name: str) -> None:
        with self.transaction() as table:
            if branch_name not in table.branches:
                raise NoSuchBranch()
            table.head = branch_name
        logger.debug("HEAD -> %s", branch_name)

    def _require_commit(self, commit_id: str) -> None:
        if not self.commit_exists(commit_id):
            raise CommitNotFound()
