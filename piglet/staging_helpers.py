from pathlib import Path
from typing import TYPE_CHECKING
import logging
import shutil

from .errors import FileDoesNotExist, NothingToRemove
from .file_helpers import content_address, delete_file, list_files, read_file, write_file

if TYPE_CHECKING:
    from .repo_utils import Repository

logger = logging.getLogger(__name__)


class StagingArea:
    """Pending changes between commits.

    ``staging/<name>`` holds the raw content staged for addition and
    ``removal/<name>`` the last tracked content of a file staged for removal,
    kept so that ``add`` can undo the removal.
    """

    def __init__(self, piglet_dir: Path):
        self.staging_dir = piglet_dir / "staging"
        self.removal_dir = piglet_dir / "removal"

    def create_dirs(self) -> None:
        self.staging_dir.mkdir(parents=True, exist_ok=True)
        self.removal_dir.mkdir(parents=True, exist_ok=True)

    def staged(self) -> set[str]:
        return list_files(self.staging_dir)

    def removed(self) -> set[str]:
        return list_files(self.removal_dir)

    def is_empty(self) -> bool:
        return not self.staged() and not self.removed()

    def read_staged(self, name: str) -> bytes:
        return read_file(self.staging_dir, name)

    def read_removed(self, name: str) -> bytes:
        return read_file(self.removal_dir, name)

    def is_staged(self, name: str) -> bool:
        return (self.staging_dir / name).is_file()

    def is_removed(self, name: str) -> bool:
        return (self.removal_dir / name).is_file()

    def stage(self, name: str, content: bytes) -> None:
        write_file(self.staging_dir, name, content)

    def unstage(self, name: str) -> bool:
        if not self.is_staged(name):
            return False
        delete_file(self.staging_dir, name)
        return True

    def mark_removed(self, name: str, content: bytes) -> None:
        write_file(self.removal_dir, name, content)

    def unmark_removed(self, name: str) -> None:
        delete_file(self.removal_dir, name)

    def clear(self) -> None:
        for directory in (self.staging_dir, self.removal_dir):
            if directory.exists():
                shutil.rmtree(directory)
            directory.mkdir(parents=True)


def add_file(repo: "Repository", name: str) -> None:
    overlay = repo.overlay
    if overlay.is_removed(name):
        # undo of a previous rm: put the rescued content back
        write_file(repo.root, name, overlay.read_removed(name))
        overlay.unmark_removed(name)
        logger.debug("restored %s from removal area", name)
        return

    if not (repo.root / name).is_file():
        raise FileDoesNotExist()

    content = read_file(repo.root, name)
    tracked_id = repo.head_snapshot().get(name)
    if tracked_id is not None and tracked_id == content_address(content):
        if overlay.unstage(name):
            logger.debug("%s matches HEAD, unstaged", name)
        return
    overlay.stage(name, content)
    logger.debug("staged %s", name)


def remove_file(repo: "Repository", name: str) -> None:
    overlay = repo.overlay
    acted = overlay.unstage(name)

    tracked_id = repo.head_snapshot().get(name)
    if tracked_id is not None:
        overlay.mark_removed(name, repo.objects.get_blob(tracked_id))
        delete_file(repo.root, name)
        acted = True

    if not acted:
        raise NothingToRemove()
    logger.debug("removed %s", name)
