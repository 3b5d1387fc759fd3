from typing import TYPE_CHECKING
import logging

from .errors import UntrackedFileWouldBeOverwritten
from .file_helpers import content_address, delete_file, list_files, read_file, write_file
from .models import Snapshot

if TYPE_CHECKING:
    from .repo_utils import Repository

logger = logging.getLogger(__name__)


def check_untracked_files(repo: "Repository", old_files: Snapshot, target_files: Snapshot) -> None:
    """Refuse to continue if moving to ``target_files`` would clobber untracked work.

    Only reads; raises before anything on disk has been touched.
    """
    overlay = repo.overlay
    for name in target_files:
        if name in old_files:
            continue
        if (repo.root / name).is_dir():
            inside = {f"{name}/{sub}" for sub in list_files(repo.root / name)}
            if not inside or any(sub not in old_files for sub in inside):
                logger.debug("directory %s is in the way", name)
                raise UntrackedFileWouldBeOverwritten()
        parts = name.split("/")
        for i in range(1, len(parts)):
            prefix = "/".join(parts[:i])
            if prefix not in old_files and (repo.root / prefix).is_file():
                logger.debug("untracked %s is in the way of %s", prefix, name)
                raise UntrackedFileWouldBeOverwritten()

    for name in list_files(repo.root, repo.ignored_names):
        if name in old_files or name not in target_files:
            continue
        current_hash = content_address(read_file(repo.root, name))
        if current_hash == target_files[name]:
            continue
        if overlay.is_staged(name) and content_address(overlay.read_staged(name)) == current_hash:
            continue
        logger.debug("untracked %s would be overwritten", name)
        raise UntrackedFileWouldBeOverwritten()

def recreate_directory(repo: "Repository", old_files: Snapshot, target_files: Snapshot) -> None:
    """Make the working directory reflect ``target_files`` instead of ``old_files``."""
    check_untracked_files(repo, old_files, target_files)

    for name, old_hash in old_files.items():
        if name not in target_files:
            delete_file(repo.root, name)
            logger.debug("deleted %s", name)
        elif target_files[name] != old_hash:
            write_file(repo.root, name, repo.objects.get_blob(target_files[name]))
            logger.debug("updated %s", name)
    for name, target_hash in target_files.items():
        if name not in old_files:
            write_file(repo.root, name, repo.objects.get_blob(target_hash))
            logger.debug("created %s", name)

    repo.overlay.clear()
