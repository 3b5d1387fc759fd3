"""Content-addressed storage for blobs and commits.

Layout under the repository directory::

    blobs/<sha256>            gzip-compressed file content
    commits/<sha256>.json     serialized CommitInfo

Objects are immutable; putting the same content twice is a no-op that
returns the same id.
"""
from pathlib import Path
import json
import logging

from .errors import CommitNotFound, ObjectNotFound
from .file_helpers import content_address, read_compressed, write_compressed
from .models import CommitInfo

logger = logging.getLogger(__name__)

FULL_ID_LENGTH = 64


class ObjectStore:
    def __init__(self, piglet_dir: Path):
        self.blobs_dir = piglet_dir / "blobs"
        self.commits_dir = piglet_dir / "commits"

    def create_dirs(self) -> None:
        self.blobs_dir.mkdir(parents=True, exist_ok=True)
        self.commits_dir.mkdir(parents=True, exist_ok=True)

    # blobs

    def blob_path(self, blob_id: str) -> Path:
        return self.blobs_dir / blob_id

    def put_blob(self, content: bytes) -> str:
        blob_id = content_address(content)
        dest_path = self.blob_path(blob_id)
        if dest_path.exists():
            logger.debug("blob %s already stored", blob_id[:8])
            return blob_id
        write_compressed(dest_path, content)
        logger.debug("stored blob %s (%d bytes)", blob_id[:8], len(content))
        return blob_id

    def get_blob(self, blob_id: str) -> bytes:
        path = self.blob_path(blob_id)
        if not path.exists():
            raise ObjectNotFound(f"blob {blob_id} does not exist")
        return read_compressed(path)

    # commits

    def commit_path(self, commit_id: str) -> Path:
        return self.commits_dir / f"{commit_id}.json"

    def has_commit(self, commit_id: str) -> bool:
        return self.commit_path(commit_id).exists()

    def put_commit(self, info: CommitInfo) -> str:
        commit_id = content_address(info.canonical_bytes())
        dest_path = self.commit_path(commit_id)
        if dest_path.exists():
            logger.debug("commit %s already stored", commit_id[:8])
            return commit_id
        dest_path.write_text(json.dumps(info.model_dump(), indent=4))
        logger.debug("stored commit %s %r", commit_id[:8], info.message)
        return commit_id

    def get_commit(self, commit_id: str) -> CommitInfo:
        path = self.commit_path(commit_id)
        if not path.exists():
            raise CommitNotFound()
        return CommitInfo(**json.loads(path.read_text()))

    def commit_ids(self) -> list[str]:
        if not self.commits_dir.exists():
            return []
        return [path.stem for path in self.commits_dir.glob("*.json")]
