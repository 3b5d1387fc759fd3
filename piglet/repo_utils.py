from pathlib import Path
import logging

from .branching import RefStore
from .config import PigletConfig, load_config
from .errors import FileDoesNotExist, NotInitialized
from .models import CommitInfo, Snapshot
from .object_store import ObjectStore
from .staging_helpers import StagingArea

logger = logging.getLogger(__name__)


def find_piglet_root_dir(start: Path | None = None, repo_dir_name: str = ".piglet") -> Path | None:
    start = Path.cwd() if start is None else start
    for directory in [start] + list(start.parents):
        if (directory / repo_dir_name).is_dir():
            return directory
        if directory == Path.home():    # won't look past home directory
            return None
    return None


class Repository:
    """One repository root and the stores that live under its piglet directory."""

    def __init__(self, root: Path, config: PigletConfig | None = None):
        self.config = config or load_config()
        self.root = Path(root)
        self.piglet_dir = self.root / self.config.repo_dir_name
        self.objects = ObjectStore(self.piglet_dir)
        self.refs = RefStore(self.piglet_dir / "refs.json", self.objects.has_commit)
        self.overlay = StagingArea(self.piglet_dir)

    @classmethod
    def find(cls, start: Path | None = None, config: PigletConfig | None = None) -> "Repository":
        config = config or load_config()
        root = find_piglet_root_dir(start, config.repo_dir_name)
        if root is None:
            raise NotInitialized()
        logger.debug("using repository at %s", root)
        return cls(root, config)

    def exists(self) -> bool:
        return self.piglet_dir.is_dir()

    @property
    def ignored_names(self) -> set[str]:
        return {self.config.repo_dir_name}

    def relative_name(self, path: str | Path) -> str:
        """Turn a user-supplied path into the tracked name relative to the root."""
        full_path = (Path.cwd() / path).resolve()
        try:
            return full_path.relative_to(self.root.resolve()).as_posix()
        except ValueError:
            raise FileDoesNotExist()

    def head_commit_id(self) -> str:
        return self.refs.head_commit_id()

    def head_commit(self) -> CommitInfo:
        return self.objects.get_commit(self.head_commit_id())

    def head_snapshot(self) -> Snapshot:
        return dict(self.head_commit().files)

    def short_id(self, commit_id: str | None) -> str:
        return (commit_id or "")[:self.config.short_id_length]
