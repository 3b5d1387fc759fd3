from pathlib import Path

import pytest

from piglet import commands
from piglet.config import PigletConfig
from piglet.repo_utils import Repository


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("PIGLET_REPO_DIR_NAME", "PIGLET_DEFAULT_BRANCH", "PIGLET_SHORT_ID_LENGTH", "PIGLET_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def repo(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Repository:
    """An initialized repository in tmp_path, which is also the cwd."""
    monkeypatch.chdir(tmp_path)
    return commands.init(tmp_path, PigletConfig())


def write(repo: Repository, name: str, content: str) -> None:
    path = repo.root / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


def read(repo: Repository, name: str) -> str:
    return (repo.root / name).read_text()


def commit_files(repo: Repository, message: str, **files: str) -> str:
    """Write, add and commit the given files; returns the new commit id."""
    for name, content in files.items():
        write(repo, name, content)
        commands.add(repo, name)
    return commands.commit(repo, message)
