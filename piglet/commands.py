from argparse import Namespace
from datetime import datetime
from pathlib import Path
import logging

from .commit_helpers import (
    all_commits,
    commit_overlay,
    resolve_commit,
    root_commit_info,
)
from .config import PigletConfig, load_config
from .errors import (
    AlreadyInitialized,
    AlreadyOnBranch,
    FileNotInCommit,
    NoMatchingCommit,
    NoSuchCheckoutBranch,
    UnknownCommand,
    UsageError,
)
from .file_helpers import content_address, list_files, read_file, write_file
from .graph_utils import history
from .merging import MergeOutcome, merge_branch
from .models import CommitInfo
from .recreatedirectory import recreate_directory
from .repo_utils import Repository
from .staging_helpers import add_file, remove_file

logger = logging.getLogger(__name__)

COMMAND_NAMES = (
    "init", "add", "rm", "commit", "log", "global-log", "find", "status",
    "checkout", "branch", "rm-branch", "reset", "merge",
)


def run_command(args: Namespace, config: PigletConfig | None = None, cwd: Path | None = None) -> None:
    """Dispatch one parsed command. Every command but init needs an existing repository."""
    config = config or load_config()
    logger.debug("running %s", args.command)
    if args.command == "init":
        init(cwd or Path.cwd(), config)
        return
    if args.command not in COMMAND_NAMES:
        raise UnknownCommand()
    repo = Repository.find(cwd, config)

    match args.command:
        case "add":
            add(repo, args.path)
        case "rm":
            rm(repo, args.path)
        case "commit":
            commit(repo, args.message)
        case "log":
            log(repo)
        case "global-log":
            global_log(repo)
        case "find":
            find(repo, args.message)
        case "status":
            status(repo)
        case "checkout":
            checkout(repo, args.operands)
        case "branch":
            branch(repo, args.name)
        case "rm-branch":
            rm_branch(repo, args.name)
        case "reset":
            reset(repo, args.commit)
        case "merge":
            merge(repo, args.branch)


def init(root: Path, config: PigletConfig | None = None) -> Repository:
    repo = Repository(root, config)
    if repo.exists():
        raise AlreadyInitialized()
    repo.piglet_dir.mkdir(parents=True)
    repo.objects.create_dirs()
    repo.overlay.create_dirs()
    root_commit = repo.objects.put_commit(root_commit_info())
    repo.refs.initialize(repo.config.default_branch, root_commit)
    print("Initialized empty piglet repository in " + str(repo.piglet_dir))
    return repo


def add(repo: Repository, path: str) -> None:
    add_file(repo, repo.relative_name(path))


def rm(repo: Repository, path: str) -> None:
    remove_file(repo, repo.relative_name(path))


def commit(repo: Repository, message: str) -> str:
    return commit_overlay(repo, message)


def format_commit(repo: Repository, commit_hash: str, commit_info: CommitInfo) -> str:
    lines = ["===", f"commit {commit_hash}"]
    if commit_info.is_merge:
        lines.append(f"Merge: {repo.short_id(commit_info.parent)} {repo.short_id(commit_info.second_parent)}")
    date = datetime.fromtimestamp(commit_info.timestamp).astimezone()
    lines.append("Date: " + date.strftime("%a %b %d %H:%M:%S %Y %z"))
    lines.append(commit_info.message)
    return "\n".join(lines) + "\n"


def log(repo: Repository) -> None:
    for commit_hash, commit_info in history(repo, repo.head_commit_id()):
        print(format_commit(repo, commit_hash, commit_info))


def global_log(repo: Repository) -> None:
    for commit_hash, commit_info in all_commits(repo):
        print(format_commit(repo, commit_hash, commit_info))


def find(repo: Repository, message: str) -> list[str]:
    matches = [cid for cid, info in all_commits(repo) if info.message == message]
    if not matches:
        raise NoMatchingCommit()
    for commit_hash in matches:
        print(commit_hash)
    return matches


def unstaged_modifications(repo: Repository) -> list[str]:
    overlay = repo.overlay
    working_files = list_files(repo.root, repo.ignored_names)
    staged = overlay.staged()
    removed = overlay.removed()

    def working_hash(name):
        return content_address(read_file(repo.root, name))

    entries = []
    for name, tracked_hash in repo.head_snapshot().items():
        if name in staged or name in removed:
            continue
        if name not in working_files:
            entries.append(f"{name} (deleted)")
        elif working_hash(name) != tracked_hash:
            entries.append(f"{name} (modified)")
    for name in staged:
        if name not in working_files:
            entries.append(f"{name} (deleted)")
        elif working_hash(name) != content_address(overlay.read_staged(name)):
            entries.append(f"{name} (modified)")
    return sorted(entries)


def untracked_files(repo: Repository) -> list[str]:
    tracked = repo.head_snapshot()
    staged = repo.overlay.staged()
    removed = repo.overlay.removed()
    return sorted(
        name for name in list_files(repo.root, repo.ignored_names)
        if name not in staged and (name not in tracked or name in removed)
    )


def status(repo: Repository) -> None:
    current_branch = repo.refs.current_branch()
    print("=== Branches ===")
    for branch_name in sorted(repo.refs.branches()):
        prefix = "*" if branch_name == current_branch else ""
        print(f"{prefix}{branch_name}")
    print()
    sections = [
        ("Staged Files", sorted(repo.overlay.staged())),
        ("Removed Files", sorted(repo.overlay.removed())),
        ("Modifications Not Staged For Commit", unstaged_modifications(repo)),
        ("Untracked Files", untracked_files(repo)),
    ]
    for title, names in sections:
        print(f"=== {title} ===")
        for name in names:
            print(name)
        print()


def checkout(repo: Repository, operands: list[str]) -> None:
    match operands:
        case ["--", path]:
            checkout_file(repo, path)
        case [commit_id, "--", path]:
            checkout_file(repo, path, commit_id)
        case [branch_name] if branch_name != "--":
            checkout_branch(repo, branch_name)
        case _:
            raise UsageError()


def checkout_file(repo: Repository, path: str, commit_id: str | None = None) -> None:
    if commit_id is None:
        commit_info = repo.head_commit()
    else:
        _, commit_info = resolve_commit(repo, commit_id)
    name = repo.relative_name(path)
    if name not in commit_info.files:
        raise FileNotInCommit()
    write_file(repo.root, name, repo.objects.get_blob(commit_info.files[name]))


def checkout_branch(repo: Repository, branch_name: str) -> None:
    branches = repo.refs.branches()
    if branch_name not in branches:
        raise NoSuchCheckoutBranch()
    if branch_name == repo.refs.current_branch():
        raise AlreadyOnBranch()
    target_files = repo.objects.get_commit(branches[branch_name]).files
    recreate_directory(repo, repo.head_snapshot(), target_files)
    repo.refs.set_current_branch(branch_name)


def branch(repo: Repository, name: str) -> None:
    repo.refs.create_branch(name, repo.head_commit_id())


def rm_branch(repo: Repository, name: str) -> None:
    repo.refs.delete_branch(name)


def reset(repo: Repository, commit_id: str) -> None:
    commit_hash, commit_info = resolve_commit(repo, commit_id)
    recreate_directory(repo, repo.head_snapshot(), commit_info.files)
    repo.refs.move_branch(repo.refs.current_branch(), commit_hash)


def merge(repo: Repository, branch_name: str) -> None:
    result = merge_branch(repo, branch_name)
    if result.outcome is not MergeOutcome.MERGED:
        print(result.outcome.value)
    elif result.conflicted:
        print("Encountered a merge conflict.")
