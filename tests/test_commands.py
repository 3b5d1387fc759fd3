from argparse import Namespace

import pytest

from piglet import commands
from piglet.errors import (
    AlreadyInitialized,
    AlreadyOnBranch,
    CommitNotFound,
    FileDoesNotExist,
    FileNotInCommit,
    NoMatchingCommit,
    NoSuchCheckoutBranch,
    NotInitialized,
    UsageError,
)

from conftest import commit_files, read, write


def test_init_twice_fails(repo) -> None:
    with pytest.raises(AlreadyInitialized):
        commands.init(repo.root)


def test_commands_need_a_repository(tmp_path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    with pytest.raises(NotInitialized):
        commands.run_command(Namespace(command="status"), cwd=tmp_path)


def test_run_command_dispatches(repo, capsys) -> None:
    write(repo, "f", "x")
    commands.run_command(Namespace(command="add", path="f"), cwd=repo.root)
    commands.run_command(Namespace(command="commit", message="via dispatch"), cwd=repo.root)
    capsys.readouterr()

    commands.run_command(Namespace(command="find", message="via dispatch"), cwd=repo.root)

    assert capsys.readouterr().out == repo.head_commit_id() + "\n"


def test_log_prints_first_parent_chain(repo, capsys) -> None:
    first = commit_files(repo, "one", f="1")
    second = commit_files(repo, "two", f="2")
    capsys.readouterr()

    commands.log(repo)

    out = capsys.readouterr().out
    entries = out.split("===\n")[1:]
    assert [entry.splitlines()[0] for entry in entries[:2]] == [f"commit {second}", f"commit {first}"]
    assert entries[0].splitlines()[2] == "two"
    assert entries[-1].splitlines()[2] == "initial commit"
    assert "Merge:" not in out


def test_log_shows_both_parents_of_merge(repo, capsys) -> None:
    commit_files(repo, "split", a="1")
    commands.branch(repo, "other")
    head = commit_files(repo, "head side", b="2")
    commands.checkout_branch(repo, "other")
    other = commit_files(repo, "other side", a="3")
    commands.checkout_branch(repo, "master")
    commands.merge(repo, "other")
    capsys.readouterr()

    commands.log(repo)

    first_entry = capsys.readouterr().out.split("===\n")[1].splitlines()
    assert first_entry[1] == f"Merge: {head[:7]} {other[:7]}"
    assert first_entry[2].startswith("Date: ")
    assert first_entry[3] == "Merged other into master."


def test_global_log_lists_every_commit(repo, capsys) -> None:
    commands.branch(repo, "other")
    commit_files(repo, "on master", f="1")
    commands.checkout_branch(repo, "other")
    commit_files(repo, "on other", g="1")
    capsys.readouterr()

    commands.global_log(repo)

    out = capsys.readouterr().out
    assert out.count("===\n") == 3
    assert "on master" in out and "on other" in out


def test_find(repo, capsys) -> None:
    commit_files(repo, "same", f="1")
    commit_files(repo, "same", f="2")
    commit_files(repo, "different", f="3")
    capsys.readouterr()

    matches = commands.find(repo, "same")

    assert len(matches) == 2
    assert set(capsys.readouterr().out.split()) == set(matches)
    with pytest.raises(NoMatchingCommit):
        commands.find(repo, "missing")


def test_status(repo, capsys) -> None:
    commit_files(repo, "c1", tracked="t", gone="g", edited="e", deleted="d")
    commands.branch(repo, "zeta")
    commands.branch(repo, "alpha")
    commands.rm(repo, "gone")
    write(repo, "new", "n")
    commands.add(repo, "new")
    write(repo, "edited", "changed")
    (repo.root / "deleted").unlink()
    write(repo, "stray", "s")
    capsys.readouterr()

    commands.status(repo)

    assert capsys.readouterr().out == (
        "=== Branches ===\n"
        "alpha\n"
        "*master\n"
        "zeta\n"
        "\n"
        "=== Staged Files ===\n"
        "new\n"
        "\n"
        "=== Removed Files ===\n"
        "gone\n"
        "\n"
        "=== Modifications Not Staged For Commit ===\n"
        "deleted (deleted)\n"
        "edited (modified)\n"
        "\n"
        "=== Untracked Files ===\n"
        "stray\n"
        "\n"
    )


def test_checkout_file_from_head(repo) -> None:
    commit_files(repo, "c1", f="committed")
    write(repo, "f", "scribbled")

    commands.checkout(repo, ["--", "f"])

    assert read(repo, "f") == "committed"


def test_checkout_file_from_commit_prefix(repo) -> None:
    first = commit_files(repo, "c1", f="old")
    commit_files(repo, "c2", f="new")

    commands.checkout(repo, [first[:6], "--", "f"])

    assert read(repo, "f") == "old"
    assert repo.overlay.is_empty()


def test_checkout_file_errors(repo) -> None:
    commit_files(repo, "c1", f="x")
    with pytest.raises(FileNotInCommit):
        commands.checkout(repo, ["--", "nope"])
    with pytest.raises(CommitNotFound):
        commands.checkout(repo, ["0" * 10, "--", "f"])
    with pytest.raises(UsageError):
        commands.checkout(repo, ["a", "++", "f"])
    with pytest.raises(UsageError):
        commands.checkout(repo, [])


def test_checkout_branch_errors(repo) -> None:
    with pytest.raises(NoSuchCheckoutBranch):
        commands.checkout(repo, ["nope"])
    with pytest.raises(AlreadyOnBranch):
        commands.checkout(repo, ["master"])


def test_checkout_branch_switches_files_and_head(repo) -> None:
    commit_files(repo, "c1", f="master")
    commands.branch(repo, "other")
    commands.checkout(repo, ["other"])
    commit_files(repo, "c2", f="other", g="only other")

    commands.checkout(repo, ["master"])

    assert repo.refs.current_branch() == "master"
    assert read(repo, "f") == "master"
    assert not (repo.root / "g").exists()


def test_reset_moves_current_branch(repo) -> None:
    first = commit_files(repo, "c1", f="1")
    commit_files(repo, "c2", f="2", g="extra")
    write(repo, "h", "pending")
    commands.add(repo, "h")

    commands.reset(repo, first[:8])

    assert repo.refs.current_branch() == "master"
    assert repo.head_commit_id() == first
    assert read(repo, "f") == "1"
    assert not (repo.root / "g").exists()
    assert repo.overlay.is_empty()


def test_reset_unknown_commit(repo) -> None:
    before = repo.refs.refs_path.read_text()
    with pytest.raises(CommitNotFound):
        commands.reset(repo, "deadbeef")
    assert repo.refs.refs_path.read_text() == before


def test_branch_and_rm_branch(repo) -> None:
    commit_files(repo, "c1", f="1")
    commands.branch(repo, "dev")
    assert repo.refs.branches()["dev"] == repo.head_commit_id()

    commands.rm_branch(repo, "dev")
    assert "dev" not in repo.refs.branches()
    assert read(repo, "f") == "1"


def test_paths_outside_the_repository_are_rejected(repo) -> None:
    commit_files(repo, "c1", f="x")
    outside = repo.root.parent / "outside"
    outside.write_text("not ours")

    with pytest.raises(FileDoesNotExist):
        commands.add(repo, "../outside")
    with pytest.raises(FileDoesNotExist):
        commands.checkout(repo, ["--", "../outside"])

    assert outside.read_text() == "not ours"
    assert repo.overlay.is_empty()
