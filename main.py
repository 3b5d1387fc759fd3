import sys
import logging

import argparse
from pydantic import ValidationError

from piglet.commands import COMMAND_NAMES, run_command
from piglet.config import load_config
from piglet.errors import NoCommand, PigletError, UnknownCommand, UsageError

logger = logging.getLogger("piglet")


class PigletArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        raise UsageError()


def build_parser() -> argparse.ArgumentParser:
    parser = PigletArgumentParser(prog="piglet", description="Piglet CLI")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # init command
    subparsers.add_parser("init", help="Initialize a new piglet repository")

    # add command
    add_parser = subparsers.add_parser("add", help="Stage a file for the next commit")
    add_parser.add_argument("path", help="File to add")

    # rm command
    rm_parser = subparsers.add_parser("rm", help="Unstage a file or stage its removal")
    rm_parser.add_argument("path", help="File to remove")

    # commit command
    commit_parser = subparsers.add_parser("commit", help="Commit staged changes")
    commit_parser.add_argument("message", nargs="?", default="", help="Commit message")

    # log commands
    subparsers.add_parser("log", help="Show the history of the current branch")
    subparsers.add_parser("global-log", help="Show every commit ever made")

    # find command
    find_parser = subparsers.add_parser("find", help="Print ids of commits with the given message")
    find_parser.add_argument("message", help="Exact commit message")

    # status command
    subparsers.add_parser("status", help="Show branches, staged and removed files")

    # checkout command
    checkout_parser = subparsers.add_parser(
        "checkout",
        help="Restore a file (`-- FILE`, `COMMIT -- FILE`) or switch branches (`BRANCH`)",
    )
    checkout_parser.add_argument("operands", nargs=argparse.REMAINDER)

    # branch commands
    branch_parser = subparsers.add_parser("branch", help="Create a branch at the current commit")
    branch_parser.add_argument("name", help="Branch name")
    rm_branch_parser = subparsers.add_parser("rm-branch", help="Delete a branch pointer")
    rm_branch_parser.add_argument("name", help="Branch name")

    # reset command
    reset_parser = subparsers.add_parser("reset", help="Move the current branch to a commit")
    reset_parser.add_argument("commit", help="Commit id or unique prefix")

    # merge command
    merge_parser = subparsers.add_parser("merge", help="Merge a branch into the current branch")
    merge_parser.add_argument("branch", help="Branch name to merge from")

    return parser


def parse_args(argv: list[str]) -> argparse.Namespace:
    operands = [arg for arg in argv if arg not in ("-v", "--verbose")]
    if not operands:
        raise NoCommand()
    if operands[0] not in COMMAND_NAMES and not operands[0].startswith("-"):
        raise UnknownCommand()
    return build_parser().parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    try:
        config = load_config()
    except ValidationError as e:
        print(f"Invalid configuration: {e.errors()[0]['msg']}")
        return 1
    level = logging.DEBUG if "-v" in argv[:1] or "--verbose" in argv[:1] else config.log_level
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        run_command(parse_args(argv), config)
    except PigletError as e:
        print(e)
    except OSError:
        logger.exception("I/O failure")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
