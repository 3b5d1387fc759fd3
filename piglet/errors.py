class PigletError(Exception):
    """Base class for every error reported to the user.

    The message is the fixed text printed by the CLI; raising one of these
    means the current operation did not write anything.
    """

    message = "piglet error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


# usage

class UsageError(PigletError):
    message = "Incorrect operands."

class NoCommand(UsageError):
    message = "Please enter a command."

class UnknownCommand(UsageError):
    message = "No command with that name exists."

class MissingCommitMessage(UsageError):
    message = "Please enter a commit message."


# repository state

class NotInitialized(PigletError):
    message = "Not in an initialized Piglet directory."

class AlreadyInitialized(PigletError):
    message = "A Piglet version-control system already exists in the current directory."


# lookups

class ObjectNotFound(PigletError):
    message = "No object with that id exists."

class CommitNotFound(ObjectNotFound):
    message = "No commit with that id exists."

class FileNotInCommit(PigletError):
    message = "File does not exist in that commit."


# preconditions

class FileDoesNotExist(PigletError):
    message = "File does not exist."

class NothingToRemove(PigletError):
    message = "No reason to remove the file."

class NothingToCommit(PigletError):
    message = "No changes added to the commit."

class NoMatchingCommit(PigletError):
    message = "Found no commit with that message."

class UntrackedFileWouldBeOverwritten(PigletError):
    message = "There is an untracked file in the way; delete it, or add and commit it first."

class BranchAlreadyExists(PigletError):
    message = "A branch with that name already exists."

class NoSuchBranch(PigletError):
    message = "A branch with that name does not exist."

class NoSuchCheckoutBranch(NoSuchBranch):
    message = "No such branch exists."

class AlreadyOnBranch(PigletError):
    message = "No need to checkout the current branch."

class CannotRemoveCurrentBranch(PigletError):
    message = "Cannot remove the current branch."

class UncommittedChanges(PigletError):
    message = "You have uncommitted changes."

class CannotMergeSelf(PigletError):
    message = "Cannot merge a branch with itself."
