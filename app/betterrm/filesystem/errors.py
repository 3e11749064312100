"""Exceptions raised by the safe deletion engine.

Every exception is scoped to a single target path; the orchestrator
turns them into one diagnostic line and a non-zero exit code for that
target without aborting sibling targets.
"""


class RemoveError(Exception):
    """Base exception for a failed removal of a single target.

    Attributes:
        path: Target path as given by the user.
        reason: Human-readable reason, used verbatim in diagnostics.
    """

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"cannot remove '{path}': {reason}")
        self.path = path
        self.reason = reason


class ProtectionViolation(RemoveError):
    """Raised when a target is a protected path or the preserved root.

    Never suppressed by force mode.
    """


class TrashMoveError(RemoveError):
    """Raised when renaming an entry into the trash directory fails.

    No copy-and-delete fallback is attempted, so a trash directory on a
    different filesystem than the target always fails with EXDEV.

    Attributes:
        destination: Trash path the entry was supposed to be renamed to.
        errno: OS error number of the failed rename, if known.
    """

    def __init__(self, path: str, destination: str, reason: str, errno: int | None = None) -> None:
        super().__init__(path, reason)
        self.args = (f"cannot trash '{path}': {reason}",)
        self.destination = destination
        self.errno = errno


class TrashDirError(Exception):
    """Raised when the trash directory cannot be used.

    Either the path exists but is not a directory, or it cannot be created.
    """
