"""Deletion outcome models.

This module defines the action tags and per-entry results produced by
the deletion pipeline and consumed by the audit logger.
"""

from dataclasses import dataclass
from enum import Enum


class DeletionAction(str, Enum):
    """Kind of filesystem mutation attempted on an entry.

    Attributes:
        DELETE: File or symlink unlinked.
        DELETE_DIR: Empty directory removed.
        TRASH: File or symlink diverted into the trash directory.
        TRASH_DIR: Directory diverted into the trash directory.
    """

    DELETE = "DELETE"
    DELETE_DIR = "DELETE_DIR"
    TRASH = "TRASH"
    TRASH_DIR = "TRASH_DIR"

    @classmethod
    def for_entry(cls, *, is_dir: bool, use_trash: bool) -> "DeletionAction":
        """Select the action tag for an entry.

        Args:
            is_dir: Whether the entry is a directory.
            use_trash: Whether trash diversion is enabled.

        Returns:
            Matching DeletionAction.
        """
        if use_trash:
            return cls.TRASH_DIR if is_dir else cls.TRASH
        return cls.DELETE_DIR if is_dir else cls.DELETE

    @property
    def is_trash(self) -> bool:
        """Check if this action diverts into the trash."""
        return self in (DeletionAction.TRASH, DeletionAction.TRASH_DIR)


@dataclass(frozen=True, slots=True)
class DeletionOutcome:
    """Result of a single deletion attempt.

    Attributes:
        path: Path as given to the unlink/rmdir/rename call.
        action: Action that was attempted.
        success: Whether the filesystem call succeeded.
        error: OS error text if the attempt failed, None otherwise.
        trash_path: Destination inside the trash directory for trash actions.
    """

    path: str
    action: DeletionAction
    success: bool
    error: str | None = None
    trash_path: str | None = None

    def __post_init__(self) -> None:
        """Validate outcome data after initialization."""
        if not self.path:
            msg = "Path cannot be empty"
            raise ValueError(msg)

    @property
    def failed(self) -> bool:
        """Check if the attempt failed."""
        return not self.success
