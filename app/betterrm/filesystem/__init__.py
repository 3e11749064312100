"""Safe deletion engine.

This module provides protected path management, path resolution,
trash diversion, recursive removal and the per-target orchestrator.
"""

from betterrm.filesystem.errors import (
    ProtectionViolation,
    RemoveError,
    TrashDirError,
    TrashMoveError,
)
from betterrm.filesystem.operator import SafeRemover, ask_confirmation
from betterrm.filesystem.protected import (
    DEFAULT_PROTECTED_DIRS,
    MAX_PROTECTED_DIRS,
    ProtectedPathSet,
    is_root_blocked,
)
from betterrm.filesystem.remover import RecursiveRemover
from betterrm.filesystem.resolver import normalize_path, resolve_path
from betterrm.filesystem.trash import (
    TrashEntry,
    ensure_trash_dir,
    generate_trash_name,
    move_to_trash,
)

__all__ = [
    "DEFAULT_PROTECTED_DIRS",
    "MAX_PROTECTED_DIRS",
    "ProtectedPathSet",
    "ProtectionViolation",
    "RecursiveRemover",
    "RemoveError",
    "SafeRemover",
    "TrashDirError",
    "TrashEntry",
    "TrashMoveError",
    "ask_confirmation",
    "ensure_trash_dir",
    "generate_trash_name",
    "is_root_blocked",
    "move_to_trash",
    "normalize_path",
    "resolve_path",
]
