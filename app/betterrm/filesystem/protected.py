"""Protected filesystem paths that must never be removed.

This module defines the built-in protected directories and the
ProtectedPathSet registry that the orchestrator consults before any
removal. Matching is exact: protecting ``/var/lib/mysql`` does not
protect ``/var/lib/mysql/data``.
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from betterrm.filesystem.resolver import normalize_path, resolve_path
from betterrm.models.options import RemoveOptions

logger = logging.getLogger(__name__)

# Registry capacity. Entries past this bound are dropped without error.
MAX_PROTECTED_DIRS = 100

# Built-in protected directories, always loaded first.
DEFAULT_PROTECTED_DIRS: tuple[str, ...] = (
    "/",
    "/bin",
    "/boot",
    "/dev",
    "/etc",
    "/home",
    "/lib",
    "/lib32",
    "/lib64",
    "/proc",
    "/root",
    "/sbin",
    "/sys",
    "/usr",
    "/var",
)

ROOT_PATH = "/"


@dataclass(frozen=True, slots=True)
class ProtectedPathSet:
    """Ordered, capacity-bounded set of protected absolute paths.

    Built once at startup from the defaults followed by the system and
    user configuration sources, then passed read-only to the orchestrator.
    Every entry is absolute and carries no trailing slash (except ``/``).

    Attributes:
        entries: Protected paths in load order.
        capacity: Maximum number of entries.
    """

    entries: tuple[str, ...] = ()
    capacity: int = MAX_PROTECTED_DIRS

    def __post_init__(self) -> None:
        """Validate registry data after initialization."""
        if self.capacity < 0:
            msg = f"Capacity must be non-negative, got {self.capacity}"
            raise ValueError(msg)
        if len(self.entries) > self.capacity:
            msg = f"{len(self.entries)} entries exceed capacity {self.capacity}"
            raise ValueError(msg)
        for entry in self.entries:
            if not entry.startswith("/") or normalize_path(entry) != entry:
                msg = f"Protected path must be absolute without trailing slash: {entry!r}"
                raise ValueError(msg)

    @classmethod
    def with_defaults(cls, capacity: int = MAX_PROTECTED_DIRS) -> "ProtectedPathSet":
        """Create a registry holding the built-in protected directories."""
        return cls(capacity=capacity).extend(DEFAULT_PROTECTED_DIRS)

    @property
    def is_saturated(self) -> bool:
        """Check if the registry reached its capacity."""
        return len(self.entries) >= self.capacity

    def extend(self, paths: Iterable[str]) -> "ProtectedPathSet":
        """Return a new registry with additional protected paths appended.

        Trailing slashes are stripped. Empty or relative values are skipped.
        Once the registry is saturated, remaining paths are dropped.

        Args:
            paths: Candidate paths in load order.

        Returns:
            New ProtectedPathSet; self is left unchanged.
        """
        entries = list(self.entries)
        for raw in paths:
            path = normalize_path(raw)
            if not path.startswith("/"):
                logger.debug("Skipping non-absolute protected path %r", raw)
                continue
            if len(entries) >= self.capacity:
                logger.debug("Protected path capacity %d reached, dropping %s", self.capacity, path)
                continue
            entries.append(path)
        return ProtectedPathSet(entries=tuple(entries), capacity=self.capacity)

    def is_protected(self, path: str) -> bool:
        """Check if a path is protected and must not be removed.

        The path is resolved to its canonical absolute form and stripped of
        trailing slashes, then compared byte-exactly (case-sensitive) with
        every entry.

        Args:
            path: Path as supplied by the user.

        Returns:
            True if the resolved path equals a registry entry.
        """
        return normalize_path(resolve_path(path)) in self.entries

    def __contains__(self, path: object) -> bool:
        return path in self.entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


def is_root_blocked(path: str, options: RemoveOptions) -> bool:
    """Check if removing a path is blocked by root preservation.

    Args:
        path: Path as supplied by the user.
        options: Active removal options.

    Returns:
        True if preserve-root is active and the path resolves to ``/``.
    """
    if not options.preserve_root or options.no_preserve_root:
        return False
    return normalize_path(resolve_path(path)) == ROOT_PATH
