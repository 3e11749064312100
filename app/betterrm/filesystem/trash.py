"""Trash diversion of filesystem entries.

Entries are renamed into the trash directory under the name
``<basename>.<YYYYMMDD_HHMMSS>.<pid>``. A single rename moves a
directory together with its contents. Renames across filesystems fail
and are reported; there is no copy-then-delete fallback.
"""

import logging
import os
import stat
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from betterrm.filesystem.errors import TrashDirError, TrashMoveError
from betterrm.utils.formatting import print_progress

logger = logging.getLogger(__name__)

TRASH_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
TRASH_DIR_MODE = 0o700


@dataclass(frozen=True, slots=True)
class TrashEntry:
    """A filesystem entry diverted into the trash directory.

    Attributes:
        original_path: Path the entry was moved from.
        trash_path: Path of the entry inside the trash directory.
        basename: Final component of the original path.
        timestamp: Local time of the diversion (YYYYMMDD_HHMMSS).
        pid: Process id of the diverting better-rm invocation.
    """

    original_path: str
    trash_path: str
    basename: str
    timestamp: str
    pid: int

    @property
    def name(self) -> str:
        """File name of the entry inside the trash directory."""
        return os.path.basename(self.trash_path)


def _entry_basename(path: str) -> str:
    stripped = path.rstrip("/")
    return os.path.basename(stripped) if stripped else "/"


def generate_trash_name(
    path: str,
    trash_dir: str,
    *,
    now: datetime | None = None,
    pid: int | None = None,
) -> TrashEntry:
    """Generate a collision-free trash destination for a path.

    The destination is ``trash_dir/<basename>.<timestamp>.<pid>``. The
    timestamp has second resolution, so two diversions of the same
    basename within one second by the same process would share a name;
    in that case a ``.1``, ``.2``, ... suffix is appended so an earlier
    trash entry is never overwritten.

    Args:
        path: Path of the entry to divert.
        trash_dir: Trash directory.
        now: Diversion time. Default: current local time.
        pid: Process id. Default: os.getpid().

    Returns:
        TrashEntry describing the destination.
    """
    basename = _entry_basename(path)
    timestamp = (now or datetime.now()).strftime(TRASH_TIMESTAMP_FORMAT)
    pid = os.getpid() if pid is None else pid

    candidate = os.path.join(trash_dir, f"{basename}.{timestamp}.{pid}")
    destination = candidate
    counter = 0
    while os.path.lexists(destination):
        counter += 1
        destination = f"{candidate}.{counter}"

    return TrashEntry(
        original_path=path,
        trash_path=destination,
        basename=basename,
        timestamp=timestamp,
        pid=pid,
    )


def move_to_trash(path: str, trash_dir: str, *, verbose: bool = False) -> TrashEntry:
    """Move a filesystem entry into the trash directory.

    Performs a single rename; symlinks are moved without being followed
    and directories are moved whole.

    Args:
        path: Path of the entry to divert.
        trash_dir: Existing trash directory.
        verbose: Print the source and destination of the move.

    Returns:
        TrashEntry for the diverted entry.

    Raises:
        TrashMoveError: If the rename fails (e.g., cross-device move).
    """
    entry = generate_trash_name(path, trash_dir)

    if verbose:
        print_progress(f"moving '{path}' to trash as '{entry.trash_path}'", style="trashed")

    try:
        os.rename(path, entry.trash_path)
    except OSError as e:
        reason = e.strerror or str(e)
        raise TrashMoveError(path, entry.trash_path, reason, e.errno) from e

    logger.debug("Moved %s to %s", path, entry.trash_path)
    return entry


def ensure_trash_dir(trash_dir: str | Path) -> Path:
    """Create the trash directory if it doesn't exist.

    The directory is created with owner-only permissions (0700).

    Args:
        trash_dir: Trash directory path.

    Returns:
        The created/existing trash directory path.

    Raises:
        TrashDirError: If the path exists but is not a directory, or the
            directory cannot be created.
    """
    path = Path(trash_dir)
    try:
        st = path.stat()
    except FileNotFoundError:
        pass
    except OSError as e:
        msg = f"cannot access trash directory {path}: {e.strerror or e}"
        raise TrashDirError(msg) from e
    else:
        if not stat.S_ISDIR(st.st_mode):
            msg = f"trash path exists but is not directory: {path}"
            raise TrashDirError(msg)
        return path

    try:
        path.mkdir(mode=TRASH_DIR_MODE, parents=True)
    except FileExistsError as e:
        # Dangling symlink in place of the directory
        msg = f"trash path exists but is not directory: {path}"
        raise TrashDirError(msg) from e
    except OSError as e:
        msg = f"cannot create trash directory: {e.strerror or e}"
        raise TrashDirError(msg) from e

    logger.debug("Created trash directory %s", path)
    return path
