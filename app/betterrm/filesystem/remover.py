"""Recursive removal of directory trees.

Walks a directory post-order, removing or trash-diverting every entry,
then the directory itself. Symlinks are never followed during traversal.
The walk keeps its own stack of open directories, so tree depth is bounded
only by the filesystem.
"""

import logging
import os
import stat
from dataclasses import dataclass

from betterrm.core.audit import AuditLogger
from betterrm.core.theme import progress_style
from betterrm.filesystem.errors import TrashMoveError
from betterrm.filesystem.trash import move_to_trash
from betterrm.models.options import RemoveOptions
from betterrm.models.outcome import DeletionAction, DeletionOutcome
from betterrm.utils.formatting import print_diagnostic, print_progress

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _OpenDir:
    """Directory being walked.

    Attributes:
        path: Directory path.
        scanner: Open scandir iterator over its entries.
        dev: Device of the directory when one_file_system is set.
        failed: Whether a child failed, which stops the walk at this level.
    """

    path: str
    scanner: "os._ScandirIterator[str]"
    dev: int | None
    failed: bool = False


class RecursiveRemover:
    """Applies deletion or trash diversion to single entries and trees.

    Attributes:
        _options: Active removal options.
        _audit: Audit logger receiving one record per mutating attempt.
    """

    def __init__(self, options: RemoveOptions, audit: AuditLogger) -> None:
        """Initialize the RecursiveRemover.

        Args:
            options: Active removal options.
            audit: Audit logger for deletion outcomes.
        """
        self._options = options
        self._audit = audit

    def remove_tree(self, path: str) -> bool:
        """Remove a directory and everything below it.

        Entries are processed in directory-listing order. With
        one_file_system set, entries on a different device than their
        directory are skipped entirely. A failing child stops processing
        of its remaining siblings unless force is set, and the directory
        itself is then left in place, as is every ancestor.

        Args:
            path: Directory to remove; must be a directory (not a symlink).

        Returns:
            True if the tree was removed (or the dry-run simulated it),
            or failures were suppressed by force.
        """
        try:
            stack = [self._open(path)]
        except OSError as e:
            return self._fail(path, "remove", e.strerror or str(e))

        while True:
            top = stack[-1]
            entry = None if top.failed else next(top.scanner, None)

            if entry is None:
                top.scanner.close()
                stack.pop()
                ok = not top.failed and self.remove_entry(top.path, is_dir=True)
                if not stack:
                    return ok
                if not ok:
                    stack[-1].failed = True
                continue

            child = os.path.join(top.path, entry.name)
            st = self._lstat(child)
            if st is None:
                continue

            if top.dev is not None and st.st_dev != top.dev:
                if self._options.should_report:
                    print_progress(f"skipping '{child}': different filesystem", style="skipped")
                continue

            if stat.S_ISDIR(st.st_mode):
                try:
                    stack.append(self._open(child))
                    continue
                except OSError as e:
                    ok = self._fail(child, "remove", e.strerror or str(e))
            else:
                ok = self.remove_entry(child, is_dir=False)

            if not ok:
                top.failed = True

    def _open(self, path: str) -> _OpenDir:
        """Open a directory for walking.

        Raises:
            OSError: If the directory cannot be listed or stat'ed.
        """
        dev = os.stat(path).st_dev if self._options.one_file_system else None
        return _OpenDir(path=path, scanner=os.scandir(path), dev=dev)

    def _lstat(self, path: str) -> os.stat_result | None:
        """Stat a directory entry, reporting entries that vanished or deny access."""
        try:
            return os.lstat(path)
        except OSError as e:
            logger.debug("Skipping %s: %s", path, e)
            if self._options.should_report:
                print_progress(f"skipping '{path}': {e.strerror or e}", style="skipped")
            return None

    def remove_entry(self, path: str, *, is_dir: bool) -> bool:
        """Remove or trash-divert a single entry.

        Directories must already be empty unless trash diversion is active,
        in which case the directory is renamed whole. In dry-run mode only
        the intent is reported. In verbose trash mode the move itself is
        reported, naming the trash destination.

        Args:
            path: Entry to remove.
            is_dir: Whether the entry is a directory.

        Returns:
            True on success, in dry-run, or when force suppresses the failure.
        """
        opts = self._options
        action = DeletionAction.for_entry(is_dir=is_dir, use_trash=opts.use_trash)
        report_move = action.is_trash and opts.verbose and not opts.dry_run

        if opts.should_report and not report_move:
            kind = "directory " if is_dir else ""
            print_progress(
                f"{opts.action_prefix}{opts.verb} {kind}'{path}'", style=progress_style(opts)
            )

        if opts.dry_run:
            return True

        trash_path: str | None = None
        try:
            if action.is_trash:
                entry = move_to_trash(path, str(opts.trash_dir), verbose=report_move)
                trash_path = entry.trash_path
            elif is_dir:
                os.rmdir(path)
            else:
                os.unlink(path)
        except TrashMoveError as e:
            self._audit.record(
                DeletionOutcome(path=path, action=action, success=False, error=e.reason)
            )
            return self._fail(path, "trash", e.reason)
        except OSError as e:
            reason = e.strerror or str(e)
            self._audit.record(
                DeletionOutcome(path=path, action=action, success=False, error=reason)
            )
            return self._fail(path, "remove", reason)

        self._audit.record(
            DeletionOutcome(path=path, action=action, success=True, trash_path=trash_path)
        )
        return True

    def _fail(self, path: str, verb: str, reason: str) -> bool:
        """Report a failure unless suppressed by force.

        Returns:
            True if force suppresses the failure, False otherwise.
        """
        if self._options.force:
            logger.debug("Suppressed failure on %s: %s", path, reason)
            return True
        print_diagnostic(f"cannot {verb} '{path}': {reason}", self._options.diagnostic_prefix)
        return False
