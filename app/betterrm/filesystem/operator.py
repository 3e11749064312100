"""Safe removal of user-supplied targets.

SafeRemover is the entry point for every command line target. Each
target passes a fixed sequence of gates (protected path, preserved
root, existence, interactive confirmation, directory handling) before
the RecursiveRemover touches the filesystem.
"""

import logging
import os
import stat
import sys
from collections.abc import Callable, Iterable
from typing import TextIO

from betterrm.core.audit import AuditLogger
from betterrm.core.theme import progress_style
from betterrm.filesystem.errors import ProtectionViolation, RemoveError
from betterrm.filesystem.protected import ProtectedPathSet, is_root_blocked
from betterrm.filesystem.remover import RecursiveRemover
from betterrm.models.options import RemoveOptions
from betterrm.utils.formatting import console, print_diagnostic, print_progress

logger = logging.getLogger(__name__)

CONFIRM_RESPONSES = ("y", "Y")


def ask_confirmation(path: str, stream: TextIO | None = None) -> bool:
    """Ask whether a target should be removed.

    Reads one line from the input stream and accepts it only when its
    first non-blank character is ``y`` or ``Y``. Any other answer, end of
    input, or a read error declines.

    Args:
        path: Target path shown in the prompt.
        stream: Input stream. Default: sys.stdin.

    Returns:
        True if the user confirmed the removal.
    """
    console.print(f"remove '{path}'? ", end="", markup=False, highlight=False, soft_wrap=True)
    try:
        answer = (stream or sys.stdin).readline()
    except (OSError, ValueError):
        return False
    return answer.strip()[:1] in CONFIRM_RESPONSES


class SafeRemover:
    """Removes targets while enforcing protection and preservation policy.

    Attributes:
        _registry: Protected path registry.
        _options: Active removal options.
        _audit: Audit logger for deletion outcomes.
        _confirm: Callback asking for interactive confirmation.
    """

    def __init__(
        self,
        registry: ProtectedPathSet,
        options: RemoveOptions,
        *,
        audit: AuditLogger | None = None,
        confirm: Callable[[str], bool] | None = None,
    ) -> None:
        """Initialize the SafeRemover.

        Args:
            registry: Protected path registry built at startup.
            options: Active removal options.
            audit: Audit logger. Default: AuditLogger writing to the state dir.
            confirm: Confirmation callback for interactive mode.
                Default: ask_confirmation on stdin.
        """
        self._registry = registry
        self._options = options
        self._audit = audit if audit is not None else AuditLogger()
        self._confirm = confirm if confirm is not None else ask_confirmation
        self._remover = RecursiveRemover(options, self._audit)

    def remove_all(self, paths: Iterable[str]) -> int:
        """Remove every target, continuing past failures.

        Args:
            paths: Targets in command line order.

        Returns:
            0 if every target succeeded, 1 if any target failed.
        """
        status = 0
        for path in paths:
            if self.safe_remove(path) != 0:
                status = 1
        return status

    def safe_remove(self, path: str) -> int:
        """Remove a single target.

        Args:
            path: Target path as supplied by the user.

        Returns:
            0 on success or no-op, 1 on failure.
        """
        try:
            return 0 if self._remove(path) else 1
        except RemoveError as e:
            logger.debug("Refusing %s: %s", path, e.reason)
            print_diagnostic(str(e), self._options.diagnostic_prefix)
            return 1

    def _remove(self, path: str) -> bool:
        opts = self._options

        if self._registry.is_protected(path):
            raise ProtectionViolation(path, "Protected system directory")

        if is_root_blocked(path, opts):
            raise ProtectionViolation(path, "--preserve-root is active")

        try:
            st = os.lstat(path)
        except OSError as e:
            if opts.force:
                return True
            raise RemoveError(path, e.strerror or str(e)) from e

        if opts.interactive and not opts.dry_run and not self._confirm(path):
            return True

        if stat.S_ISDIR(st.st_mode):
            if not opts.recursive:
                raise RemoveError(path, "Is a directory")
            if opts.should_report:
                print_progress(
                    f"{opts.action_prefix}{opts.verb} directory '{path}' recursively",
                    style=progress_style(opts),
                )
            return self._remover.remove_tree(path)

        return self._remover.remove_entry(path, is_dir=False)
