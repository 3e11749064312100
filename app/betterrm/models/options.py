"""Removal options model.

This module defines the value object carrying every user-selected
behavior flag through the deletion pipeline.
"""

from dataclasses import dataclass

DRY_RUN_ACTION_PREFIX = "[DRY-RUN] would be "
DRY_RUN_DIAGNOSTIC_PREFIX = "[DRY-RUN] "


@dataclass(frozen=True, slots=True)
class RemoveOptions:
    """Behavior flags for a better-rm invocation.

    Constructed once from command line input and passed by reference
    through the orchestrator and the recursive remover. Instances are
    immutable.

    Attributes:
        recursive: Remove directories and their contents recursively.
        force: Ignore nonexistent files and suppress OS failures, never prompt.
        verbose: Explain what is being done.
        interactive: Prompt before every top-level removal.
        dry_run: Report intended actions without touching the filesystem.
        preserve_root: Refuse to remove the filesystem root (default on).
        one_file_system: Do not cross device boundaries while recursing.
        use_trash: Divert entries into the trash directory instead of deleting.
        no_preserve_root: Explicitly allow removing the filesystem root.
        trash_dir: Trash directory used when use_trash is set.
    """

    recursive: bool = False
    force: bool = False
    verbose: bool = False
    interactive: bool = False
    dry_run: bool = False
    preserve_root: bool = True
    one_file_system: bool = False
    use_trash: bool = False
    no_preserve_root: bool = False
    trash_dir: str | None = None

    def __post_init__(self) -> None:
        """Validate option combinations after initialization."""
        if self.preserve_root and self.no_preserve_root:
            msg = "preserve_root and no_preserve_root are mutually exclusive"
            raise ValueError(msg)
        if self.use_trash and not self.trash_dir:
            msg = "trash_dir is required when use_trash is set"
            raise ValueError(msg)

    @property
    def should_report(self) -> bool:
        """Whether progress lines are printed (verbose or dry-run)."""
        return self.verbose or self.dry_run

    @property
    def verb(self) -> str:
        """Progress verb for the configured removal strategy."""
        return "trashing" if self.use_trash else "removing"

    @property
    def action_prefix(self) -> str:
        """Prefix for progress lines describing an action."""
        return DRY_RUN_ACTION_PREFIX if self.dry_run else ""

    @property
    def diagnostic_prefix(self) -> str:
        """Prefix for diagnostic lines written to stderr."""
        return DRY_RUN_DIAGNOSTIC_PREFIX if self.dry_run else ""
