"""Configuration file loading for better-rm.

Configuration sources are line-oriented text files. Each line is blank,
a comment starting with ``#``, or a directive of the exact form
``protect=<absolute-path>`` or ``trash_dir=<path>``. No whitespace is
tolerated around ``=``; any other line is skipped. Missing, unreadable
or malformed sources are never an error.

Sources are consumed in a fixed order: built-in defaults, the system
file, then the first existing user file.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from betterrm.core.paths import get_system_config_path, get_user_config_path
from betterrm.filesystem.protected import MAX_PROTECTED_DIRS, ProtectedPathSet

logger = logging.getLogger(__name__)

PROTECT_DIRECTIVE = "protect="
TRASH_DIR_DIRECTIVE = "trash_dir="


@dataclass(frozen=True, slots=True)
class ConfigDirectives:
    """Directives parsed from a single configuration source.

    Attributes:
        protect: Values of protect= lines, in file order.
        trash_dir: Value of the last trash_dir= line, None if absent.
    """

    protect: tuple[str, ...] = ()
    trash_dir: str | None = None


@dataclass(frozen=True, slots=True)
class RemoveConfig:
    """Effective configuration assembled from all sources.

    Attributes:
        protected: Protected path registry (defaults plus directives).
        trash_dir: Configured trash directory, None if not configured.
        sources: Configuration files that were read, in load order.
    """

    protected: ProtectedPathSet
    trash_dir: str | None = None
    sources: tuple[Path, ...] = field(default_factory=tuple)


def parse_config_lines(lines: Iterable[str]) -> ConfigDirectives:
    """Parse configuration lines into directives.

    Args:
        lines: Raw lines, with or without trailing newlines.

    Returns:
        ConfigDirectives holding every recognized directive.
    """
    protect: list[str] = []
    trash_dir: str | None = None

    for line_num, raw in enumerate(lines, start=1):
        line = raw.rstrip("\n")
        if not line or line.startswith("#"):
            continue

        if line.startswith(PROTECT_DIRECTIVE):
            protect.append(line[len(PROTECT_DIRECTIVE) :])
        elif line.startswith(TRASH_DIR_DIRECTIVE):
            value = line[len(TRASH_DIR_DIRECTIVE) :]
            if value:
                trash_dir = value
        else:
            logger.debug("Skipping unrecognized config line %d: %r", line_num, line)

    return ConfigDirectives(protect=tuple(protect), trash_dir=trash_dir)


def read_config_file(path: Path) -> ConfigDirectives | None:
    """Read and parse a configuration file.

    Args:
        path: Configuration file to read.

    Returns:
        Parsed directives, or None if the file is missing or unreadable.
    """
    try:
        with open(path, encoding="utf-8", errors="surrogateescape") as f:
            return parse_config_lines(f)
    except FileNotFoundError:
        return None
    except OSError as e:
        logger.debug("Skipping unreadable config file %s: %s", path, e)
        return None


def load_config(
    system_path: Path | None = None,
    user_path: Path | None = None,
    *,
    capacity: int = MAX_PROTECTED_DIRS,
) -> RemoveConfig:
    """Build the effective configuration.

    Args:
        system_path: System-scope config file. Default: /etc/better-rm.conf.
        user_path: User-scope config file. Default: first existing user
            config candidate (see core.paths).
        capacity: Protected path registry capacity.

    Returns:
        RemoveConfig with the protected registry and configured trash dir.
    """
    if system_path is None:
        system_path = get_system_config_path()
    if user_path is None:
        user_path = get_user_config_path()

    protected = ProtectedPathSet.with_defaults(capacity=capacity)
    trash_dir: str | None = None
    sources: list[Path] = []

    for path in (system_path, user_path):
        if path is None:
            continue
        directives = read_config_file(path)
        if directives is None:
            continue
        sources.append(path)
        protected = protected.extend(directives.protect)
        if directives.trash_dir is not None:
            trash_dir = directives.trash_dir
        logger.debug("Loaded %d protect directive(s) from %s", len(directives.protect), path)

    return RemoveConfig(protected=protected, trash_dir=trash_dir, sources=tuple(sources))
