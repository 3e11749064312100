"""XDG-compliant path management for better-rm.

This module provides the standardized locations better-rm reads its
configuration from, stores its audit trail in, and diverts deleted
entries to.

Defaults:
- System config: /etc/better-rm.conf
- User config: first existing of ~/.config/better-rm/config
  (or XDG_CONFIG_HOME/better-rm/config) and ~/.better-rm.conf
- State: ~/.local/state/better-rm/
- Trash: BETTER_RM_TRASH, else ~/.Trash, else /tmp/.Trash
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "better-rm"

SYSTEM_CONFIG_PATH = Path("/etc/better-rm.conf")
LEGACY_USER_CONFIG_NAME = ".better-rm.conf"

TRASH_DIR_ENV = "BETTER_RM_TRASH"
DEFAULT_TRASH_DIR_NAME = ".Trash"
FALLBACK_TRASH_DIR = Path("/tmp/.Trash")


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/better-rm/ (or XDG_CONFIG_HOME/better-rm/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_state_dir() -> Path:
    """Get the state directory path.

    State data is the audit trail of deletion attempts.

    Returns:
        Path to ~/.local/state/better-rm/ (or XDG_STATE_HOME/better-rm/).
    """
    return _get_xdg_dir("XDG_STATE_HOME", ".local/state")


def get_system_config_path() -> Path:
    """Get the system-wide configuration file path.

    Returns:
        Path to /etc/better-rm.conf.
    """
    return SYSTEM_CONFIG_PATH


def get_user_config_candidates() -> list[Path]:
    """Get the candidate user configuration file paths, in lookup order.

    Only the first candidate that exists is loaded.

    Returns:
        List of candidate paths, XDG location first.
    """
    candidates = [get_config_dir() / "config"]
    xdg_default = Path.home() / ".config" / APP_NAME / "config"
    if xdg_default not in candidates:
        candidates.append(xdg_default)
    candidates.append(Path.home() / LEGACY_USER_CONFIG_NAME)
    return candidates


def get_user_config_path() -> Path | None:
    """Get the active user configuration file.

    Returns:
        The first existing candidate from get_user_config_candidates(),
        or None if no user configuration exists.
    """
    for candidate in get_user_config_candidates():
        if candidate.is_file():
            return candidate
    return None


def get_audit_log_path() -> Path:
    """Get the audit log file path.

    Returns:
        Path to ~/.local/state/better-rm/audit.jsonl.
    """
    return get_state_dir() / "audit.jsonl"


def get_user_theme_path() -> Path:
    """Get the user theme configuration path.

    Returns:
        Path to ~/.config/better-rm/theme.toml (or XDG_CONFIG_HOME/better-rm/theme.toml).
    """
    return get_config_dir() / "theme.toml"


def get_trash_dir(configured: str | None = None) -> Path:
    """Resolve the active trash directory.

    Priority:
    1. BETTER_RM_TRASH environment variable
    2. trash_dir= directive from the configuration files
    3. ~/.Trash
    4. /tmp/.Trash when no home directory can be determined

    The --trash-dir command line flag overrides all of these and is
    handled by the caller.

    Args:
        configured: Trash directory from the configuration files, if any.

    Returns:
        Path to the trash directory (not created).
    """
    env_trash = os.environ.get(TRASH_DIR_ENV)
    if env_trash:
        return Path(env_trash)

    if configured:
        return Path(configured)

    try:
        return Path.home() / DEFAULT_TRASH_DIR_NAME
    except RuntimeError:
        # Path.home() raises when HOME is unset and no passwd entry exists
        return FALLBACK_TRASH_DIR
