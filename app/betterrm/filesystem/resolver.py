"""Path canonicalization for protection decisions.

The resolved form of a path is only ever compared against the protected
path registry and the filesystem root. Removal calls always receive the
literal path the user supplied, so a symlink given as the final path
component is removed itself rather than its target.
"""

import os


def resolve_path(path: str) -> str:
    """Resolve a path to its canonical absolute form.

    Symlinks and ``.``/``..`` components are resolved when the path
    exists. When canonicalization fails, a relative path is joined onto
    the current working directory as-is (intermediate symlinks are not
    resolved) and an absolute path is returned unchanged.

    Args:
        path: Path as supplied by the user.

    Returns:
        Absolute path string.
    """
    try:
        return os.path.realpath(path, strict=True)
    except (OSError, ValueError):
        pass

    if os.path.isabs(path):
        return path

    try:
        cwd = os.getcwd()
    except OSError:
        # Current directory was removed underneath us
        return path
    return os.path.join(cwd, path)


def normalize_path(path: str) -> str:
    """Strip trailing slashes, keeping the root as ``/``.

    Args:
        path: Path string to normalize.

    Returns:
        Path without trailing slashes.
    """
    stripped = path.rstrip("/")
    return stripped or ("/" if path.startswith("/") else stripped)
