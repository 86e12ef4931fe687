"""Path utilities for the permission sandbox.

Provides home-relative path resolution and segment-wise containment checks
for file operations.
"""

from __future__ import annotations

import os

HOME_MARKER = "~"


def resolve_path(input_path: str, home: str) -> str:
    """Resolve a tool-supplied path to a normalised absolute path.

    A leading ``~`` expands to ``home``. Absolute paths are kept. Relative
    paths resolve against ``home``, never the process working directory.
    Symlinks are not followed.

    Args:
        input_path: The path as supplied by the caller.
        home: The home directory used for ``~`` and relative paths.

    Returns:
        The normalised absolute path.
    """
    if input_path.startswith(HOME_MARKER):
        joined = os.path.join(home, input_path[1:].lstrip("/\\"))
    elif os.path.isabs(input_path):
        joined = input_path
    else:
        joined = os.path.join(home, input_path)
    return os.path.normpath(joined)


def _segments(path: str) -> list[str]:
    return [part for part in os.path.normpath(path).split(os.sep) if part]


def is_within_directory(resolved_path: str, directory: str) -> bool:
    """Check whether a resolved path is the directory itself or lies below it.

    Compares path segments, so ``/home/bobby`` is not inside ``/home/bob``.

    Args:
        resolved_path: The normalised absolute path to check.
        directory: The normalised absolute root directory.

    Returns:
        Whether the path is contained in the directory.
    """
    if not os.path.isabs(resolved_path) or not os.path.isabs(directory):
        return False
    path_parts = _segments(resolved_path)
    root_parts = _segments(directory)
    return path_parts[: len(root_parts)] == root_parts


def find_containing_root(resolved_path: str, roots: list[str]) -> str | None:
    """Return the first root that contains the path, or None."""
    for root in roots:
        if is_within_directory(resolved_path, root):
            return root
    return None


def collapse_home(path: str, home: str) -> str:
    """Substitute ``~`` back in for the home directory, for display."""
    if is_within_directory(path, home):
        relative = os.path.relpath(path, home)
        return HOME_MARKER if relative == "." else f"{HOME_MARKER}/{relative}"
    return path
