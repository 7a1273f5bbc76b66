"""
Path helpers.

All paths are treated as absolute; leading, trailing and consecutive
slashes are ignored.
"""

from typing import List


def split_path(path: str) -> List[str]:
    """Split a path into its non-empty components."""
    return [component for component in (path or "").split("/") if component]


def normalize_path(path: str) -> str:
    """Collapse a path to its canonical 'a/b/c' form."""
    return "/".join(split_path(path))


def parent_path(path: str) -> str:
    """Path of the enclosing folder ('' for top-level entries)."""
    return "/".join(split_path(path)[:-1])


def basename(path: str) -> str:
    """Last component of a path ('' for the root)."""
    components = split_path(path)
    return components[-1] if components else ""


def join_path(path: str, name: str) -> str:
    """Path of a child entry, keeping the caller's prefix as given."""
    prefix = (path or "").rstrip("/")
    return f"{prefix}/{name}" if prefix else name
