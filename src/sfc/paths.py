# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Stable file names for manifest entries."""

from sfc.errors import PathError


def normalize_path(raw_path: str, tree_root: str) -> str:
    """Convert a host path into a stable ``./``-relative name.

    This is a pure string operation and never touches the filesystem, so
    Windows and POSIX inputs normalize the same way on any host.

    Args:
        raw_path: Absolute or relative path of a file.
        tree_root: Root the stable name is relative to. An empty root or
            ``.`` accepts relative paths.

    Returns:
        Forward-slash name prefixed with ``./``.

    Raises:
        PathError: If ``raw_path`` is not below ``tree_root``.
    """
    path = raw_path.replace("\\", "/")
    root = tree_root.replace("\\", "/").rstrip("/")
    if not root and tree_root.startswith(("/", "\\")):
        if not path.startswith("/") or not path.lstrip("/"):
            raise PathError(f"Path {raw_path} is not under {tree_root}")
        return to_spdx_file_name(path.lstrip("/"))
    if root in ("", "."):
        relative = path[2:] if path.startswith("./") else path
        if not relative or relative.startswith("/") or _escapes_root(relative) or _has_drive(relative):
            raise PathError(f"Path is not relative to the tree root: {raw_path}")
    else:
        if not path.startswith(root + "/"):
            raise PathError(f"Path {raw_path} is not under {tree_root}")
        relative = path[len(root) + 1 :].lstrip("/")
        if not relative:
            raise PathError(f"Path {raw_path} names the tree root itself")
    return to_spdx_file_name(relative)


def to_spdx_file_name(file_path: str) -> str:
    """Prefix a relative path with ``./`` using forward slashes."""
    result = file_path.replace("\\", "/")
    if not result.startswith("./"):
        result = "./" + result
    return result


def to_relative_key(file_path: str) -> str:
    """Normalize an override key to a bare root-relative path."""
    key = file_path.replace("\\", "/").strip()
    while key.startswith("./"):
        key = key[2:]
    return key.strip("/")


def file_extension(file_name: str) -> str:
    """Return the text after the last dot of a file name.

    A name without a dot, or whose only dot is its first character, has an
    empty extension.
    """
    base = file_name.replace("\\", "/").rsplit("/", 1)[-1]
    last_dot = base.rfind(".")
    if last_dot < 1:
        return ""
    return base[last_dot + 1 :]


def _escapes_root(relative: str) -> bool:
    return relative == ".." or relative.startswith("../")


def _has_drive(relative: str) -> bool:
    return len(relative) > 1 and relative[1] == ":" and relative[0].isalpha()
