"""Path string helpers and directory listing."""

from __future__ import annotations

import os
import sys
import unicodedata

from pollwatch.fileinfo import FileInfo


def os_slash() -> str:
    """Return the path separator of this platform."""
    return os.sep


def is_directory(path: str) -> bool:
    return os.path.isdir(path)


def slash_at_end(path: str) -> bool:
    return path.endswith(os.sep)


def dir_add_slash_at_end(path: str) -> str:
    """Return ``path`` with a trailing separator (paths of one character are kept)."""
    if len(path) > 1 and not path.endswith(os.sep):
        return path + os.sep
    return path


def dir_remove_slash_at_end(path: str) -> str:
    """Return ``path`` without one trailing separator (paths of one character are kept)."""
    if len(path) > 1 and path.endswith(os.sep):
        return path[:-1]
    return path


def files_info_from_path(path: str) -> dict[str, FileInfo]:
    """Return the entries of directory ``path`` by name, in name order.

    An unreadable or missing directory yields an empty mapping.
    """
    base = dir_add_slash_at_end(path)
    try:
        names = os.listdir(base)
    except (OSError, ValueError):
        return {}
    return {name: FileInfo(base + name) for name in sorted(names)}


def file_name_from_path(path: str) -> str:
    """Return the last component of ``path``, ignoring a trailing separator."""
    path = dir_remove_slash_at_end(path)
    pos = path.rfind(os.sep)
    if pos != -1:
        return path[pos + 1 :]
    return path


def path_remove_file_name(path: str) -> str:
    """Return ``path`` up to and including the separator before its last component."""
    path = dir_remove_slash_at_end(path)
    pos = path.rfind(os.sep)
    if pos != -1:
        return path[: pos + 1]
    return path


def get_link_real_path(path: str) -> tuple[str, str]:
    """Resolve a symbolic link.

    Returns ``(target, parent)``: the link's real path with a trailing
    separator and the directory holding the link. Both are empty when
    ``path`` is not a link.
    """
    path = dir_remove_slash_at_end(path)
    info = FileInfo(path, link_info=True)
    if info.is_link():
        link = dir_add_slash_at_end(info.links_to())
        return link, path_remove_file_name(path)
    return "", ""


def precompose_file_name(name: str) -> str:
    """Return ``name`` in precomposed form where the platform decomposes names."""
    if sys.platform == "darwin":
        return unicodedata.normalize("NFC", name)
    return name


def change_working_directory(path: str) -> None:
    """Change the process working directory; raises OSError on failure."""
    os.chdir(path)


def get_current_working_directory() -> str:
    return os.getcwd()