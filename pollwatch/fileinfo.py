"""Stat information about a single file system entry."""

from __future__ import annotations

import functools
import os
import stat as _stat


def inode_supported() -> bool:
    """Return whether inode numbers identify files on this platform."""
    return os.name != "nt"


@functools.lru_cache(maxsize=None)
def _running_as_root() -> bool:
    return os.name != "nt" and os.getuid() == 0


def _stat_target(path: str) -> str:
    """Drop one trailing separator so that stat works on every platform."""
    if len(path) > 1 and path.endswith(os.sep):
        return path[:-1]
    return path


class FileInfo:
    """Snapshot of the stat data of one path.

    Two instances compare equal when their stat data match; the path itself
    is not part of the comparison.
    """

    def __init__(self, filepath: str = "", link_info: bool = False) -> None:
        self.filepath = filepath
        self.modification_time = 0
        self.size = 0
        self.owner_id = 0
        self.group_id = 0
        self.permissions = 0
        self.inode = 0
        if filepath:
            if link_info:
                self.refresh_link()
            else:
                self.refresh()

    def _load(self, follow_links: bool) -> None:
        try:
            st = os.stat(_stat_target(self.filepath), follow_symlinks=follow_links)
        except (OSError, ValueError):
            return
        self.modification_time = int(st.st_mtime)
        self.size = st.st_size
        self.owner_id = st.st_uid
        self.group_id = st.st_gid
        self.permissions = st.st_mode
        self.inode = st.st_ino

    def refresh(self) -> None:
        """Reload the stat data, following symbolic links."""
        self._load(follow_links=True)

    def refresh_link(self) -> None:
        """Reload the stat data of the path itself, not of a link's target."""
        self._load(follow_links=os.name == "nt")

    def _key(self) -> tuple[int, int, int, int, int, int]:
        return (
            self.modification_time,
            self.size,
            self.owner_id,
            self.group_id,
            self.permissions,
            self.inode,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FileInfo):
            return NotImplemented
        return self._key() == other._key()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"FileInfo(filepath={self.filepath!r}, size={self.size}, "
            f"mtime={self.modification_time}, mode={self.permissions:o}, "
            f"inode={self.inode})"
        )

    def is_directory(self) -> bool:
        return _stat.S_ISDIR(self.permissions)

    def is_regular_file(self) -> bool:
        return _stat.S_ISREG(self.permissions)

    def is_readable(self) -> bool:
        """Return whether the owner may read the entry (always true for root)."""
        return _running_as_root() or bool(self.permissions & _stat.S_IRUSR)

    def is_link(self) -> bool:
        if os.name == "nt":
            return False
        return _stat.S_ISLNK(self.permissions)

    def links_to(self) -> str:
        """Return the resolved target of a symbolic link, or "" if there is none."""
        if os.name != "nt" and self.is_link():
            try:
                return os.path.realpath(self.filepath, strict=True)
            except (OSError, ValueError):
                return ""
        return ""

    def exists(self) -> bool:
        try:
            os.stat(_stat_target(self.filepath))
        except (OSError, ValueError):
            return False
        return True

    def same_inode(self, other: FileInfo) -> bool:
        return inode_supported() and self.inode == other.inode


def path_exists(path: str) -> bool:
    """Return whether ``path`` can be stat'ed."""
    return FileInfo(path).exists()


def path_is_link(path: str) -> bool:
    """Return whether ``path`` itself is a symbolic link."""
    return FileInfo(path, link_info=True).is_link()