"""Directory snapshots and the differences between two scans."""

from __future__ import annotations

from dataclasses import dataclass, field

from pollwatch.fileinfo import FileInfo, inode_supported
from pollwatch.filesystem import file_name_from_path, files_info_from_path


@dataclass
class SnapshotDiff:
    """Changes found by one scan of a directory.

    Moved entries are ``(old_name, new_info)`` pairs.
    """

    files_deleted: list[FileInfo] = field(default_factory=list)
    files_created: list[FileInfo] = field(default_factory=list)
    files_modified: list[FileInfo] = field(default_factory=list)
    files_moved: list[tuple[str, FileInfo]] = field(default_factory=list)
    dirs_deleted: list[FileInfo] = field(default_factory=list)
    dirs_created: list[FileInfo] = field(default_factory=list)
    dirs_modified: list[FileInfo] = field(default_factory=list)
    dirs_moved: list[tuple[str, FileInfo]] = field(default_factory=list)
    dir_changed: bool = False

    def _lists(self) -> tuple[list, ...]:
        return (
            self.files_created,
            self.files_modified,
            self.files_moved,
            self.files_deleted,
            self.dirs_created,
            self.dirs_modified,
            self.dirs_moved,
            self.dirs_deleted,
        )

    def clear(self) -> None:
        """Empty every change list."""
        for changes in self._lists():
            changes.clear()

    def changed(self) -> bool:
        """Return whether any file or directory change was recorded."""
        return any(self._lists())


class DirectorySnapshot:
    """The known entries of one directory, updated by :meth:`scan`."""

    def __init__(self, directory: str | None = None) -> None:
        self.directory_info = FileInfo()
        self.files: dict[str, FileInfo] = {}
        if directory is not None:
            self.init(directory)

    def set_directory_info(self, directory: str) -> None:
        self.directory_info = FileInfo(directory)

    def init(self, directory: str) -> None:
        """Point the snapshot at ``directory`` and record its current entries."""
        self.set_directory_info(directory)
        self._init_files()

    def _init_files(self) -> None:
        self.files = {
            name: info
            for name, info in files_info_from_path(self.directory_info.filepath).items()
            if info.is_regular_file() or info.is_directory()
        }

    def exists(self) -> bool:
        return self.directory_info.exists()

    def _delete_all(self, diff: SnapshotDiff) -> None:
        for name in sorted(self.files):
            info = self.files[name]
            if info.is_directory():
                diff.dirs_deleted.append(info)
            else:
                diff.files_deleted.append(info)
        self.files.clear()

    def scan(self) -> SnapshotDiff:
        """Compare the directory with the snapshot, update it and return the changes.

        Deletions are only detected when the directory's own stat data changed.
        """
        diff = SnapshotDiff()
        current = FileInfo(self.directory_info.filepath)
        diff.dir_changed = self.directory_info != current
        if diff.dir_changed:
            self.directory_info = current

        if not current.exists():
            self._delete_all(diff)
            return diff

        listing = files_info_from_path(self.directory_info.filepath)
        if not listing and not self.files:
            return diff

        remaining = dict(self.files) if diff.dir_changed else {}

        for name, info in listing.items():
            previous = self.files.get(name)
            if previous is not None:
                remaining.pop(name, None)
                if previous != info:
                    self.files[name] = info
                    if info.is_directory():
                        diff.dirs_modified.append(info)
                    else:
                        diff.files_modified.append(info)
            elif info.is_regular_file() or info.is_directory():
                self.files[name] = info
                old_name = self.node_in_files(info)
                if old_name is not None:
                    remaining.pop(old_name, None)
                    del self.files[old_name]
                    if info.is_directory():
                        diff.dirs_moved.append((old_name, info))
                    else:
                        diff.files_moved.append((old_name, info))
                elif info.is_directory():
                    diff.dirs_created.append(info)
                else:
                    diff.files_created.append(info)

        if not diff.dir_changed:
            return diff

        for name in sorted(remaining):
            info = remaining[name]
            if info.is_directory():
                diff.dirs_deleted.append(info)
            else:
                diff.files_deleted.append(info)
            self.files.pop(name, None)

        return diff

    def node_in_files(self, info: FileInfo) -> str | None:
        """Return the name of a known entry with the same inode but another path."""
        if inode_supported():
            for name in sorted(self.files):
                entry = self.files[name]
                if entry.same_inode(info) and entry.filepath != info.filepath:
                    return name
        return None

    def add_file(self, path: str) -> None:
        self.files[file_name_from_path(path)] = FileInfo(path)

    def remove_file(self, path: str) -> None:
        self.files.pop(file_name_from_path(path), None)

    def move_file(self, old_path: str, new_path: str) -> None:
        self.remove_file(old_path)
        self.add_file(new_path)

    def update_file(self, path: str) -> None:
        self.add_file(path)