"""Polling watchers that follow a directory tree by comparing snapshots."""

from __future__ import annotations

import os
from typing import Any

from pollwatch.events import Action, FileWatchListener
from pollwatch.fileinfo import FileInfo
from pollwatch.filesystem import (
    dir_add_slash_at_end,
    dir_remove_slash_at_end,
    file_name_from_path,
    get_link_real_path,
    path_remove_file_name,
)
from pollwatch.snapshot import DirectorySnapshot
from pollwatch.textutil import split


class Watcher:
    """A watched directory as registered by a file watcher backend."""

    def __init__(
        self,
        watch_id: int = 0,
        directory: str = "",
        listener: FileWatchListener | None = None,
        recursive: bool = False,
    ) -> None:
        self.watch_id = watch_id
        self.directory = directory
        self.listener = listener
        self.recursive = recursive
        self.old_file_name = ""

    def watch(self) -> None:
        """Look for changes; the base watcher has nothing to look at."""


class WatcherGeneric(Watcher):
    """A watch that polls its directory tree.

    ``watcher_impl`` is the backend that owns the watch. It must provide
    ``path_in_watches(path)``, ``link_allowed(cur_path, link)`` and a
    ``file_watcher`` with the ``follow_symlinks`` and
    ``allow_out_of_scope_links`` flags.
    """

    def __init__(
        self,
        watch_id: int,
        directory: str,
        listener: FileWatchListener | None,
        watcher_impl: Any,
        recursive: bool,
    ) -> None:
        super().__init__(watch_id, dir_add_slash_at_end(directory), listener, recursive)
        self.watcher_impl = watcher_impl
        self.dir_watch: DirWatcherGeneric | None = None
        self.dir_watch = DirWatcherGeneric(None, self, directory, recursive, False)
        self.dir_watch.add_children(False)

    def watch(self) -> None:
        if self.dir_watch is not None:
            self.dir_watch.watch()

    def watch_dir(self, directory: str) -> None:
        """Poll only the watched subdirectory ``directory``."""
        if self.dir_watch is not None:
            self.dir_watch.watch_dir(directory)

    def path_in_watches(self, path: str) -> bool:
        return self.dir_watch is not None and self.dir_watch.path_in_watches(path)

    def close(self) -> None:
        """Release the directory watchers of this watch."""
        if self.dir_watch is not None:
            self.dir_watch.close()
            self.dir_watch = None


class DirWatcherGeneric:
    """Polls one directory and, when recursive, its subdirectories."""

    def __init__(
        self,
        parent: DirWatcherGeneric | None,
        owner: WatcherGeneric,
        directory: str,
        recursive: bool,
        report_new_files: bool = False,
    ) -> None:
        self.parent = parent
        self.owner = owner
        self.snapshot = DirectorySnapshot()
        self.directories: dict[str, DirWatcherGeneric] = {}
        self.recursive = recursive
        self._deleted = False

        self._reset_directory(directory)
        diff = self.snapshot.scan()
        if report_new_files and diff.changed():
            for info in diff.files_created:
                self._handle_action(info.filepath, Action.ADD)

    # -- helpers -----------------------------------------------------------

    @property
    def _impl(self) -> Any:
        return self.owner.watcher_impl

    def _follow_symlinks(self) -> bool:
        return bool(self._impl.file_watcher.follow_symlinks)

    def _allow_out_of_scope_links(self) -> bool:
        return bool(self._impl.file_watcher.allow_out_of_scope_links)

    def _reset_directory(self, directory: str) -> None:
        path = directory
        if self.owner.directory != directory:
            rooted = bool(directory) and (
                directory[0] == os.sep or directory[-1] == os.sep
            )
            if not rooted and self.parent is not None:
                parent_path = dir_add_slash_at_end(
                    self.parent.snapshot.directory_info.filepath
                )
                path = parent_path + dir_add_slash_at_end(directory)
        self.snapshot.set_directory_info(path)

    def _handle_action(self, filename: str, action: Action, old_filename: str = "") -> None:
        listener = self.owner.listener
        if listener is None:
            return
        listener.handle_file_action(
            self.owner.watch_id,
            self.snapshot.directory_info.filepath,
            file_name_from_path(filename),
            action,
            old_filename,
        )

    def _resolve_child(self, path: str, name: str) -> str | None:
        """Return the key under which a subdirectory is watched, or None to skip it."""
        link, cur_path = get_link_real_path(path)
        if link:
            if not self._follow_symlinks():
                return None
            if (
                self._impl.path_in_watches(link)
                or self.owner.path_in_watches(link)
                or not self._impl.link_allowed(cur_path, link)
            ):
                return None
            return link
        if self.owner.path_in_watches(name) or self._impl.path_in_watches(name):
            return None
        return name

    # -- public interface --------------------------------------------------

    def add_children(self, report_new_files: bool = True) -> None:
        """Create watchers for the subdirectories found in the snapshot."""
        if not self.recursive:
            return
        for name, info in sorted(self.snapshot.files.items()):
            if not (info.is_directory() and info.is_readable()):
                continue
            key = self._resolve_child(info.filepath, name)
            if key is None:
                continue
            if report_new_files:
                self._handle_action(key, Action.ADD)
            child = DirWatcherGeneric(self, self.owner, key, self.recursive, report_new_files)
            self.directories[key] = child
            child.add_children(report_new_files)

    def watch(self, report_own_change: bool = False) -> None:
        """Scan this directory, report its changes, then scan the subdirectories."""
        diff = self.snapshot.scan()
        filepath = self.snapshot.directory_info.filepath

        if (
            report_own_change
            and diff.dir_changed
            and self.parent is not None
            and self.owner.listener is not None
        ):
            self.owner.listener.handle_file_action(
                self.owner.watch_id,
                path_remove_file_name(filepath),
                file_name_from_path(filepath),
                Action.MODIFIED,
            )

        if diff.changed():
            for info in diff.files_created:
                self._handle_action(info.filepath, Action.ADD)
            for info in diff.files_modified:
                self._handle_action(info.filepath, Action.MODIFIED)
            for info in diff.files_deleted:
                self._handle_action(info.filepath, Action.DELETE)
            for old_name, info in diff.files_moved:
                self._handle_action(info.filepath, Action.MOVED, old_name)

            for info in diff.dirs_created:
                self._create_directory(info.filepath)
            for info in diff.dirs_modified:
                self._handle_action(info.filepath, Action.MODIFIED)
            for info in diff.dirs_deleted:
                self._handle_action(info.filepath, Action.DELETE)
                self._remove_directory(info.filepath)
            for old_name, info in diff.dirs_moved:
                self._handle_action(info.filepath, Action.MOVED, old_name)
                self._move_directory(old_name, info.filepath)

        for child in list(self.directories.values()):
            child.watch()

    def watch_dir(self, directory: str) -> None:
        """Poll the watcher of ``directory``, reporting its own change too."""
        if self._allow_out_of_scope_links():
            watcher = self.find_dir_watcher(directory)
        else:
            watcher = self.find_dir_watcher_fast(directory)
        if watcher is not None:
            watcher.watch(True)

    def find_dir_watcher_fast(self, directory: str) -> DirWatcherGeneric | None:
        """Find the watcher of ``directory`` by walking its components below this one."""
        base = self.snapshot.directory_info.filepath
        if len(directory) >= len(base):
            directory = directory[max(len(base) - 1, 0):]
        if len(directory) == 1:
            return self

        watcher = self
        for part in split(directory, os.sep, False):
            child = watcher.directories.get(part)
            if child is None:
                return None
            watcher = child
        return watcher

    def find_dir_watcher(self, directory: str) -> DirWatcherGeneric | None:
        """Find the watcher of ``directory`` by searching the whole tree."""
        if self.snapshot.directory_info.filepath == directory:
            return self
        for key in sorted(self.directories):
            found = self.directories[key].find_dir_watcher(directory)
            if found is not None:
                return found
        return None

    def path_in_watches(self, path: str) -> bool:
        if self.snapshot.directory_info.filepath == path:
            return True
        return any(child.path_in_watches(path) for child in self.directories.values())

    def close(self) -> None:
        """Release the subdirectory watchers.

        A watcher whose directory was deleted first reports every entry it
        knew of as deleted.
        """
        if self._deleted:
            diff = self.snapshot.scan()
            if not self.snapshot.exists():
                for info in diff.files_deleted:
                    self._handle_action(info.filepath, Action.DELETE)
                for info in diff.dirs_deleted:
                    self._handle_action(info.filepath, Action.DELETE)

        for child in self.directories.values():
            if self._deleted:
                child._deleted = True
            child.close()
        self.directories.clear()

    # -- tree maintenance --------------------------------------------------

    def _create_directory(self, new_dir: str) -> DirWatcherGeneric | None:
        name = file_name_from_path(dir_remove_slash_at_end(new_dir))
        parent_path = dir_add_slash_at_end(self.snapshot.directory_info.filepath)
        path = dir_add_slash_at_end(parent_path + name)

        info = FileInfo(path)
        if not info.is_directory() or not info.is_readable():
            return None

        link, cur_path = get_link_real_path(path)
        skip = False
        if link:
            if not self._follow_symlinks():
                skip = True
            if (
                self._impl.path_in_watches(link)
                or self.owner.path_in_watches(link)
                or not self._impl.link_allowed(cur_path, link)
            ):
                skip = True
            else:
                path = link
        elif self.owner.path_in_watches(path) or self._impl.path_in_watches(path):
            skip = True

        if skip:
            return None

        self._handle_action(name, Action.ADD)
        child = DirWatcherGeneric(self, self.owner, path, self.recursive)
        child.add_children()
        child.watch()
        self.directories[name] = child
        return child

    def _remove_directory(self, directory: str) -> None:
        name = file_name_from_path(dir_remove_slash_at_end(directory))
        child = self.directories.pop(name, None)
        if child is not None:
            child._deleted = True
            child.close()

    def _move_directory(self, old_dir: str, new_dir: str) -> None:
        old_name = file_name_from_path(dir_remove_slash_at_end(old_dir))
        new_name = file_name_from_path(dir_remove_slash_at_end(new_dir))
        child = self.directories.pop(old_name, None)
        if child is not None:
            self.directories[new_name] = child
            child._reset_directory(new_name)