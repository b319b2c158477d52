"""File watcher front end and the polling backend that drives it."""

from __future__ import annotations

import abc
import threading

from pollwatch.dirwatcher import WatcherGeneric
from pollwatch.errors import ErrorCode, record_error
from pollwatch.events import FileWatchListener
from pollwatch.fileinfo import FileInfo
from pollwatch.filesystem import dir_add_slash_at_end, get_link_real_path
from pollwatch.textutil import str_starts_with

POLL_INTERVAL = 1.0


class FileWatcherImpl(abc.ABC):
    """Common state and behaviour of the watcher backends."""

    def __init__(self, file_watcher: FileWatcher) -> None:
        self.file_watcher = file_watcher
        self._init_ok = False
        self.is_generic = False

    def init_ok(self) -> bool:
        """Return whether the backend started and has not been closed."""
        return self._init_ok

    def link_allowed(self, cur_path: str, link: str) -> bool:
        """Return whether a symlink to ``link`` found in ``cur_path`` may be followed."""
        watcher = self.file_watcher
        if watcher.follow_symlinks and watcher.allow_out_of_scope_links:
            return True
        return str_starts_with(cur_path, link) != -1

    @abc.abstractmethod
    def add_watch(
        self, directory: str, listener: FileWatchListener, recursive: bool
    ) -> int:
        """Watch ``directory`` and return the new watch id; raises WatchError."""

    @abc.abstractmethod
    def remove_watch(self, target: int | str) -> None:
        """Stop the watch with the given id or directory."""

    @abc.abstractmethod
    def watch(self) -> None:
        """Start watching in the background."""

    @abc.abstractmethod
    def directories(self) -> list[str]:
        """Return the watched directories."""

    @abc.abstractmethod
    def path_in_watches(self, path: str) -> bool:
        """Return whether ``path`` is already watched."""

    @abc.abstractmethod
    def close(self) -> None:
        """Stop watching and release every watch."""


class FileWatcherGeneric(FileWatcherImpl):
    """Backend that finds changes by polling directory snapshots."""

    def __init__(self, file_watcher: FileWatcher, interval: float = POLL_INTERVAL) -> None:
        super().__init__(file_watcher)
        self._init_ok = True
        self.is_generic = True
        self.interval = interval
        self._last_watch_id = 0
        self._watches: list[WatcherGeneric] = []
        self._lock = threading.RLock()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def add_watch(
        self, directory: str, listener: FileWatchListener, recursive: bool = False
    ) -> int:
        path = dir_add_slash_at_end(directory)
        info = FileInfo(path)

        with self._lock:
            if not info.is_directory():
                raise record_error(ErrorCode.FILE_NOT_FOUND, path)
            if not info.is_readable():
                raise record_error(ErrorCode.FILE_NOT_READABLE, path)
            if self.path_in_watches(path):
                raise record_error(ErrorCode.FILE_REPEATED, path)

            link, cur_path = get_link_real_path(path)
            if link:
                if self.path_in_watches(link):
                    raise record_error(ErrorCode.FILE_REPEATED, path)
                if not self.link_allowed(cur_path, link):
                    raise record_error(ErrorCode.FILE_OUT_OF_SCOPE, path)
                path = link

            self._last_watch_id += 1
            watch = WatcherGeneric(self._last_watch_id, path, listener, self, recursive)
            self._watches.append(watch)
            return watch.watch_id

    def remove_watch(self, target: int | str) -> None:
        with self._lock:
            for watch in self._watches:
                matches = (
                    watch.directory == target
                    if isinstance(target, str)
                    else watch.watch_id == target
                )
                if matches:
                    self._watches.remove(watch)
                    watch.close()
                    return

    def watch(self) -> None:
        if self._thread is None:
            self._thread = threading.Thread(
                target=self._run, name="pollwatch", daemon=True
            )
            self._thread.start()

    def poll(self) -> None:
        """Scan every watch once, reporting changes to the listeners."""
        with self._lock:
            for watch in list(self._watches):
                watch.watch()

    def _run(self) -> None:
        while self._init_ok:
            self.poll()
            if self._stop.wait(self.interval):
                break

    def directories(self) -> list[str]:
        with self._lock:
            return [watch.directory for watch in self._watches]

    def path_in_watches(self, path: str) -> bool:
        with self._lock:
            return any(
                watch.directory == path or watch.path_in_watches(path)
                for watch in self._watches
            )

    def close(self) -> None:
        self._init_ok = False
        self._stop.set()
        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        with self._lock:
            watches, self._watches = self._watches, []
        for watch in watches:
            watch.close()


class FileWatcher:
    """Watches directories and reports their changes to listeners.

    ``follow_symlinks`` lets recursive watches enter symlinked directories;
    ``allow_out_of_scope_links`` also lets them leave the watched tree.
    """

    def __init__(self, interval: float = POLL_INTERVAL) -> None:
        self.follow_symlinks = False
        self.allow_out_of_scope_links = False
        self._impl: FileWatcherImpl = FileWatcherGeneric(self, interval)

    @property
    def backend(self) -> FileWatcherImpl:
        return self._impl

    def add_watch(
        self, directory: str, listener: FileWatchListener, recursive: bool = False
    ) -> int:
        """Watch ``directory`` and return the watch id; raises WatchError."""
        return self._impl.add_watch(directory, listener, recursive)

    def remove_watch(self, target: int | str) -> None:
        """Stop the watch with the given id or directory."""
        self._impl.remove_watch(target)

    def watch(self) -> None:
        """Start polling in a background thread."""
        self._impl.watch()

    def poll(self) -> None:
        """Scan every watch once in the calling thread."""
        if isinstance(self._impl, FileWatcherGeneric):
            self._impl.poll()

    def directories(self) -> list[str]:
        return self._impl.directories()

    def close(self) -> None:
        """Stop the background thread and release every watch."""
        self._impl.close()

    def __enter__(self) -> FileWatcher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()