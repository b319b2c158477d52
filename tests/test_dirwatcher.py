import os
import shutil
from types import SimpleNamespace

import pytest

from pollwatch.dirwatcher import DirWatcherGeneric, WatcherGeneric
from pollwatch.events import Action, FileWatchListener


class Recorder(FileWatchListener):
    def __init__(self):
        self.events = []

    def handle_file_action(self, watch_id, directory, filename, action, old_filename=""):
        self.events.append((watch_id, directory, filename, action, old_filename))


class FakeImpl:
    def __init__(self, follow=False, out_of_scope=False, allowed=True):
        self.file_watcher = SimpleNamespace(
            follow_symlinks=follow, allow_out_of_scope_links=out_of_scope
        )
        self.allowed = allowed

    def path_in_watches(self, path):
        return False

    def link_allowed(self, cur_path, link):
        return self.allowed


@pytest.fixture
def base(tmp_path):
    root = tmp_path.resolve() / "root"
    root.mkdir()
    return str(root) + os.sep


def touch_dir(path, offset=-1000):
    st = os.stat(path)
    os.utime(path, (st.st_atime + offset, st.st_mtime + offset))


def make(base, recursive=True, impl=None, watch_id=7):
    listener = Recorder()
    watcher = WatcherGeneric(watch_id, base, listener, impl or FakeImpl(), recursive)
    return watcher, listener


def test_directory_gets_trailing_slash(base):
    watcher, _ = make(base.rstrip(os.sep))
    assert watcher.directory == base


def test_existing_files_are_not_reported(base):
    with open(base + "old.txt", "w") as fh:
        fh.write("x")
    watcher, listener = make(base)
    watcher.watch()
    assert listener.events == []


def test_created_file_is_reported(base):
    watcher, listener = make(base)
    with open(base + "a.txt", "w") as fh:
        fh.write("x")
    watcher.watch()
    assert listener.events == [(7, base, "a.txt", Action.ADD, "")]


def test_modified_file_is_reported(base):
    with open(base + "a.txt", "w") as fh:
        fh.write("x")
    watcher, listener = make(base)
    with open(base + "a.txt", "a") as fh:
        fh.write("more data")
    watcher.watch()
    assert listener.events == [(7, base, "a.txt", Action.MODIFIED, "")]


def test_deleted_file_is_reported(base):
    with open(base + "a.txt", "w") as fh:
        fh.write("x")
    watcher, listener = make(base)
    os.remove(base + "a.txt")
    touch_dir(base)
    watcher.watch()
    assert listener.events == [(7, base, "a.txt", Action.DELETE, "")]


def test_renamed_file_is_reported_as_move(base):
    with open(base + "a.txt", "w") as fh:
        fh.write("x")
    watcher, listener = make(base)
    os.rename(base + "a.txt", base + "b.txt")
    touch_dir(base)
    watcher.watch()
    assert listener.events == [(7, base, "b.txt", Action.MOVED, "a.txt")]


def test_recursive_watch_creates_child_watchers(base):
    os.mkdir(base + "sub")
    watcher, _ = make(base)
    assert list(watcher.dir_watch.directories) == ["sub"]
    child = watcher.dir_watch.directories["sub"]
    assert child.snapshot.directory_info.filepath == base + "sub" + os.sep
    assert child.parent is watcher.dir_watch


def test_non_recursive_watch_has_no_children(base):
    os.mkdir(base + "sub")
    watcher, _ = make(base, recursive=False)
    assert watcher.dir_watch.directories == {}


def test_file_in_subdirectory_is_reported(base):
    os.mkdir(base + "sub")
    watcher, listener = make(base)
    with open(base + "sub" + os.sep + "f.txt", "w") as fh:
        fh.write("x")
    watcher.watch()
    assert (7, base + "sub" + os.sep, "f.txt", Action.ADD, "") in listener.events


def test_new_subdirectory_is_reported_and_watched(base):
    watcher, listener = make(base)
    os.mkdir(base + "new")
    watcher.watch()
    assert listener.events == [(7, base, "new", Action.ADD, "")]
    assert "new" in watcher.dir_watch.directories
    assert watcher.path_in_watches(base + "new" + os.sep)


def test_deleted_subdirectory_reports_contents(base):
    sub = base + "sub" + os.sep
    os.mkdir(sub)
    with open(sub + "f.txt", "w") as fh:
        fh.write("x")
    watcher, listener = make(base)
    shutil.rmtree(sub)
    touch_dir(base)
    watcher.watch()
    assert listener.events[0] == (7, base, "sub", Action.DELETE, "")
    assert (7, sub, "f.txt", Action.DELETE, "") in listener.events
    assert watcher.dir_watch.directories == {}
    assert not watcher.path_in_watches(sub)


def test_path_in_watches(base):
    os.mkdir(base + "sub")
    watcher, _ = make(base)
    assert watcher.path_in_watches(base)
    assert watcher.path_in_watches(base + "sub" + os.sep)
    assert not watcher.path_in_watches(base + "missing" + os.sep)


def test_find_dir_watcher_variants(base):
    os.mkdir(base + "sub")
    watcher, _ = make(base)
    root = watcher.dir_watch
    child = root.directories["sub"]
    target = base + "sub" + os.sep
    assert root.find_dir_watcher(target) is child
    assert root.find_dir_watcher_fast(target) is child
    assert root.find_dir_watcher_fast(base) is root
    assert root.find_dir_watcher(base + "none" + os.sep) is None
    assert root.find_dir_watcher_fast(base + "none" + os.sep) is None


def test_watch_dir_reports_own_change(base):
    sub = base + "sub" + os.sep
    os.mkdir(sub)
    watcher, listener = make(base)
    touch_dir(sub)
    watcher.watch_dir(sub)
    assert listener.events == [(7, base, "sub", Action.MODIFIED, "")]


def test_report_new_files_on_construction(base):
    with open(base + "a.txt", "w") as fh:
        fh.write("x")
    watcher, listener = make(base, recursive=False)
    DirWatcherGeneric(None, watcher, base, False, True)
    assert listener.events == [(7, base, "a.txt", Action.ADD, "")]


def test_symlinked_directory_skipped_unless_followed(tmp_path, base):
    outside = tmp_path.resolve() / "outside"
    outside.mkdir()
    os.symlink(str(outside), base + "link")
    watcher, _ = make(base)
    assert watcher.dir_watch.directories == {}

    followed, _ = make(base, impl=FakeImpl(follow=True, allowed=True))
    assert list(followed.dir_watch.directories) == [str(outside) + os.sep]


def test_close_clears_children(base):
    os.mkdir(base + "sub")
    watcher, listener = make(base)
    root = watcher.dir_watch
    watcher.close()
    assert root.directories == {}
    assert watcher.dir_watch is None
    assert listener.events == []