# pollwatch

pollwatch watches directories for changes by taking snapshots of their contents
and comparing them. It reports files and directories that were added, modified,
deleted or moved, and can descend into subdirectories. It uses only the
standard library.

## Installation

```
pip install pollwatch
```

## Usage

Write a listener by subclassing `FileWatchListener` and implementing
`handle_file_action`. Then register one or more directories with a
`FileWatcher`:

```python
from pollwatch.events import Action, FileWatchListener
from pollwatch.filewatcher import FileWatcher


class PrintListener(FileWatchListener):
    def handle_file_action(self, watch_id, directory, filename, action, old_filename=""):
        if action is Action.MOVED:
            print(f"[{watch_id}] {directory}{old_filename} -> {filename}")
        else:
            print(f"[{watch_id}] {action.name}: {directory}{filename}")


with FileWatcher(interval=1.0) as watcher:
    watch_id = watcher.add_watch("/tmp/inbox", PrintListener(), recursive=True)

    # Either start the background polling thread...
    watcher.watch()

    # ...or drive it yourself, one pass at a time, in the calling thread:
    watcher.poll()

    print(watcher.directories())
    watcher.remove_watch(watch_id)
```

`FileWatcher(interval=...)` sets the number of seconds the background thread
waits between passes (1.0 by default). `watch()` starts that thread once;
`close()` (or leaving the `with` block) stops it and releases every watch.
When the thread is running, listeners are called from it.

`add_watch(directory, listener, recursive=False)` returns a numeric watch id.
`remove_watch` accepts either that id or the watched directory as listed by
`directories()`, which always ends with the path separator.

The `directory` passed to `handle_file_action` is the directory holding
`filename`, with a trailing separator.

### Events

`Action` has four members:

- `Action.ADD` – a file or directory appeared.
- `Action.DELETE` – a file or directory was removed.
- `Action.MODIFIED` – the stat data (size, time, owner, mode) of a file or
  directory changed.
- `Action.MOVED` – an entry reappeared under another name in the same directory
  with the same inode; `old_filename` holds the previous name. Inodes are not
  used on Windows, so there a rename is reported as a delete and an add.

### Symbolic links

`FileWatcher` has two flags, both `False` by default:

- `follow_symlinks` – recursive watches descend into symlinked directories.
- `allow_out_of_scope_links` – together with `follow_symlinks`, such links may
  point outside the watched tree.

### Errors

`add_watch` raises `pollwatch.errors.WatchError` when a directory cannot be
watched. Its `code` is an `ErrorCode`:

- `FILE_NOT_FOUND` – the path is not a directory.
- `FILE_NOT_READABLE` – the directory is not readable.
- `FILE_REPEATED` – the directory, or the target of the link, is already watched.
- `FILE_OUT_OF_SCOPE` – the path is a link pointing outside its parent
  directory and out-of-scope links are not allowed.

The message of the most recent error is available from
`pollwatch.errors.last_error_log()`.

### Lower-level pieces

- `pollwatch.snapshot.DirectorySnapshot` records the entries of one directory;
  its `scan()` returns a `SnapshotDiff` of what was created, modified, moved or
  deleted since the last scan.
- `pollwatch.fileinfo.FileInfo` holds the stat data of one path.
- `pollwatch.filesystem` has path helpers such as `file_name_from_path`,
  `path_remove_file_name` and `files_info_from_path`.

## What it does not do

pollwatch only polls. It does not use operating-system change notifications,
so changes are seen at the next pass, not as they happen. Deleted entries are
only noticed once the directory's own stat data has changed. There is no
command-line tool; the package is a library.

## Running the tests

```
pip install -e ".[test]"
pytest
```