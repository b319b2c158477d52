"""Polling file system watcher reporting added, modified, deleted and moved entries."""

__version__ = "0.1.0"

__all__ = [
    "dirwatcher",
    "errors",
    "events",
    "fileinfo",
    "filesystem",
    "filewatcher",
    "snapshot",
    "textutil",
]