"""Watch error codes, the exception carrying them and the last-error log."""

from __future__ import annotations

import enum
import threading


class ErrorCode(enum.IntEnum):
    """Reasons a watch could not be added."""

    NO_ERROR = 0
    FILE_NOT_FOUND = -1
    FILE_REPEATED = -2
    FILE_OUT_OF_SCOPE = -3
    FILE_NOT_READABLE = -4
    FILE_REMOTE = -5
    UNSPECIFIED = -6


class WatchError(Exception):
    """Raised when a watch operation fails."""

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return self.message


_lock = threading.Lock()
_last_error = ""


def error_message(code: ErrorCode, log: str) -> str:
    """Return the human readable message for ``code`` about ``log``."""
    if code is ErrorCode.FILE_NOT_FOUND:
        return "File not found ( " + log + " )"
    if code is ErrorCode.FILE_REPEATED:
        return "File reapeated in watches ( " + log + " )"
    if code is ErrorCode.FILE_OUT_OF_SCOPE:
        return "Symlink file out of scope ( " + log + " )"
    if code is ErrorCode.FILE_REMOTE:
        return (
            "File is located in a remote file system, use a generic watcher. ( "
            + log
            + " )"
        )
    return log


def record_error(code: ErrorCode, log: str) -> WatchError:
    """Store the message for ``code`` as the last error and return the exception."""
    global _last_error
    message = error_message(code, log)
    with _lock:
        _last_error = message
    return WatchError(code, message)


def last_error_log() -> str:
    """Return the message of the most recently recorded error."""
    with _lock:
        return _last_error