"""File system event kinds and the listener interface that receives them."""

from __future__ import annotations

import abc
import enum


class Action(enum.IntEnum):
    """Kind of change reported for a file or directory."""

    ADD = 1
    DELETE = 2
    MODIFIED = 3
    MOVED = 4


class FileWatchListener(abc.ABC):
    """Receiver of the changes detected in watched directories."""

    @abc.abstractmethod
    def handle_file_action(
        self,
        watch_id: int,
        directory: str,
        filename: str,
        action: Action,
        old_filename: str = "",
    ) -> None:
        """Handle one change.

        ``directory`` is the directory holding ``filename``; ``old_filename``
        is only set for :attr:`Action.MOVED`.
        """