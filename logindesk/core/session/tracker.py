from __future__ import annotations

"""
SessionTracker: remembers who is logged in across process restarts.

The session file holds zero or one line with the current username. A blank
line, a missing file or a username that no longer has an account all mean
"no session".
"""

import logging
from typing import Any, Optional

from logindesk.core.errors import StorageError
from logindesk.core.records.io import atomic_write_lines, read_lines


class SessionTracker:
    def __init__(self, *, path: str, accounts: Any, logger: Any = None):
        self.path = path
        self.accounts = accounts
        self.logger = logger or logging.getLogger("logindesk")

    def set_current(self, username: Optional[str]) -> None:
        try:
            atomic_write_lines(self.path, [username or ""])
        except OSError as e:
            raise StorageError("Failed to save session.", path=self.path, error=str(e)) from e

    def clear(self) -> None:
        self.set_current("")

    def get_current(self) -> Optional[str]:
        try:
            lines = read_lines(self.path)
        except OSError as e:
            self.logger.warning("Session file unreadable (%s): %s", self.path, e)
            return None
        if not lines:
            return None
        last = lines[0]
        if not last.strip():
            return None
        if self.accounts.find(last) is None:
            self.logger.info("Ignoring stale session for a deleted account.")
            return None
        return last
