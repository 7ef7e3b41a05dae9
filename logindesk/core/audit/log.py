from __future__ import annotations

"""
Append-only login history.

One line per attempt: `username|yyyy-MM-dd HH:mm:ss|status`. The core never
rewrites or truncates this file.
"""

import logging
import os
import time
from typing import Any, Callable, Iterator, List, Optional

from logindesk.core.audit.export import export_to_file
from logindesk.core.audit.models import TIMESTAMP_FORMAT, AuditEvent, LoginStatus
from logindesk.core.errors import StorageError
from logindesk.core.records.codec import decode_record, encode_record, is_blank
from logindesk.core.records.io import append_line


class AuditEvents:
    """
    Re-iterable view over the log file; each iteration re-opens the file.
    """

    def __init__(self, log: "AuditLog"):
        self._log = log

    def __iter__(self) -> Iterator[AuditEvent]:
        return self._log._iter_events()


class AuditLog:
    def __init__(self, *, path: str, logger: Any = None, clock: Optional[Callable[[], float]] = None):
        self.path = path
        self.logger = logger or logging.getLogger("logindesk")
        self._clock = clock or time.time

    def now(self) -> str:
        return time.strftime(TIMESTAMP_FORMAT, time.localtime(self._clock()))

    def append(self, username: str, status: LoginStatus) -> bool:
        """
        Record one login attempt. Returns False (and logs) if the write failed;
        never raises for I/O problems.
        """
        # one attempt is one line: line breaks in the attempted name become spaces
        name = (username or "").replace("\r\n", " ").replace("\r", " ").replace("\n", " ")
        ev = AuditEvent(username=name, timestamp=self.now(), status=LoginStatus(status).value)
        try:
            append_line(self.path, encode_record(ev.to_fields()))
        except OSError as e:
            self.logger.warning("Login history write failed (%s): %s", self.path, e)
            return False
        return True

    def _iter_events(self) -> Iterator[AuditEvent]:
        if not os.path.exists(self.path):
            return
        try:
            with open(self.path, "r", encoding="utf-8", errors="replace", newline="") as f:
                for line in f:
                    if is_blank(line):
                        continue
                    try:
                        yield AuditEvent.from_fields(decode_record(line))
                    except ValueError:
                        continue
        except OSError as e:
            raise StorageError("Failed to read login history.", path=self.path, error=str(e)) from e

    def read_all(self) -> AuditEvents:
        return AuditEvents(self)

    def tail(self, n: int = 200) -> List[AuditEvent]:
        n = int(n)
        if n <= 0:
            return []
        items = list(self._iter_events())
        return items[-n:]

    def export(self, destination: str) -> str:
        return export_to_file(self.read_all(), destination)
