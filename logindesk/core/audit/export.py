from __future__ import annotations

import csv
import io
import os
from typing import Iterable

from logindesk.core.audit.models import AuditEvent
from logindesk.core.errors import StorageError


EXPORT_HEADER = ["username", "datetime", "status"]


def _write_table(f, events: Iterable[AuditEvent]) -> int:  # noqa: ANN001
    # header is bare; every data field is quoted with embedded quotes doubled
    f.write(",".join(EXPORT_HEADER) + "\n")
    w = csv.writer(f, quoting=csv.QUOTE_ALL, doublequote=True, lineterminator="\n")
    n = 0
    for ev in events:
        w.writerow([ev.username, ev.timestamp, ev.status])
        n += 1
    return n


def export_table(events: Iterable[AuditEvent]) -> str:
    buf = io.StringIO()
    _write_table(buf, events)
    return buf.getvalue()


def export_to_file(events: Iterable[AuditEvent], destination: str) -> str:
    """
    Write the export table to a caller-chosen path and return its absolute path.
    """
    out = os.path.abspath(destination)
    try:
        os.makedirs(os.path.dirname(out) or ".", exist_ok=True)
        with open(out, "w", encoding="utf-8", newline="") as f:
            _write_table(f, events)
    except OSError as e:
        raise StorageError("Export failed.", path=out, error=str(e)) from e
    return out
