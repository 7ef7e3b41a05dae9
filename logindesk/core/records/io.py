from __future__ import annotations

import os
import tempfile
from typing import Iterable, List


def ensure_parent(path: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)


def read_lines(path: str) -> List[str]:
    """
    Read all lines without trailing newlines. A missing file reads as no lines;
    any other OSError propagates.
    """
    if not os.path.exists(path):
        return []
    with open(path, "r", encoding="utf-8", errors="replace", newline="") as f:
        return [line.rstrip("\r\n") for line in f]


def atomic_write_text(path: str, text: str, *, suffix: str = ".tmp") -> None:
    """
    Write `text` to a temp file beside `path`, fsync, then os.replace.
    On failure the previous file is left untouched.
    """
    ensure_parent(path)
    fd, tmp = tempfile.mkstemp(prefix=".tmp_", suffix=suffix, dir=os.path.dirname(path) or ".")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
            try:
                f.flush()
                os.fsync(f.fileno())
            except OSError:
                pass
        os.replace(tmp, path)
    finally:
        try:
            if os.path.exists(tmp):
                os.remove(tmp)
        except OSError:
            pass


def append_line(path: str, line: str) -> None:
    ensure_parent(path)
    with open(path, "a", encoding="utf-8", newline="\n") as f:
        f.write(line + "\n")
        try:
            f.flush()
            os.fsync(f.fileno())
        except OSError:
            pass


def atomic_write_lines(path: str, lines: Iterable[str]) -> None:
    atomic_write_text(path, "".join(line + "\n" for line in lines), suffix=".db")
