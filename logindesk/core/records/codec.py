from __future__ import annotations

"""
Pipe-delimited record lines.

A literal `|` inside a field is written as `\\|`. That is the only escape:
a backslash followed by anything else is kept as-is, and the backslash
itself is never escaped.
"""

from typing import List, Optional, Sequence


DELIMITER = "|"
ESCAPE = "\\"
ESCAPED_DELIMITER = ESCAPE + DELIMITER


class RecordParseError(ValueError):
    def __init__(self, message: str, *, line: str = "", fields: int = 0):
        super().__init__(message)
        self.line = line
        self.fields = fields


def escape_field(value: Optional[str]) -> str:
    if value is None:
        return ""
    return str(value).replace(DELIMITER, ESCAPED_DELIMITER)


def encode_record(fields: Sequence[Optional[str]]) -> str:
    return DELIMITER.join(escape_field(f) for f in fields)


def decode_record(line: str, *, expected: Optional[int] = None) -> List[str]:
    """
    Split on unescaped `|` and undo the escape.

    Trailing newline characters are ignored. When `expected` is given, a line
    with fewer fields raises RecordParseError; extra fields are kept.
    """
    text = line.rstrip("\r\n")
    out: List[str] = []
    cur: List[str] = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == ESCAPE and i + 1 < n and text[i + 1] == DELIMITER:
            cur.append(DELIMITER)
            i += 2
            continue
        if ch == DELIMITER:
            out.append("".join(cur))
            cur = []
        else:
            cur.append(ch)
        i += 1
    out.append("".join(cur))
    if expected is not None and len(out) < int(expected):
        raise RecordParseError(f"expected {expected} fields, got {len(out)}", line=text, fields=len(out))
    return out


def is_blank(line: str) -> bool:
    return not line.strip()
