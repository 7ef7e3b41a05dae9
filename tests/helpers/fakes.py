from __future__ import annotations

from typing import Any, List, Optional, Tuple


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0):
        self._t = float(start)

    def time(self) -> float:
        return self._t

    def advance(self, seconds: float) -> None:
        self._t += float(seconds)


class RecordingListener:
    def __init__(self):
        self.calls: List[Tuple[Any, Optional[str]]] = []

    def __call__(self, state, account) -> None:  # noqa: ANN001
        self.calls.append((state, getattr(account, "username", None)))
