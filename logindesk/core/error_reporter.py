from __future__ import annotations

import json
import os
import threading
import time
import traceback
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from logindesk.core.errors import ErrorKind, LoginDeskError, Severity, StorageError
from logindesk.core.redaction import redact


@dataclass
class ErrorReporterConfig:
    include_tracebacks: bool = False


class ErrorReporter:
    def __init__(self, *, path: str = os.path.join("logs", "errors.jsonl"), cfg: Optional[ErrorReporterConfig] = None, logger: Any = None):
        self.path = path
        self.cfg = cfg or ErrorReporterConfig()
        self.logger = logger
        self._lock = threading.Lock()
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)

    def report_exception(self, exc: BaseException, *, action: str, context: Optional[Dict[str, Any]] = None) -> LoginDeskError:
        err = normalize_exception(exc, context=context or {})
        self.write_error(err, action=action, internal_exc=exc)
        return err

    def write_error(self, err: LoginDeskError, *, action: str, internal_exc: Optional[BaseException] = None) -> None:
        entry: Dict[str, Any] = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            "action": action,
            "error_code": err.code,
            "kind": err.kind.value,
            "severity": err.severity.value,
            "user_message": err.user_message,
            "safe_context": redact(err.context or {}),
        }
        if self.cfg.include_tracebacks and internal_exc is not None:
            entry["internal_context"] = {"traceback": "".join(traceback.format_exception(type(internal_exc), internal_exc, internal_exc.__traceback__, limit=30))}
        line = json.dumps(entry, ensure_ascii=False)
        try:
            with self._lock:
                with open(self.path, "a", encoding="utf-8") as f:
                    f.write(line + "\n")
        except OSError as e:
            if self.logger is not None:
                self.logger.warning("Error log write failed (%s): %s", self.path, e)

    def tail(self, n: int = 20) -> List[Dict[str, Any]]:
        if not os.path.exists(self.path):
            return []
        with open(self.path, "r", encoding="utf-8") as f:
            lines = f.readlines()
        out: List[Dict[str, Any]] = []
        for x in lines[-max(1, int(n)) :]:
            try:
                out.append(json.loads(x))
            except json.JSONDecodeError:
                continue
        return out


def normalize_exception(exc: BaseException, *, context: Dict[str, Any]) -> LoginDeskError:
    # Passthrough
    if isinstance(exc, LoginDeskError):
        return exc
    ctx = dict(context or {})
    if isinstance(exc, OSError):
        return StorageError(error=str(exc), **ctx)
    # Generic safe error
    return LoginDeskError(
        code="unknown_error",
        user_message="Something went wrong.",
        severity=Severity.ERROR,
        kind=ErrorKind.storage,
        context={"error_type": type(exc).__name__, **ctx},
    )
