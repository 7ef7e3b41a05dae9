from __future__ import annotations

"""
LoginDeskApp: the handle the desktop UI holds.

UI callbacks go through `run()`, which never raises: every failure comes back
as an OperationResult carrying a readable message and whether it was an
account problem or a storage problem.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

from logindesk.core.accounts.store import AccountStore
from logindesk.core.audit.log import AuditLog
from logindesk.core.auth.service import AuthService
from logindesk.core.config.manager import ConfigManager
from logindesk.core.error_reporter import ErrorReporter
from logindesk.core.errors import ErrorKind
from logindesk.core.session.tracker import SessionTracker


@dataclass(frozen=True)
class OperationResult:
    ok: bool
    value: Any = None
    error_code: Optional[str] = None
    message: str = ""
    kind: Optional[ErrorKind] = None

    @property
    def is_storage_problem(self) -> bool:
        return self.kind == ErrorKind.storage


@dataclass
class LoginDeskApp:
    config: ConfigManager
    accounts: AccountStore
    audit: AuditLog
    session: SessionTracker
    auth: AuthService
    errors: ErrorReporter
    logger: Any = None

    def run(self, action: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> OperationResult:
        try:
            value = fn(*args, **kwargs)
        except Exception as e:  # noqa: BLE001
            err = self.errors.report_exception(e, action=action)
            if self.logger is not None:
                self.logger.warning("%s failed: %s (%s)", action, err.code, err.kind.value)
            return OperationResult(ok=False, error_code=err.code, message=err.user_message, kind=err.kind)
        return OperationResult(ok=True, value=value)

    def export_history(self, destination: Optional[str] = None) -> OperationResult:
        dest = destination or self.config.default_export_path()
        res = self.run("audit.export", self.audit.export, dest)
        if res.ok:
            return OperationResult(ok=True, value=res.value, message=f"Exported to: {res.value}")
        return res
