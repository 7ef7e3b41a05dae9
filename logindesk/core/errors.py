from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict

from logindesk.core.redaction import redact


class Severity(str, Enum):
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ErrorKind(str, Enum):
    # "account" problems are expected user-facing outcomes; "storage" problems mean disk trouble.
    account = "account"
    storage = "storage"


@dataclass
class LoginDeskError(Exception):
    code: str
    user_message: str
    severity: Severity = Severity.WARN
    kind: ErrorKind = ErrorKind.account
    context: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        super().__init__(self.code)

    def __str__(self) -> str:
        return self.user_message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "user_message": self.user_message,
            "severity": self.severity.value,
            "kind": self.kind.value,
            "context": redact(self.context or {}),
        }


# ---- Storage ----
class StorageError(LoginDeskError):
    def __init__(self, user_message: str = "Storage error: the data files could not be read or written.", **ctx: Any):
        super().__init__("storage_error", user_message, severity=Severity.ERROR, kind=ErrorKind.storage, context=ctx)


# ---- Account / business rules ----
class ValidationError(LoginDeskError):
    def __init__(self, user_message: str = "Invalid input.", **ctx: Any):
        super().__init__("validation_error", user_message, context=ctx)


class UsernameTakenError(LoginDeskError):
    def __init__(self, user_message: str = "Username exists.", **ctx: Any):
        super().__init__("username_taken", user_message, context=ctx)


class UserNotFoundError(LoginDeskError):
    def __init__(self, user_message: str = "User not found.", **ctx: Any):
        super().__init__("user_not_found", user_message, context=ctx)


class InvalidCredentialsError(LoginDeskError):
    def __init__(self, user_message: str = "Invalid username or password.", **ctx: Any):
        super().__init__("invalid_credentials", user_message, context=ctx)


class WrongCurrentPasswordError(LoginDeskError):
    def __init__(self, user_message: str = "Current password incorrect.", **ctx: Any):
        super().__init__("wrong_current_password", user_message, context=ctx)


class WrongAnswerError(LoginDeskError):
    def __init__(self, user_message: str = "Incorrect answer.", **ctx: Any):
        super().__init__("wrong_answer", user_message, context=ctx)


class ProtectedAccountError(LoginDeskError):
    def __init__(self, user_message: str = "The built-in admin account cannot be deleted or demoted.", **ctx: Any):
        super().__init__("protected_account", user_message, context=ctx)


class ConfigError(LoginDeskError):
    def __init__(self, user_message: str = "Configuration error.", **ctx: Any):
        super().__init__("config_error", user_message, severity=Severity.CRITICAL, kind=ErrorKind.storage, context=ctx)
