from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict


TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
AUDIT_FIELDS = 3


class LoginStatus(str, Enum):
    success = "Success"
    failed = "Failed"


class AuditEvent(BaseModel):
    """
    One login attempt outcome. `status` is kept as text so that partial lines
    read back from disk (missing fields default to "") stay representable.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    username: str = ""
    timestamp: str = ""
    status: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status == LoginStatus.success.value

    def to_fields(self) -> List[str]:
        return [self.username, self.timestamp, self.status]

    @classmethod
    def from_fields(cls, fields: List[str]) -> "AuditEvent":
        padded = list(fields) + [""] * (AUDIT_FIELDS - len(fields))
        return cls(username=padded[0], timestamp=padded[1], status=padded[2])
