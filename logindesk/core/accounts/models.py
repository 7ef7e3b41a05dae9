from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


BUILTIN_ADMIN_USERNAME = "admin"
ACCOUNT_FIELDS = 5


class Role(str, Enum):
    ADMIN = "ADMIN"
    USER = "USER"


class Account(BaseModel):
    model_config = ConfigDict(extra="forbid")

    username: str = Field(min_length=1)
    password: str = ""
    role: Role = Role.USER
    security_question: str = ""
    security_answer: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_builtin_admin(self) -> bool:
        return self.username == BUILTIN_ADMIN_USERNAME

    def to_fields(self) -> List[str]:
        return [self.username, self.password, self.role.value, self.security_question, self.security_answer]

    @classmethod
    def from_fields(cls, fields: List[str]) -> "Account":
        # username|password|role|question|answer; extra trailing fields are ignored
        return cls(
            username=fields[0],
            password=fields[1],
            role=Role(fields[2]),
            security_question=fields[3],
            security_answer=fields[4],
        )
