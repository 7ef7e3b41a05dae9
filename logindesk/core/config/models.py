from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StorageConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    data_dir: str = "data"
    users_file: str = "users.db"
    history_file: str = "history.db"
    session_file: str = "session.db"

    @field_validator("users_file", "history_file", "session_file")
    @classmethod
    def _plain_file_name(cls, v: str) -> str:
        if not v or os.path.basename(v) != v:
            raise ValueError("must be a plain file name")
        return v


class BuiltinAdminConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    default_password: str = Field(default="admin123", min_length=1)
    default_question: str = "Default admin question"
    default_answer: str = "admin"


class ExportConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    default_filename: str = "login_history.csv"


class LoggingConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    log_dir: str = "logs"
    level: str = "INFO"
    max_bytes: int = Field(default=1_000_000, ge=1024)
    backup_count: int = Field(default=5, ge=0)

    @field_validator("level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        lv = str(v).upper()
        if lv not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {v}")
        return lv


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    config_version: int = Field(default=1, ge=1)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    builtin_admin: BuiltinAdminConfig = Field(default_factory=BuiltinAdminConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
