from __future__ import annotations

import os
from typing import Any, Dict, Optional

from pydantic import ValidationError

from logindesk.core.config.io import atomic_write_json, ensure_dirs, quarantine_corrupt, read_json_file
from logindesk.core.config.models import AppConfig
from logindesk.core.config.paths import ConfigFsPaths
from logindesk.core.errors import ConfigError


class ConfigManager:
    def __init__(self, *, fs: Optional[ConfigFsPaths] = None, logger=None, read_only: bool = False):
        self.fs = fs or ConfigFsPaths(".")
        self.logger = logger
        self.read_only = read_only
        self._cfg: Optional[AppConfig] = None

    # ---------- public API ----------
    def load_all(self) -> AppConfig:
        ensure_dirs(self.fs.config_dir)
        rr = read_json_file(self.fs.app)
        raw: Dict[str, Any]
        if rr.ok:
            raw = rr.data
        elif rr.error == "missing":
            raw = AppConfig().model_dump()
            if not self.read_only:
                atomic_write_json(self.fs.app, raw)
                self._log("info", "Created default config at %s", self.fs.app)
        elif rr.error and (rr.error.startswith("corrupt_json") or rr.error == "not_object"):
            moved = None if self.read_only else quarantine_corrupt(self.fs.app, self.fs.backups_dir)
            self._log("warning", "Config %s is corrupt (%s); using defaults. Moved to %s", self.fs.app, rr.error, moved)
            raw = AppConfig().model_dump()
            if not self.read_only:
                atomic_write_json(self.fs.app, raw)
        else:
            raise ConfigError("Configuration could not be read.", path=self.fs.app, error=rr.error)

        self._cfg = self._validate(raw)
        return self._cfg

    def get(self) -> AppConfig:
        if self._cfg is None:
            raise ConfigError("Config not loaded.")
        return self._cfg

    def save(self, data: Dict[str, Any]) -> AppConfig:
        """
        Validate first, then write atomically.
        """
        if self.read_only:
            raise ConfigError("Config manager is read-only.")
        if not isinstance(data, dict):
            raise ConfigError("Config data must be an object.")
        cfg = self._validate(data)
        atomic_write_json(self.fs.app, cfg.model_dump())
        self._cfg = cfg
        return cfg

    # ---------- resolved paths ----------
    @property
    def data_dir(self) -> str:
        return self.fs.resolve(self.get().storage.data_dir)

    @property
    def users_path(self) -> str:
        return os.path.join(self.data_dir, self.get().storage.users_file)

    @property
    def history_path(self) -> str:
        return os.path.join(self.data_dir, self.get().storage.history_file)

    @property
    def session_path(self) -> str:
        return os.path.join(self.data_dir, self.get().storage.session_file)

    @property
    def log_dir(self) -> str:
        return self.fs.resolve(self.get().logging.log_dir)

    def default_export_path(self) -> str:
        return os.path.join(self.fs.root, self.get().export.default_filename)

    # ---------- internals ----------
    def _validate(self, raw: Dict[str, Any]) -> AppConfig:
        try:
            return AppConfig.model_validate(raw)
        except ValidationError as e:
            raise ConfigError("Invalid configuration.", path=self.fs.app, error=str(e)) from e

    def _log(self, level: str, msg: str, *args: Any) -> None:
        if self.logger is not None:
            getattr(self.logger, level)(msg, *args)
