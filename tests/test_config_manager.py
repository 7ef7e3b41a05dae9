from __future__ import annotations

import json
import os

import pytest

from logindesk.core.config.manager import ConfigManager
from logindesk.core.config.paths import ConfigFsPaths
from logindesk.core.errors import ConfigError


def _mk_cm(tmp_path) -> ConfigManager:
    return ConfigManager(fs=ConfigFsPaths(root=str(tmp_path)), logger=None)


def test_missing_config_writes_defaults(tmp_path):
    cm = _mk_cm(tmp_path)
    cfg = cm.load_all()
    assert cfg.storage.users_file == "users.db"
    assert cfg.builtin_admin.default_password == "admin123"
    assert os.path.exists(cm.fs.app)
    assert cm.users_path == os.path.join(str(tmp_path), "data", "users.db")
    assert cm.default_export_path().endswith("login_history.csv")


def test_get_before_load_raises(tmp_path):
    with pytest.raises(ConfigError):
        _mk_cm(tmp_path).get()


def test_unknown_fields_rejected(tmp_path):
    cm = _mk_cm(tmp_path)
    data = cm.load_all().model_dump()
    data["storage"]["nope"] = 1
    with pytest.raises(ConfigError):
        cm.save(data)
    # file still holds the last valid config
    assert cm.load_all().storage.users_file == "users.db"


def test_save_round_trips(tmp_path):
    cm = _mk_cm(tmp_path)
    data = cm.load_all().model_dump()
    data["storage"]["data_dir"] = "store"
    data["logging"]["level"] = "debug"
    cm.save(data)
    cfg = _mk_cm(tmp_path).load_all()
    assert cfg.storage.data_dir == "store"
    assert cfg.logging.level == "DEBUG"


def test_file_names_must_be_plain(tmp_path):
    cm = _mk_cm(tmp_path)
    data = cm.load_all().model_dump()
    data["storage"]["users_file"] = os.path.join("..", "users.db")
    with pytest.raises(ConfigError):
        cm.save(data)


def test_corrupt_config_is_quarantined(tmp_path):
    fs = ConfigFsPaths(root=str(tmp_path))
    os.makedirs(fs.config_dir)
    with open(fs.app, "w", encoding="utf-8") as f:
        f.write("{not json")
    cfg = ConfigManager(fs=fs).load_all()
    assert cfg.export.default_filename == "login_history.csv"
    assert any("corrupt" in b for b in os.listdir(fs.backups_dir))
    with open(fs.app, "r", encoding="utf-8") as f:
        assert json.load(f)["config_version"] == 1


def test_invalid_values_raise(tmp_path):
    fs = ConfigFsPaths(root=str(tmp_path))
    os.makedirs(fs.config_dir)
    with open(fs.app, "w", encoding="utf-8") as f:
        json.dump({"logging": {"level": "LOUD"}}, f)
    with pytest.raises(ConfigError):
        ConfigManager(fs=fs).load_all()


def test_failed_config_write_keeps_previous_file(tmp_path, monkeypatch):
    cm = _mk_cm(tmp_path)
    data = cm.load_all().model_dump()
    with open(cm.fs.app, "r", encoding="utf-8") as f:
        before = f.read()

    def boom(*_a, **_k):
        raise OSError("replace failed")

    monkeypatch.setattr(os, "replace", boom)
    data["storage"]["data_dir"] = "elsewhere"
    with pytest.raises(OSError):
        cm.save(data)
    with open(cm.fs.app, "r", encoding="utf-8") as f:
        assert f.read() == before
    assert [n for n in os.listdir(cm.fs.config_dir) if n.startswith(".tmp_")] == []
