from __future__ import annotations

import logging
import os

from logindesk.core.accounts.models import Role
from logindesk.core.auth.service import SessionState
from logindesk.core.errors import ErrorKind
from logindesk.core.logger import setup_logging
from logindesk.core.startup import bootstrap


def test_first_run_bootstraps_admin(tmp_path):
    app = bootstrap(str(tmp_path))
    assert app.accounts.get("admin").role == Role.ADMIN
    assert os.path.exists(os.path.join(str(tmp_path), "data", "users.db"))
    assert app.auth.state == SessionState.ANONYMOUS


def test_restart_resumes_last_user(tmp_path):
    app = bootstrap(str(tmp_path))
    app.auth.register("alice", "pw")
    app.auth.login("alice", "pw")

    again = bootstrap(str(tmp_path))
    assert again.auth.state == SessionState.AUTHENTICATED
    assert again.auth.current_account.username == "alice"

    again.auth.logout()
    assert bootstrap(str(tmp_path)).auth.state == SessionState.ANONYMOUS


def test_resume_can_be_skipped(tmp_path):
    app = bootstrap(str(tmp_path))
    app.auth.login("admin", "admin123")
    assert bootstrap(str(tmp_path), resume=False).auth.state == SessionState.ANONYMOUS


def test_run_reports_account_and_storage_problems(tmp_path):
    app = bootstrap(str(tmp_path))
    bad = app.run("auth.login", app.auth.login, "admin", "wrong")
    assert bad.ok is False
    assert bad.error_code == "invalid_credentials"
    assert bad.kind == ErrorKind.account
    assert bad.message == "Invalid username or password."

    good = app.run("auth.login", app.auth.login, "admin", "admin123")
    assert good.ok and good.value.username == "admin"

    (tmp_path / "taken").mkdir()
    res = app.export_history(str(tmp_path / "taken"))
    assert res.ok is False
    assert res.is_storage_problem


def test_export_history_default_destination(tmp_path):
    app = bootstrap(str(tmp_path))
    app.auth.login("admin", "admin123")
    res = app.export_history()
    assert res.ok
    assert res.message.startswith("Exported to: ")
    with open(res.value, "r", encoding="utf-8") as f:
        lines = f.read().splitlines()
    assert lines[0] == "username,datetime,status"
    assert lines[1].startswith('"admin","')


def test_setup_logging_does_not_duplicate_handlers(tmp_path):
    a = setup_logging(str(tmp_path / "logs"))
    n = len(a.handlers)
    b = setup_logging(str(tmp_path / "logs"))
    assert a is b is logging.getLogger("logindesk")
    assert len(b.handlers) == n
