from __future__ import annotations

import pytest

from logindesk.core.accounts.store import AccountStore
from logindesk.core.audit.log import AuditLog
from logindesk.core.auth.service import AuthService
from logindesk.core.session.tracker import SessionTracker

from .helpers.fakes import FakeClock


@pytest.fixture
def data_dir(tmp_path):
    d = tmp_path / "data"
    d.mkdir()
    return d


@pytest.fixture
def accounts(data_dir):
    store = AccountStore(path=str(data_dir / "users.db"))
    store.load()
    store.ensure_builtin_admin()
    return store


@pytest.fixture
def audit(data_dir):
    return AuditLog(path=str(data_dir / "history.db"), clock=FakeClock().time)


@pytest.fixture
def tracker(data_dir, accounts):
    return SessionTracker(path=str(data_dir / "session.db"), accounts=accounts)


@pytest.fixture
def auth(accounts, audit, tracker):
    return AuthService(accounts=accounts, audit=audit, session=tracker)
