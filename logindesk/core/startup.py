from __future__ import annotations

"""
Process start: config -> logging -> account store (+ built-in admin) ->
audit log -> session tracker -> auth service -> auto-resume.
"""

import os
from typing import Optional

from logindesk.core.accounts.store import AccountStore
from logindesk.core.app import LoginDeskApp
from logindesk.core.audit.log import AuditLog
from logindesk.core.auth.service import AuthService
from logindesk.core.config.manager import ConfigManager
from logindesk.core.config.paths import ConfigFsPaths
from logindesk.core.error_reporter import ErrorReporter
from logindesk.core.logger import setup_logging
from logindesk.core.session.tracker import SessionTracker


def bootstrap(root: str = ".", *, resume: bool = True, config_manager: Optional[ConfigManager] = None) -> LoginDeskApp:
    cm = config_manager or ConfigManager(fs=ConfigFsPaths(root))
    cfg = cm.load_all()
    log_cfg = cfg.logging
    logger = setup_logging(cm.log_dir, level=log_cfg.level, max_bytes=log_cfg.max_bytes, backup_count=log_cfg.backup_count)
    cm.logger = logger
    os.makedirs(cm.data_dir, exist_ok=True)

    admin = cfg.builtin_admin
    accounts = AccountStore(
        path=cm.users_path,
        logger=logger,
        admin_password=admin.default_password,
        admin_question=admin.default_question,
        admin_answer=admin.default_answer,
    )
    accounts.load()
    accounts.ensure_builtin_admin()

    audit = AuditLog(path=cm.history_path, logger=logger)
    session = SessionTracker(path=cm.session_path, accounts=accounts, logger=logger)
    auth = AuthService(accounts=accounts, audit=audit, session=session, logger=logger)
    errors = ErrorReporter(path=os.path.join(cm.log_dir, "errors.jsonl"), logger=logger)

    app = LoginDeskApp(config=cm, accounts=accounts, audit=audit, session=session, auth=auth, errors=errors, logger=logger)
    if resume:
        acc = auth.resume()
        if acc is not None:
            logger.info("Auto-resume: opening %s dashboard for %r", acc.role.value, acc.username)
    return app
