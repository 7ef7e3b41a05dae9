from __future__ import annotations

"""
AuthService: login, logout, registration, password recovery and profile edits.

Two states: ANONYMOUS and AUTHENTICATED. The UI subscribes to transitions
instead of restarting itself on logout.

Passwords and security answers are stored and compared as clear text with
exact string equality; that is the persisted file format.
"""

import logging
from enum import Enum
from typing import Any, Callable, List, Optional

from logindesk.core.accounts.models import BUILTIN_ADMIN_USERNAME, Account, Role
from logindesk.core.accounts.store import AccountStore
from logindesk.core.audit.log import AuditLog
from logindesk.core.audit.models import LoginStatus
from logindesk.core.errors import (
    InvalidCredentialsError,
    ProtectedAccountError,
    StorageError,
    UsernameTakenError,
    UserNotFoundError,
    ValidationError,
    WrongAnswerError,
    WrongCurrentPasswordError,
)
from logindesk.core.session.tracker import SessionTracker


DEFAULT_QUESTION_PROMPT = "Security question?"


class SessionState(str, Enum):
    ANONYMOUS = "ANONYMOUS"
    AUTHENTICATED = "AUTHENTICATED"


Listener = Callable[[SessionState, Optional[Account]], None]


def _require_single_line(**fields: Optional[str]) -> None:
    for name, value in fields.items():
        if value and ("\n" in value or "\r" in value):
            raise ValidationError(f"{name.replace('_', ' ').capitalize()} must be a single line.", field=name)


def _parse_role(value: Any) -> Role:
    try:
        return Role(value)
    except ValueError:
        raise ValidationError("Role must be ADMIN or USER.", role=str(value)) from None


class AuthService:
    def __init__(self, *, accounts: AccountStore, audit: AuditLog, session: SessionTracker, logger: Any = None):
        self.accounts = accounts
        self.audit = audit
        self.session = session
        self.logger = logger or logging.getLogger("logindesk")
        self._current_username: Optional[str] = None
        self._listeners: List[Listener] = []

    # ---------- state ----------
    @property
    def state(self) -> SessionState:
        return SessionState.AUTHENTICATED if self.current_account is not None else SessionState.ANONYMOUS

    @property
    def current_account(self) -> Optional[Account]:
        if self._current_username is None:
            return None
        return self.accounts.find(self._current_username)

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _transition(self, username: Optional[str]) -> None:
        self._current_username = username
        state = self.state
        acc = self.current_account
        for cb in list(self._listeners):
            try:
                cb(state, acc)
            except Exception as e:  # noqa: BLE001
                self.logger.error("Session listener failed: %s", e)

    def _persist_session(self, username: str) -> None:
        # the in-memory transition stands even if the session file cannot be written
        try:
            self.session.set_current(username)
        except StorageError as e:
            self.logger.warning("Session not persisted: %s", e.context.get("error", e.user_message))

    # ---------- login / logout ----------
    def login(self, username: str, password: str) -> Account:
        acc = self.accounts.find(username)
        if acc is None or acc.password != password:
            self.audit.append(username, LoginStatus.failed)
            self.logger.info("Login failed for %r", username)
            raise InvalidCredentialsError(username=username)
        self.audit.append(username, LoginStatus.success)
        self._persist_session(username)
        self.logger.info("Login succeeded for %r", username)
        self._transition(username)
        return acc

    def logout(self) -> None:
        self._persist_session("")
        if self._current_username is not None:
            self.logger.info("Logged out %r", self._current_username)
        self._transition(None)

    def resume(self) -> Optional[Account]:
        """
        Startup auto-resume: re-enter AUTHENTICATED for the user named in the
        session file, if that account still exists. No audit event is written.
        """
        username = self.session.get_current()
        if username is None:
            return None
        self.logger.info("Resuming session for %r", username)
        self._transition(username)
        return self.current_account

    # ---------- registration / recovery ----------
    def register(
        self,
        username: str,
        password: str,
        role: Role = Role.USER,
        question: str = "",
        answer: str = "",
    ) -> Account:
        if not username or not password:
            raise ValidationError("Username & Password required.")
        if username != username.strip():
            raise ValidationError("Username must not start or end with spaces.", field="username")
        _require_single_line(username=username, password=password, question=question, answer=answer)
        if username in self.accounts:
            raise UsernameTakenError(username=username)
        acc = Account(
            username=username,
            password=password,
            role=_parse_role(role),
            security_question=question or "",
            security_answer=answer or "",
        )
        self.accounts.upsert(acc)
        self.logger.info("Created user %r (%s)", username, acc.role.value)
        return acc

    def security_question(self, username: str) -> str:
        acc = self.accounts.get(username)
        q = acc.security_question or ""
        return q if q.strip() else DEFAULT_QUESTION_PROMPT

    def forgot_password(self, username: str, answer: str, new_password: str) -> None:
        acc = self.accounts.find(username)
        if acc is None:
            raise UserNotFoundError(username=username)
        if answer != acc.security_answer:
            self.logger.info("Password reset refused for %r: wrong answer", username)
            raise WrongAnswerError(username=username)
        if not new_password or not new_password.strip():
            raise ValidationError("New password required.")
        _require_single_line(new_password=new_password)
        self.accounts.upsert(acc.model_copy(update={"password": new_password}))
        self.logger.info("Password reset for %r", username)

    # ---------- profile ----------
    def edit_own_profile(
        self,
        account: Account,
        current_password: str,
        new_password: Optional[str] = None,
        new_question: Optional[str] = None,
        new_answer: Optional[str] = None,
    ) -> Account:
        """
        Change one's own password and/or security question. The current
        password must match. A blank new password keeps the old one; the
        question and answer are always overwritten, empty included.
        """
        stored = self.accounts.get(account.username)
        if current_password != stored.password:
            raise WrongCurrentPasswordError(username=stored.username)
        _require_single_line(new_password=new_password, question=new_question, answer=new_answer)
        update = {"security_question": new_question or "", "security_answer": new_answer or ""}
        if new_password and new_password.strip():
            update["password"] = new_password
        out = self.accounts.upsert(stored.model_copy(update=update))
        self.logger.info("Profile updated for %r", stored.username)
        return out

    # ---------- administration ----------
    def admin_edit(self, target_username: str, new_password: str, new_role: Role, new_question: str, new_answer: str) -> Account:
        """
        Overwrite password, role and security question of any account. The
        owner's current password is not asked for. Raises UserNotFoundError,
        ProtectedAccountError when demoting `admin`, and ValidationError when
        the new password is empty.
        """
        stored = self.accounts.get(target_username)
        role = _parse_role(new_role)
        if target_username == BUILTIN_ADMIN_USERNAME and role != Role.ADMIN:
            self.logger.warning("Refused to demote the built-in admin account.")
            raise ProtectedAccountError("Admin must keep ADMIN role.", username=target_username)
        if not new_password:
            raise ValidationError("Password required.")
        _require_single_line(password=new_password, question=new_question, answer=new_answer)
        out = self.accounts.upsert(
            stored.model_copy(
                update={
                    "password": new_password,
                    "role": role,
                    "security_question": new_question or "",
                    "security_answer": new_answer or "",
                }
            )
        )
        self.logger.info("Admin updated user %r (%s)", target_username, role.value)
        return out

    def admin_delete(self, target_username: str) -> None:
        if target_username == BUILTIN_ADMIN_USERNAME:
            self.logger.warning("Refused to delete the built-in admin account.")
            raise ProtectedAccountError("Cannot delete admin", username=target_username)
        self.accounts.remove(target_username)
        self.logger.info("Deleted user %r", target_username)
        if target_username == self._current_username:
            self.logout()

    def list_accounts(self) -> List[Account]:
        return self.accounts.accounts()
