from __future__ import annotations

"""
AccountStore: ordered in-memory account table backed by a flat file.

Every mutation rewrites the whole file. If the write fails the in-memory
table is rolled back to its previous state and StorageError is raised.
"""

import logging
from typing import Any, Dict, List, Optional

from logindesk.core.accounts.models import ACCOUNT_FIELDS, BUILTIN_ADMIN_USERNAME, Account, Role
from logindesk.core.errors import ProtectedAccountError, StorageError, UserNotFoundError
from logindesk.core.records.codec import RecordParseError, decode_record, encode_record, is_blank
from logindesk.core.records.io import atomic_write_lines, read_lines


DEFAULT_ADMIN_PASSWORD = "admin123"
DEFAULT_ADMIN_QUESTION = "Default admin question"
DEFAULT_ADMIN_ANSWER = "admin"


class AccountStore:
    def __init__(
        self,
        *,
        path: str,
        logger: Any = None,
        admin_password: str = DEFAULT_ADMIN_PASSWORD,
        admin_question: str = DEFAULT_ADMIN_QUESTION,
        admin_answer: str = DEFAULT_ADMIN_ANSWER,
    ):
        self.path = path
        self.logger = logger or logging.getLogger("logindesk")
        self.admin_password = admin_password
        self.admin_question = admin_question
        self.admin_answer = admin_answer
        self._accounts: Dict[str, Account] = {}
        self.skipped_lines = 0

    # ---------- persistence ----------
    def load(self) -> "AccountStore":
        try:
            lines = read_lines(self.path)
        except OSError as e:
            raise StorageError("Failed to load users.", path=self.path, error=str(e)) from e

        fresh: Dict[str, Account] = {}
        skipped = 0
        for lineno, line in enumerate(lines, start=1):
            if is_blank(line):
                continue
            try:
                acc = Account.from_fields(decode_record(line, expected=ACCOUNT_FIELDS))
            except (RecordParseError, ValueError) as e:
                skipped += 1
                self.logger.warning("Skipping malformed account line %s in %s: %s", lineno, self.path, type(e).__name__)
                continue
            fresh[acc.username] = acc
        self._accounts = fresh
        self.skipped_lines = skipped
        self.logger.info("Loaded %s account(s) from %s", len(fresh), self.path)
        return self

    def save(self) -> None:
        lines = [encode_record(a.to_fields()) for a in self._accounts.values()]
        try:
            atomic_write_lines(self.path, lines)
        except OSError as e:
            raise StorageError("Failed to save users.", path=self.path, error=str(e)) from e

    def _commit(self, previous: Dict[str, Account]) -> None:
        try:
            self.save()
        except StorageError:
            self._accounts = previous
            raise

    # ---------- built-in admin ----------
    def ensure_builtin_admin(self) -> Account:
        """
        Create the `admin` account with default credentials if missing, or
        restore its ADMIN role if the file had it demoted. Idempotent.
        """
        cur = self._accounts.get(BUILTIN_ADMIN_USERNAME)
        if cur is not None and cur.role == Role.ADMIN:
            return cur
        previous = dict(self._accounts)
        if cur is None:
            acc = Account(
                username=BUILTIN_ADMIN_USERNAME,
                password=self.admin_password,
                role=Role.ADMIN,
                security_question=self.admin_question,
                security_answer=self.admin_answer,
            )
            self.logger.info("Built-in admin account created.")
        else:
            acc = cur.model_copy(update={"role": Role.ADMIN})
            self.logger.warning("Built-in admin account had role %s; restored to ADMIN.", cur.role.value)
        self._accounts[BUILTIN_ADMIN_USERNAME] = acc
        self._commit(previous)
        return acc

    # ---------- queries ----------
    def find(self, username: str) -> Optional[Account]:
        return self._accounts.get(username)

    def get(self, username: str) -> Account:
        acc = self._accounts.get(username)
        if acc is None:
            raise UserNotFoundError(username=username)
        return acc

    def accounts(self) -> List[Account]:
        return list(self._accounts.values())

    def usernames(self) -> List[str]:
        return list(self._accounts.keys())

    def __contains__(self, username: object) -> bool:
        return username in self._accounts

    def __len__(self) -> int:
        return len(self._accounts)

    # ---------- mutations ----------
    def upsert(self, account: Account) -> Account:
        if account.is_builtin_admin and account.role != Role.ADMIN:
            self.logger.warning("Refused to demote the built-in admin account.")
            raise ProtectedAccountError(username=account.username)
        previous = dict(self._accounts)
        # replacing an existing key keeps its position
        self._accounts[account.username] = account
        self._commit(previous)
        return account

    def remove(self, username: str) -> Account:
        if username == BUILTIN_ADMIN_USERNAME:
            self.logger.warning("Refused to delete the built-in admin account.")
            raise ProtectedAccountError(username=username)
        if username not in self._accounts:
            raise UserNotFoundError(username=username)
        previous = dict(self._accounts)
        acc = self._accounts.pop(username)
        self._commit(previous)
        return acc
