from __future__ import annotations

import itertools
import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ..core.errors import AccountNotFoundError, LedgerValidationError, StorageError
from ..models import MAX_BALANCE, Account, AccountModel


logger = logging.getLogger(__name__)


class AccountStore(ABC):
    """Owns every account record; the only path to read or write balances.

    Writes issued inside ``transaction()`` become visible together when the
    block exits normally and are discarded if it raises.
    """

    def __init__(self, min_initial_balance: int = 0) -> None:
        self.min_initial_balance = min_initial_balance

    def create(self, holder_name: str, initial_balance: int) -> Account:
        name = (holder_name or "").strip()
        if not name:
            raise LedgerValidationError("Holder name must not be empty")
        if isinstance(initial_balance, bool) or not isinstance(initial_balance, int):
            raise LedgerValidationError("Initial balance must be an integer amount")
        if initial_balance < self.min_initial_balance:
            raise LedgerValidationError(
                f"Initial balance must be at least {self.min_initial_balance}"
            )
        if initial_balance > MAX_BALANCE:
            raise LedgerValidationError(f"Initial balance must be at most {MAX_BALANCE}")
        return self._insert(name, initial_balance)

    def update(self, account: Account) -> None:
        if account.balance < 0:
            raise LedgerValidationError("Account balance cannot be negative")
        if account.balance > MAX_BALANCE:
            raise LedgerValidationError(f"Account balance cannot exceed {MAX_BALANCE}")
        self._write(account)

    @abstractmethod
    def get(self, account_id: int, for_update: bool = False) -> Account:
        ...

    @abstractmethod
    def list(self) -> List[Account]:
        ...

    @abstractmethod
    def transaction(self):
        ...

    @abstractmethod
    def _insert(self, holder_name: str, balance: int) -> Account:
        ...

    @abstractmethod
    def _write(self, account: Account) -> None:
        ...


class SqlAccountStore(AccountStore):
    """Account store on top of a SQLModel session."""

    def __init__(self, session: Session, min_initial_balance: int = 0) -> None:
        super().__init__(min_initial_balance)
        self.session = session
        self._depth = 0

    # ------------------------------------------------------------------
    # Helper utilities
    # ------------------------------------------------------------------
    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            logger.warning("storage.error", extra={"action": action, "error": str(exc)})
            if not self._depth:
                self.session.rollback()
            raise StorageError(f"Storage failure during {action}") from exc

    def _to_domain(self, model: AccountModel) -> Account:
        return Account(
            id=model.id,
            holder_name=model.holder_name,
            balance=model.balance,
            created_at=model.created_at,
        )

    def _load(self, account_id: int, for_update: bool = False) -> Optional[AccountModel]:
        # ids beyond a 64-bit key cannot exist and would overflow the driver
        if not -MAX_BALANCE - 1 <= account_id <= MAX_BALANCE:
            return None
        return self.session.get(
            AccountModel,
            account_id,
            populate_existing=True,
            with_for_update=True if for_update else None,
        )

    # ------------------------------------------------------------------
    # Store contract
    # ------------------------------------------------------------------
    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self._depth:
            yield
            return

        self._depth += 1
        try:
            yield
            with self._guard("commit"):
                self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        finally:
            self._depth -= 1

    def _commit_if_standalone(self) -> None:
        # writes outside transaction() are committed immediately
        if not self._depth:
            self.session.commit()

    def _insert(self, holder_name: str, balance: int) -> Account:
        account = AccountModel(holder_name=holder_name, balance=balance)
        with self._guard("create"):
            self.session.add(account)
            self.session.flush()
            self.session.refresh(account)
            created = self._to_domain(account)
            self._commit_if_standalone()
        return created

    def get(self, account_id: int, for_update: bool = False) -> Account:
        with self._guard("get"):
            account = self._load(account_id, for_update)
        if account is None:
            raise AccountNotFoundError(f"Account {account_id} not found")
        return self._to_domain(account)

    def list(self) -> List[Account]:
        with self._guard("list"):
            rows = self.session.exec(select(AccountModel).order_by(AccountModel.id)).all()
        return [self._to_domain(row) for row in rows]

    def _write(self, account: Account) -> None:
        with self._guard("update"):
            model = self._load(account.id)
            if model is None:
                raise AccountNotFoundError(f"Account {account.id} not found")
            model.holder_name = account.holder_name
            model.balance = account.balance
            self.session.add(model)
            self.session.flush()
            self._commit_if_standalone()


class InMemoryDatabase:
    """Process-local account table shared by every InMemoryAccountStore."""

    def __init__(self) -> None:
        self.accounts: Dict[int, Account] = {}
        self.lock = threading.RLock()
        self._ids = itertools.count(1)

    def next_id(self) -> int:
        with self.lock:
            return next(self._ids)

    def clear(self) -> None:
        with self.lock:
            self.accounts.clear()
            self._ids = itertools.count(1)


class InMemoryAccountStore(AccountStore):
    """Account store backed by an InMemoryDatabase.

    Writes made inside ``transaction()`` are staged per thread and applied to
    the shared table in one step under its lock, so ``get`` and ``list`` from
    other threads see either all of a transaction or none of it.
    """

    def __init__(
        self,
        database: Optional[InMemoryDatabase] = None,
        min_initial_balance: int = 0,
    ) -> None:
        super().__init__(min_initial_balance)
        self.database = database if database is not None else InMemoryDatabase()
        self._local = threading.local()

    def _pending(self) -> Optional[Dict[int, Account]]:
        return getattr(self._local, "pending", None)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self._pending() is not None:
            yield
            return

        pending: Dict[int, Account] = {}
        self._local.pending = pending
        try:
            yield
            with self.database.lock:
                self.database.accounts.update(pending)
        finally:
            self._local.pending = None

    def _stage(self, account: Account) -> None:
        pending = self._pending()
        if pending is not None:
            pending[account.id] = account
            return
        with self.database.lock:
            self.database.accounts[account.id] = account

    def _insert(self, holder_name: str, balance: int) -> Account:
        account = Account(
            id=self.database.next_id(),
            holder_name=holder_name,
            balance=balance,
            created_at=datetime.now(UTC),
        )
        self._stage(account)
        return account

    def get(self, account_id: int, for_update: bool = False) -> Account:
        pending = self._pending()
        if pending is not None and account_id in pending:
            return pending[account_id]
        with self.database.lock:
            account = self.database.accounts.get(account_id)
        if account is None:
            raise AccountNotFoundError(f"Account {account_id} not found")
        return account

    def list(self) -> List[Account]:
        with self.database.lock:
            accounts = dict(self.database.accounts)
        accounts.update(self._pending() or {})
        return [accounts[account_id] for account_id in sorted(accounts)]

    def _write(self, account: Account) -> None:
        pending = self._pending()
        known = pending is not None and account.id in pending
        if not known:
            with self.database.lock:
                known = account.id in self.database.accounts
        if not known:
            raise AccountNotFoundError(f"Account {account.id} not found")
        self._stage(account)
