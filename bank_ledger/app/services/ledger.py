from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Optional, Tuple

from ..core.errors import InsufficientFundsError, LedgerValidationError
from ..models import MAX_BALANCE, Account
from .locking import AccountLockRegistry
from .store import AccountStore


logger = logging.getLogger(__name__)


class LedgerService:
    """Balance-changing operations over an AccountStore.

    Every mutation runs read-check-write with the affected accounts locked
    and inside a single store transaction, so a balance is never read stale
    and a transfer is committed in full or not at all.
    """

    def __init__(
        self,
        store: AccountStore,
        locks: Optional[AccountLockRegistry] = None,
    ) -> None:
        self.store = store
        self.locks = locks if locks is not None else AccountLockRegistry()

    # ------------------------------------------------------------------
    # Helper utilities
    # ------------------------------------------------------------------
    def _require_positive(self, amount: int) -> None:
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise LedgerValidationError("Amount must be an integer number of minor units")
        if amount <= 0:
            raise LedgerValidationError("Amount must be positive")
        if amount > MAX_BALANCE:
            raise LedgerValidationError(f"Amount must be at most {MAX_BALANCE}")

    def _require_room(self, account: Account, amount: int) -> None:
        if account.balance + amount > MAX_BALANCE:
            raise LedgerValidationError(
                f"Crediting {amount} would push account {account.id} above {MAX_BALANCE}"
            )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def create_account(self, holder_name: str, initial_balance: int) -> Account:
        with self.store.transaction():
            account = self.store.create(holder_name, initial_balance)
        logger.info(
            "account.created",
            extra={"account_id": account.id, "holder_name": account.holder_name},
        )
        return account

    def get_account(self, account_id: int) -> Account:
        return self.store.get(account_id)

    def list_accounts(self) -> List[Account]:
        return self.store.list()

    def deposit(self, account_id: int, amount: int) -> Account:
        self._require_positive(amount)

        with self.locks.hold(account_id), self.store.transaction():
            account = self.store.get(account_id, for_update=True)
            self._require_room(account, amount)
            updated = replace(account, balance=account.balance + amount)
            self.store.update(updated)

        logger.info(
            "account.deposit",
            extra={"account_id": account_id, "amount": amount, "balance": updated.balance},
        )
        return updated

    def withdraw(self, account_id: int, amount: int) -> Account:
        self._require_positive(amount)

        with self.locks.hold(account_id), self.store.transaction():
            account = self.store.get(account_id, for_update=True)
            if amount > account.balance:
                logger.info(
                    "account.withdraw.rejected",
                    extra={"account_id": account_id, "amount": amount, "balance": account.balance},
                )
                raise InsufficientFundsError("Insufficient funds for withdrawal")
            updated = replace(account, balance=account.balance - amount)
            self.store.update(updated)

        logger.info(
            "account.withdraw",
            extra={"account_id": account_id, "amount": amount, "balance": updated.balance},
        )
        return updated

    def transfer(
        self,
        source_account_id: int,
        dest_account_id: int,
        amount: int,
    ) -> Tuple[Account, Account]:
        if source_account_id == dest_account_id:
            raise LedgerValidationError("Cannot transfer to the same account")
        self._require_positive(amount)

        with self.locks.hold(source_account_id, dest_account_id), self.store.transaction():
            source = self.store.get(source_account_id, for_update=True)
            dest = self.store.get(dest_account_id, for_update=True)

            if amount > source.balance:
                logger.info(
                    "account.transfer.rejected",
                    extra={
                        "source_account_id": source_account_id,
                        "dest_account_id": dest_account_id,
                        "amount": amount,
                        "balance": source.balance,
                    },
                )
                raise InsufficientFundsError("Insufficient funds for transfer")
            self._require_room(dest, amount)

            source = replace(source, balance=source.balance - amount)
            dest = replace(dest, balance=dest.balance + amount)
            self.store.update(source)
            self.store.update(dest)

        logger.info(
            "account.transfer",
            extra={
                "source_account_id": source_account_id,
                "dest_account_id": dest_account_id,
                "amount": amount,
            },
        )
        return source, dest
