from functools import lru_cache

from fastapi import Depends
from sqlmodel import Session

from ..services import (
    AccountLockRegistry,
    AccountStore,
    InMemoryAccountStore,
    InMemoryDatabase,
    LedgerService,
    SqlAccountStore,
)
from .config import Settings, get_settings
from .db import get_session


@lru_cache(maxsize=1)
def get_lock_registry() -> AccountLockRegistry:
    return AccountLockRegistry()


@lru_cache(maxsize=1)
def get_memory_database() -> InMemoryDatabase:
    return InMemoryDatabase()


def get_account_store(
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> AccountStore:
    if settings.store_backend == "memory":
        return InMemoryAccountStore(
            get_memory_database(), min_initial_balance=settings.min_initial_balance
        )
    return SqlAccountStore(session, min_initial_balance=settings.min_initial_balance)


def get_ledger_service(
    store: AccountStore = Depends(get_account_store),
    locks: AccountLockRegistry = Depends(get_lock_registry),
) -> LedgerService:
    return LedgerService(store, locks)
