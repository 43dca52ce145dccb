from .ledger import LedgerService
from .locking import AccountLockRegistry
from .store import AccountStore, InMemoryAccountStore, InMemoryDatabase, SqlAccountStore

__all__ = [
    "AccountLockRegistry",
    "AccountStore",
    "InMemoryAccountStore",
    "InMemoryDatabase",
    "LedgerService",
    "SqlAccountStore",
]
