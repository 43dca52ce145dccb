from collections.abc import Callable

import pytest
from sqlmodel import Session, SQLModel

from ..core.db import create_engine_for_url
from ..services import (
    AccountLockRegistry,
    AccountStore,
    InMemoryAccountStore,
    InMemoryDatabase,
    LedgerService,
    SqlAccountStore,
)


@pytest.fixture
def engine(tmp_path):
    engine = create_engine_for_url(f"sqlite:///{tmp_path / 'ledger.db'}")
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(params=["sql", "memory"])
def store_factory(request, engine) -> Callable[..., AccountStore]:
    """Builds independent stores over one shared backend, one per unit of work."""
    sessions: list[Session] = []
    database = InMemoryDatabase()

    def _make(min_initial_balance: int = 0) -> AccountStore:
        if request.param == "sql":
            session = Session(engine)
            sessions.append(session)
            return SqlAccountStore(session, min_initial_balance=min_initial_balance)
        return InMemoryAccountStore(database, min_initial_balance=min_initial_balance)

    yield _make

    for session in sessions:
        session.close()


@pytest.fixture
def store(store_factory) -> AccountStore:
    return store_factory()


@pytest.fixture
def locks() -> AccountLockRegistry:
    return AccountLockRegistry()


@pytest.fixture
def service(store, locks) -> LedgerService:
    return LedgerService(store, locks)
