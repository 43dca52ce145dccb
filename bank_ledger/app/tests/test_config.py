import pytest
from pydantic import ValidationError

from ..core.config import Settings


def test_defaults(monkeypatch) -> None:
    monkeypatch.delenv("LEDGER_MIN_INITIAL_BALANCE", raising=False)
    monkeypatch.delenv("LEDGER_STORE_BACKEND", raising=False)

    settings = Settings(_env_file=None)

    assert settings.min_initial_balance == 10000
    assert settings.store_backend == "sql"
    assert settings.database_url == "sqlite:///bank_ledger.db"


def test_env_overrides(monkeypatch) -> None:
    monkeypatch.setenv("LEDGER_MIN_INITIAL_BALANCE", "0")
    monkeypatch.setenv("LEDGER_STORE_BACKEND", "memory")

    settings = Settings(_env_file=None)

    assert settings.min_initial_balance == 0
    assert settings.store_backend == "memory"


def test_rejects_unknown_backend(monkeypatch) -> None:
    monkeypatch.setenv("LEDGER_STORE_BACKEND", "redis")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_rejects_negative_minimum() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, min_initial_balance=-1)
