from __future__ import annotations

from collections.abc import Generator
from typing import Any

from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from ..models import db as _db_models  # noqa: F401 - ensure models register with metadata
from .config import get_settings


def create_engine_for_url(database_url: str):
    connect_args: dict[str, Any] = {}
    engine_args: dict[str, Any] = {}
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # one shared connection, otherwise every pooled connection sees its own empty database
            engine_args["poolclass"] = StaticPool
    return create_engine(
        database_url, echo=False, connect_args=connect_args, **engine_args
    )


settings = get_settings()
engine = create_engine_for_url(settings.database_url)


def get_engine():
    return engine


def init_db() -> None:
    SQLModel.metadata.create_all(engine)


def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


def set_engine(new_engine) -> None:
    global engine
    engine = new_engine
