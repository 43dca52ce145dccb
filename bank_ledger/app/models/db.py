from __future__ import annotations
from datetime import datetime, UTC
from typing import Optional
from sqlalchemy import BigInteger, CheckConstraint, Column
from sqlmodel import Field, SQLModel

class Account(SQLModel, table=True):
    __table_args__ = (
        CheckConstraint("balance >= 0", name="ck_account_balance_non_negative"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    holder_name: str
    balance: int = Field(default=0, sa_column=Column(BigInteger, nullable=False, default=0))
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
