from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

# Largest balance or amount a signed 64-bit BIGINT column holds
MAX_BALANCE = 2**63 - 1


@dataclass(frozen=True)
class Account:
    """Snapshot of an account as read from an AccountStore.

    Balances are integer minor units (cents). Instances are immutable: a
    balance change produces a new value which is written back through
    ``AccountStore.update``.
    """

    id: int
    holder_name: str
    balance: int
    created_at: datetime
