from .db import Account as AccountModel
from .domain import MAX_BALANCE, Account
from .schemas import (
    AccountCreate,
    AccountResponse,
    MoneyMovementRequest,
    TransferRequest,
    TransferResponse,
)

__all__ = [
    "Account",
    "MAX_BALANCE",
    "AccountCreate",
    "AccountResponse",
    "MoneyMovementRequest",
    "TransferRequest",
    "TransferResponse",
    "AccountModel",
]
