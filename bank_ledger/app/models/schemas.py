from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .domain import MAX_BALANCE

class AccountCreate(BaseModel):
    holder_name: str = Field(..., min_length=1, description="Name of the account holder")
    initial_balance: int = Field(
        ..., ge=0, le=MAX_BALANCE, description="Opening balance in minor units (e.g. cents)"
    )

class AccountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    holder_name: str
    created_at: datetime
    balance: int = Field(..., ge=0, description="Balance in minor units (e.g. cents)")

class MoneyMovementRequest(BaseModel):
    amount: int = Field(
        ..., ge=1, le=MAX_BALANCE, description="Amount in minor units (must be >= 1)"
    )

class TransferRequest(BaseModel):
    source_account_id: int
    dest_account_id: int
    amount: int = Field(..., ge=1, le=MAX_BALANCE)

class TransferResponse(BaseModel):
    source: AccountResponse
    dest: AccountResponse
