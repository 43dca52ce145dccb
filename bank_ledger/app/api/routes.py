from fastapi import APIRouter, Depends, status

from ..core.dependencies import get_ledger_service
from ..models import (
    AccountCreate,
    AccountResponse,
    MoneyMovementRequest,
    TransferRequest,
    TransferResponse,
)
from ..services import LedgerService


router = APIRouter(prefix="/accounts", tags=["accounts"])

@router.post("", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
def create_account(
    payload: AccountCreate,
    service: LedgerService = Depends(get_ledger_service),
) -> AccountResponse:
    account = service.create_account(payload.holder_name, payload.initial_balance)
    return AccountResponse.model_validate(account)

@router.get("", response_model=list[AccountResponse])
def list_accounts(
    service: LedgerService = Depends(get_ledger_service),
) -> list[AccountResponse]:
    return [AccountResponse.model_validate(account) for account in service.list_accounts()]

@router.get("/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: int,
    service: LedgerService = Depends(get_ledger_service),
) -> AccountResponse:
    return AccountResponse.model_validate(service.get_account(account_id))

@router.post("/{account_id}/deposit", response_model=AccountResponse)
def deposit(
    account_id: int,
    payload: MoneyMovementRequest,
    service: LedgerService = Depends(get_ledger_service),
) -> AccountResponse:
    return AccountResponse.model_validate(service.deposit(account_id, payload.amount))

@router.post("/{account_id}/withdraw", response_model=AccountResponse)
def withdraw(
    account_id: int,
    payload: MoneyMovementRequest,
    service: LedgerService = Depends(get_ledger_service),
) -> AccountResponse:
    return AccountResponse.model_validate(service.withdraw(account_id, payload.amount))

transfer_router = APIRouter(prefix="/transfers", tags=["transfers"])

@transfer_router.post("", response_model=TransferResponse)
def create_transfer(
    payload: TransferRequest,
    service: LedgerService = Depends(get_ledger_service),
) -> TransferResponse:
    source, dest = service.transfer(
        payload.source_account_id, payload.dest_account_id, payload.amount
    )
    return TransferResponse(
        source=AccountResponse.model_validate(source),
        dest=AccountResponse.model_validate(dest),
    )

__all__ = ["router", "transfer_router"]
