"""Ledger endpoints — transactions, confirmed imports and the monthly summary."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query, status

from atelier.application.schemas import (
    LedgerSummaryResponse,
    TransactionDocument,
    TransactionImportRequest,
    TransactionImportResponse,
    TransactionRequest,
)
from atelier.application.services import Workspace
from atelier.infrastructure.dependencies import get_workspace

router = APIRouter(tags=["Ledger"])


@router.post(
    "/transactions", response_model=TransactionDocument, status_code=status.HTTP_201_CREATED
)
async def record_transaction(
    data: TransactionRequest,
    workspace: Workspace = Depends(get_workspace),
) -> TransactionDocument:
    """Record a ledger entry. A category that does not fit the type is replaced."""
    transaction = workspace.record_transaction(
        kind=data.type,
        category=data.category,
        amount=data.amount,
        description=data.description,
        date=data.date,
        transaction_id=data.id,
    )
    return TransactionDocument.from_entity(transaction)


@router.delete("/transactions/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(
    transaction_id: str,
    workspace: Workspace = Depends(get_workspace),
) -> None:
    workspace.delete_transaction(transaction_id)


@router.put("/transactions", response_model=TransactionImportResponse)
async def import_transactions(
    data: TransactionImportRequest,
    workspace: Workspace = Depends(get_workspace),
) -> TransactionImportResponse:
    """Overwrite the whole ledger with an imported one (requires confirmation)."""
    updated = workspace.import_transactions(
        [t.to_entity() for t in data.transactions], confirmed=data.confirmed
    )
    return TransactionImportResponse(applied=data.confirmed, count=len(updated.transactions))


@router.get("/ledger/summary", response_model=LedgerSummaryResponse)
async def ledger_summary(
    year: int | None = Query(None, ge=1970, le=9999),
    month: int | None = Query(None, ge=1, le=12),
    workspace: Workspace = Depends(get_workspace),
) -> LedgerSummaryResponse:
    """All-time balance plus one month's income, expense and profit (UTC)."""
    today = datetime.now(timezone.utc)
    year = year or today.year
    month = month or today.month
    summary = workspace.summary(year, month)
    return LedgerSummaryResponse(
        year=year,
        month=month,
        balance=summary.balance,
        monthly_income=summary.monthly_income,
        monthly_expense=summary.monthly_expense,
        monthly_profit=summary.monthly_profit,
    )
