"""Quote and receipt endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from atelier.application.schemas import (
    QuoteDraftRequest,
    QuoteSaveResponse,
    ReceiptIssueResponse,
    ReceiptRequest,
    StandaloneReceiptRequest,
)
from atelier.application.services import Workspace
from atelier.domain.exceptions import EntityNotFoundError, ReceiptAlreadyIssuedError
from atelier.infrastructure.dependencies import get_workspace

router = APIRouter(tags=["Quotes"])


@router.post("/quotes", response_model=QuoteSaveResponse)
async def save_quote(
    data: QuoteDraftRequest,
    workspace: Workspace = Depends(get_workspace),
) -> QuoteSaveResponse:
    """Create or update a quote; totals are recomputed from the catalog."""
    draft = data.to_draft(workspace.data.settings.default_margin)
    outcome = workspace.save_quote(draft)
    return QuoteSaveResponse.from_outcome(outcome)


@router.post(
    "/quotes/{quote_id}/receipt",
    response_model=ReceiptIssueResponse,
    status_code=status.HTTP_201_CREATED,
)
async def issue_receipt(
    quote_id: str,
    data: ReceiptRequest,
    workspace: Workspace = Depends(get_workspace),
) -> ReceiptIssueResponse:
    """Issue the receipt for a quote and book the sale."""
    try:
        issue = workspace.issue_receipt(quote_id, data.payment_method)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ReceiptAlreadyIssuedError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return ReceiptIssueResponse.from_issue(issue)


@router.post("/receipts", response_model=ReceiptIssueResponse, status_code=status.HTTP_201_CREATED)
async def issue_standalone_receipt(
    data: StandaloneReceiptRequest,
    workspace: Workspace = Depends(get_workspace),
) -> ReceiptIssueResponse:
    """Record a direct sale that did not go through a quote."""
    issue = workspace.issue_standalone_receipt(
        client_id=data.client_id,
        items=[i.to_entity() for i in data.items],
        payment_method=data.payment_method,
        discount_value=data.discount_value,
        total_price=data.total_price,
    )
    return ReceiptIssueResponse.from_issue(issue)
