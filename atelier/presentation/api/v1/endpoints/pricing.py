"""Pricing endpoints — quote previews and the storefront price list."""

from fastapi import APIRouter, Depends

from atelier.application.schemas import (
    CatalogPriceResponse,
    QuotePreviewRequest,
    QuotePreviewResponse,
)
from atelier.application.services import Workspace
from atelier.infrastructure.dependencies import get_workspace

router = APIRouter(prefix="/pricing", tags=["Pricing"])


@router.post("/quote-preview", response_model=QuotePreviewResponse)
async def quote_preview(
    data: QuotePreviewRequest,
    workspace: Workspace = Depends(get_workspace),
) -> QuotePreviewResponse:
    """Price a quote without saving it."""
    margin = data.profit_margin_percent
    if margin is None:
        margin = workspace.data.settings.default_margin
    preview = workspace.preview_quote(
        [i.to_entity() for i in data.items], margin, data.discount_value
    )
    return QuotePreviewResponse.from_preview(preview)


@router.get("/catalog", response_model=list[CatalogPriceResponse])
async def catalog(workspace: Workspace = Depends(get_workspace)) -> list[CatalogPriceResponse]:
    """Every product with its cost and its price at the default margin."""
    return [
        CatalogPriceResponse(
            product_id=p.product_id, name=p.name, cost=p.cost, price=p.price
        )
        for p in workspace.catalog()
    ]
