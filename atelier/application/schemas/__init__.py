from .snapshot import (
    AppDataDocument,
    ClientDocument,
    MaterialDocument,
    ProductDocument,
    QuoteDocument,
    ReceiptDocument,
    SettingsDocument,
    TransactionDocument,
)
from .quotes import (
    CatalogPriceResponse,
    QuoteDraftRequest,
    QuotePreviewRequest,
    QuotePreviewResponse,
    QuoteSaveResponse,
    ReceiptIssueResponse,
    ReceiptRequest,
    StandaloneReceiptRequest,
)
from .ledger import (
    LedgerSummaryResponse,
    TransactionImportRequest,
    TransactionImportResponse,
    TransactionRequest,
)
from .settings import SettingsUpdate
from .sync import RetryResponse, SyncStatusResponse

__all__ = [
    "AppDataDocument",
    "ClientDocument",
    "MaterialDocument",
    "ProductDocument",
    "QuoteDocument",
    "ReceiptDocument",
    "SettingsDocument",
    "TransactionDocument",
    "CatalogPriceResponse",
    "QuoteDraftRequest",
    "QuotePreviewRequest",
    "QuotePreviewResponse",
    "QuoteSaveResponse",
    "ReceiptIssueResponse",
    "ReceiptRequest",
    "StandaloneReceiptRequest",
    "LedgerSummaryResponse",
    "TransactionImportRequest",
    "TransactionImportResponse",
    "TransactionRequest",
    "SettingsUpdate",
    "RetryResponse",
    "SyncStatusResponse",
]
