from .catalog import ClientModel, MaterialModel, ProductMaterialModel, ProductModel
from .sales import QuoteItemModel, QuoteModel, ReceiptItemModel, ReceiptModel
from .ledger import TransactionModel

__all__ = [
    "ClientModel",
    "MaterialModel",
    "ProductMaterialModel",
    "ProductModel",
    "QuoteItemModel",
    "QuoteModel",
    "ReceiptItemModel",
    "ReceiptModel",
    "TransactionModel",
]
