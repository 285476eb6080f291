from .material import Material, MaterialUnit
from .product import Product, ProductMaterialRequirement
from .client import Client
from .quote import Quote, QuoteItem, QuoteStatus
from .receipt import Receipt
from .transaction import (
    INCOME_CATEGORIES,
    Transaction,
    TransactionCategory,
    TransactionType,
)
from .app_data import AppData, BusinessSettings

__all__ = [
    "Material",
    "MaterialUnit",
    "Product",
    "ProductMaterialRequirement",
    "Client",
    "Quote",
    "QuoteItem",
    "QuoteStatus",
    "Receipt",
    "Transaction",
    "TransactionCategory",
    "TransactionType",
    "INCOME_CATEGORIES",
    "AppData",
    "BusinessSettings",
]
