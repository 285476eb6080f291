"""The aggregate root — the whole business data set as one immutable value."""

from dataclasses import dataclass

from .client import Client
from .material import Material
from .product import Product
from .quote import Quote
from .receipt import Receipt
from .transaction import Transaction

DEFAULT_BRAND_NAME = "Lala accesorios"
DEFAULT_MARGIN_PERCENT = 50.0


@dataclass(frozen=True)
class BusinessSettings:
    """Client-local configuration. Never overwritten by remote reconciliation."""

    brand_name: str = DEFAULT_BRAND_NAME
    default_margin: float = DEFAULT_MARGIN_PERCENT
    initial_funds: float | None = None
    whatsapp_number: str | None = None
    instagram_url: str | None = None
    facebook_url: str | None = None
    shop_logo: str | None = None


@dataclass(frozen=True)
class AppData:
    """Aggregate of every collection plus settings.

    Writes never mutate an instance; they produce a new one with
    :func:`dataclasses.replace`.
    """

    materials: tuple[Material, ...] = ()
    products: tuple[Product, ...] = ()
    clients: tuple[Client, ...] = ()
    quotes: tuple[Quote, ...] = ()
    receipts: tuple[Receipt, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    settings: BusinessSettings = BusinessSettings()
