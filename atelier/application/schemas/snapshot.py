"""Pydantic models for the local snapshot document.

The document is the whole AppData aggregate serialised with compact
camelCase keys. Each model maps to and from its domain entity.
"""

from typing import Annotated, Any
from uuid import uuid4

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from atelier.application.schemas._types import (
    LenientList,
    LenientObject,
    Number,
    OptionalNumber,
    OptionalText,
    Quantity,
    Text,
    Timestamp,
)
from atelier.domain.entities import (
    AppData,
    BusinessSettings,
    Client,
    Material,
    MaterialUnit,
    Product,
    ProductMaterialRequirement,
    Quote,
    QuoteItem,
    QuoteStatus,
    Receipt,
    Transaction,
    TransactionCategory,
    TransactionType,
)
from atelier.domain.coercion import now_ms
from atelier.domain.entities.app_data import DEFAULT_BRAND_NAME, DEFAULT_MARGIN_PERCENT

Unit = Annotated[MaterialUnit, BeforeValidator(MaterialUnit.parse)]
Status = Annotated[QuoteStatus, BeforeValidator(QuoteStatus.parse)]
Kind = Annotated[TransactionType, BeforeValidator(TransactionType.parse)]
Category = Annotated[TransactionCategory, BeforeValidator(TransactionCategory.parse)]


def _new_id() -> str:
    return str(uuid4())


class CamelModel(BaseModel):
    """Base for camelCase documents — accepts both alias and field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# ── Catalog ──────────────────────────────────────────────────────────


class MaterialDocument(CamelModel):
    id: Text = Field(default_factory=_new_id)
    name: Text = ""
    unit: Unit = MaterialUnit.COUNT
    cost_per_unit: Number = 0.0
    width_cm: OptionalNumber = None

    @classmethod
    def from_entity(cls, material: Material) -> "MaterialDocument":
        return cls(
            id=material.id,
            name=material.name,
            unit=material.unit,
            cost_per_unit=material.cost_per_unit,
            width_cm=material.width_cm,
        )

    def to_entity(self) -> Material:
        return Material(
            id=self.id,
            name=self.name,
            unit=self.unit,
            cost_per_unit=self.cost_per_unit,
            width_cm=self.width_cm,
        )


class RequirementDocument(CamelModel):
    material_id: Text = ""
    quantity: Number = 0.0
    width_cm: OptionalNumber = None
    height_cm: OptionalNumber = None

    @classmethod
    def from_entity(cls, req: ProductMaterialRequirement) -> "RequirementDocument":
        return cls(
            material_id=req.material_id,
            quantity=req.quantity,
            width_cm=req.width_cm,
            height_cm=req.height_cm,
        )

    def to_entity(self) -> ProductMaterialRequirement:
        return ProductMaterialRequirement(
            material_id=self.material_id,
            quantity=self.quantity,
            width_cm=self.width_cm,
            height_cm=self.height_cm,
        )


class ProductDocument(CamelModel):
    id: Text = Field(default_factory=_new_id)
    name: Text = ""
    description: Text = ""
    materials: Annotated[list[RequirementDocument], LenientList] = Field(default_factory=list)
    base_labor_cost: Number = 0.0
    image_url: OptionalText = None

    @classmethod
    def from_entity(cls, product: Product) -> "ProductDocument":
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            materials=[RequirementDocument.from_entity(r) for r in product.materials],
            base_labor_cost=product.base_labor_cost,
            image_url=product.image_url,
        )

    def to_entity(self) -> Product:
        return Product(
            id=self.id,
            name=self.name,
            description=self.description,
            materials=tuple(r.to_entity() for r in self.materials),
            base_labor_cost=self.base_labor_cost,
            image_url=self.image_url,
        )


class ClientDocument(CamelModel):
    id: Text = Field(default_factory=_new_id)
    name: Text = ""
    phone: Text = ""
    email: Text = ""
    address: Text = ""

    @classmethod
    def from_entity(cls, client: Client) -> "ClientDocument":
        return cls(
            id=client.id,
            name=client.name,
            phone=client.phone,
            email=client.email,
            address=client.address,
        )

    def to_entity(self) -> Client:
        return Client(
            id=self.id,
            name=self.name,
            phone=self.phone,
            email=self.email,
            address=self.address,
        )


# ── Sales ────────────────────────────────────────────────────────────


class QuoteItemDocument(CamelModel):
    product_id: Text = ""
    quantity: Quantity = 1
    custom_price: OptionalNumber = None

    @classmethod
    def from_entity(cls, item: QuoteItem) -> "QuoteItemDocument":
        return cls(
            product_id=item.product_id,
            quantity=item.quantity,
            custom_price=item.custom_price,
        )

    def to_entity(self) -> QuoteItem:
        return QuoteItem(
            product_id=self.product_id,
            quantity=self.quantity,
            custom_price=self.custom_price,
        )


QuoteItems = Annotated[list[QuoteItemDocument], LenientList]


class QuoteDocument(CamelModel):
    id: Text = Field(default_factory=_new_id)
    client_id: Text = ""
    items: QuoteItems = Field(default_factory=list)
    profit_margin_percent: Number = 0.0
    created_at: Timestamp = Field(default_factory=now_ms)
    total_cost: Number = 0.0
    total_price: Number = 0.0
    status: Status = QuoteStatus.PENDING
    discount_value: Number = 0.0
    discount_reason: Text = ""

    @classmethod
    def from_entity(cls, quote: Quote) -> "QuoteDocument":
        return cls(
            id=quote.id,
            client_id=quote.client_id,
            items=[QuoteItemDocument.from_entity(i) for i in quote.items],
            profit_margin_percent=quote.profit_margin_percent,
            created_at=quote.created_at,
            total_cost=quote.total_cost,
            total_price=quote.total_price,
            status=quote.status,
            discount_value=quote.discount_value,
            discount_reason=quote.discount_reason,
        )

    def to_entity(self) -> Quote:
        return Quote(
            id=self.id,
            client_id=self.client_id,
            items=tuple(i.to_entity() for i in self.items),
            profit_margin_percent=self.profit_margin_percent,
            created_at=self.created_at,
            total_cost=self.total_cost,
            total_price=self.total_price,
            status=self.status,
            discount_value=self.discount_value,
            discount_reason=self.discount_reason,
        )


class ReceiptDocument(CamelModel):
    id: Text = Field(default_factory=_new_id)
    quote_id: OptionalText = None
    client_id: Text = ""
    items: QuoteItems = Field(default_factory=list)
    total_price: Number = 0.0
    discount_value: Number = 0.0
    payment_method: Text = ""
    receipt_number: Text = ""
    created_at: Timestamp = Field(default_factory=now_ms)

    @classmethod
    def from_entity(cls, receipt: Receipt) -> "ReceiptDocument":
        return cls(
            id=receipt.id,
            quote_id=receipt.quote_id,
            client_id=receipt.client_id,
            items=[QuoteItemDocument.from_entity(i) for i in receipt.items],
            total_price=receipt.total_price,
            discount_value=receipt.discount_value,
            payment_method=receipt.payment_method,
            receipt_number=receipt.receipt_number,
            created_at=receipt.created_at,
        )

    def to_entity(self) -> Receipt:
        return Receipt(
            id=self.id,
            quote_id=self.quote_id,
            client_id=self.client_id,
            items=tuple(i.to_entity() for i in self.items),
            total_price=self.total_price,
            discount_value=self.discount_value,
            payment_method=self.payment_method,
            receipt_number=self.receipt_number,
            created_at=self.created_at,
        )


# ── Ledger ───────────────────────────────────────────────────────────


class TransactionDocument(CamelModel):
    id: Text = Field(default_factory=_new_id)
    date: Timestamp = Field(default_factory=now_ms)
    type: Kind = TransactionType.EXPENSE
    category: Category = TransactionCategory.OTHER
    amount: Number = 0.0
    description: Text = ""

    @classmethod
    def from_entity(cls, transaction: Transaction) -> "TransactionDocument":
        return cls(
            id=transaction.id,
            date=transaction.date,
            type=transaction.type,
            category=transaction.category,
            amount=transaction.amount,
            description=transaction.description,
        )

    def to_entity(self) -> Transaction:
        return Transaction(
            id=self.id,
            date=self.date,
            type=self.type,
            category=self.category,
            amount=self.amount,
            description=self.description,
        )


# ── Aggregate ────────────────────────────────────────────────────────


class SettingsDocument(CamelModel):
    brand_name: Text = DEFAULT_BRAND_NAME
    default_margin: Number = DEFAULT_MARGIN_PERCENT
    initial_funds: OptionalNumber = None
    whatsapp_number: OptionalText = None
    instagram_url: OptionalText = None
    facebook_url: OptionalText = None
    shop_logo: OptionalText = None

    @classmethod
    def from_entity(cls, settings: BusinessSettings) -> "SettingsDocument":
        return cls(
            brand_name=settings.brand_name,
            default_margin=settings.default_margin,
            initial_funds=settings.initial_funds,
            whatsapp_number=settings.whatsapp_number,
            instagram_url=settings.instagram_url,
            facebook_url=settings.facebook_url,
            shop_logo=settings.shop_logo,
        )

    def to_entity(self) -> BusinessSettings:
        return BusinessSettings(
            brand_name=self.brand_name,
            default_margin=self.default_margin,
            initial_funds=self.initial_funds,
            whatsapp_number=self.whatsapp_number,
            instagram_url=self.instagram_url,
            facebook_url=self.facebook_url,
            shop_logo=self.shop_logo,
        )


class AppDataDocument(CamelModel):
    """The full persisted snapshot. Missing collections default to empty."""

    materials: Annotated[list[MaterialDocument], LenientList] = Field(default_factory=list)
    products: Annotated[list[ProductDocument], LenientList] = Field(default_factory=list)
    clients: Annotated[list[ClientDocument], LenientList] = Field(default_factory=list)
    quotes: Annotated[list[QuoteDocument], LenientList] = Field(default_factory=list)
    receipts: Annotated[list[ReceiptDocument], LenientList] = Field(default_factory=list)
    transactions: Annotated[list[TransactionDocument], LenientList] = Field(default_factory=list)
    settings: Annotated[SettingsDocument, LenientObject] = Field(default_factory=SettingsDocument)

    @classmethod
    def from_app_data(cls, data: AppData) -> "AppDataDocument":
        return cls(
            materials=[MaterialDocument.from_entity(m) for m in data.materials],
            products=[ProductDocument.from_entity(p) for p in data.products],
            clients=[ClientDocument.from_entity(c) for c in data.clients],
            quotes=[QuoteDocument.from_entity(q) for q in data.quotes],
            receipts=[ReceiptDocument.from_entity(r) for r in data.receipts],
            transactions=[TransactionDocument.from_entity(t) for t in data.transactions],
            settings=SettingsDocument.from_entity(data.settings),
        )

    def to_app_data(self) -> AppData:
        return AppData(
            materials=tuple(m.to_entity() for m in self.materials),
            products=tuple(p.to_entity() for p in self.products),
            clients=tuple(c.to_entity() for c in self.clients),
            quotes=tuple(q.to_entity() for q in self.quotes),
            receipts=tuple(r.to_entity() for r in self.receipts),
            transactions=tuple(t.to_entity() for t in self.transactions),
            settings=self.settings.to_entity(),
        )

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
