"""Tagged external row types — one pydantic model per remote table.

Remote rows use snake_case keys, ISO-8601 date strings and loosely typed
numbers. Validation is total: absent or malformed fields coerce to
defaults (0, "", None, or "now" for dates) instead of failing.
"""

from typing import Annotated, ClassVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from atelier.application.schemas._types import (
    Number,
    OptionalNumber,
    OptionalText,
    Quantity,
    Text,
    Timestamp,
)
from atelier.domain.entities import (
    Client,
    Material,
    MaterialUnit,
    ProductMaterialRequirement,
    QuoteItem,
    QuoteStatus,
    Transaction,
    TransactionCategory,
    TransactionType,
)


class RemoteRow(BaseModel):
    """Base for every external row; ``TABLE`` names the remote table."""

    TABLE: ClassVar[str] = ""

    model_config = ConfigDict(extra="ignore")


class MaterialRow(RemoteRow):
    TABLE: ClassVar[str] = "materials"

    id: Text = ""
    name: Text = ""
    unit: Annotated[MaterialUnit, BeforeValidator(MaterialUnit.parse)] = MaterialUnit.COUNT
    cost_per_unit: Number = 0.0
    width_cm: OptionalNumber = None

    def to_entity(self) -> Material:
        return Material(
            id=self.id,
            name=self.name,
            unit=self.unit,
            cost_per_unit=self.cost_per_unit,
            width_cm=self.width_cm,
        )


class ProductRow(RemoteRow):
    TABLE: ClassVar[str] = "products"

    id: Text = ""
    name: Text = ""
    description: Text = ""
    base_labor_cost: Number = 0.0
    image_url: OptionalText = None


class ProductMaterialRow(RemoteRow):
    TABLE: ClassVar[str] = "product_materials"

    product_id: Text = ""
    material_id: Text = ""
    quantity: Number = 0.0
    width_cm: OptionalNumber = None
    height_cm: OptionalNumber = None

    def to_entity(self) -> ProductMaterialRequirement:
        return ProductMaterialRequirement(
            material_id=self.material_id,
            quantity=self.quantity,
            width_cm=self.width_cm,
            height_cm=self.height_cm,
        )


class ClientRow(RemoteRow):
    TABLE: ClassVar[str] = "clients"

    id: Text = ""
    name: Text = ""
    phone: Text = ""
    email: Text = ""
    address: Text = ""

    def to_entity(self) -> Client:
        return Client(
            id=self.id,
            name=self.name,
            phone=self.phone,
            email=self.email,
            address=self.address,
        )


class QuoteRow(RemoteRow):
    TABLE: ClassVar[str] = "quotes"

    id: Text = ""
    client_id: Text = ""
    profit_margin_percent: Number = 0.0
    total_cost: Number = 0.0
    total_price: Number = 0.0
    status: Annotated[QuoteStatus, BeforeValidator(QuoteStatus.parse)] = QuoteStatus.PENDING
    discount_value: Number = 0.0
    discount_reason: Text = ""
    created_at: Timestamp = Field(default=None, validate_default=True)


class QuoteItemRow(RemoteRow):
    TABLE: ClassVar[str] = "quote_items"

    quote_id: Text = ""
    product_id: Text = ""
    quantity: Quantity = 1
    custom_price: OptionalNumber = None

    def to_entity(self) -> QuoteItem:
        return QuoteItem(
            product_id=self.product_id,
            quantity=self.quantity,
            custom_price=self.custom_price,
        )


class ReceiptRow(RemoteRow):
    TABLE: ClassVar[str] = "receipts"

    id: Text = ""
    quote_id: OptionalText = None
    client_id: Text = ""
    total_price: Number = 0.0
    discount_value: Number = 0.0
    payment_method: Text = ""
    receipt_number: Text = ""
    created_at: Timestamp = Field(default=None, validate_default=True)


class ReceiptItemRow(RemoteRow):
    TABLE: ClassVar[str] = "receipt_items"

    receipt_id: Text = ""
    product_id: Text = ""
    quantity: Quantity = 1
    custom_price: OptionalNumber = None

    def to_entity(self) -> QuoteItem:
        return QuoteItem(
            product_id=self.product_id,
            quantity=self.quantity,
            custom_price=self.custom_price,
        )


class TransactionRow(RemoteRow):
    TABLE: ClassVar[str] = "transactions"

    id: Text = ""
    date: Timestamp = Field(default=None, validate_default=True)
    type: Annotated[TransactionType, BeforeValidator(TransactionType.parse)] = TransactionType.EXPENSE
    category: Annotated[
        TransactionCategory, BeforeValidator(TransactionCategory.parse)
    ] = TransactionCategory.OTHER
    amount: Number = 0.0
    description: Text = ""

    def to_entity(self) -> Transaction:
        return Transaction(
            id=self.id,
            date=self.date,
            type=self.type,
            category=self.category,
            amount=self.amount,
            description=self.description,
        )


# Columns mirrored beyond the base remote table shape. A remote schema
# created outside this service may not have them.
EXTENDED_COLUMNS: dict[str, frozenset[str]] = {
    QuoteRow.TABLE: frozenset({"discount_reason"}),
    QuoteItemRow.TABLE: frozenset({"custom_price"}),
    ReceiptItemRow.TABLE: frozenset({"custom_price"}),
}
