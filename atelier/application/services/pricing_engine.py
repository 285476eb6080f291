"""Pricing engine — margin, discount and quote totals on top of the cost model."""

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from atelier.application.services.cost_model import (
    MaterialLookup,
    index_materials,
    product_cost,
)
from atelier.domain.coercion import to_number
from atelier.domain.entities import AppData, Product, QuoteItem

ProductLookup = Mapping[str, Product] | Iterable[Product]


@dataclass(frozen=True)
class QuoteTotals:
    cost: float
    price: float


@dataclass(frozen=True)
class CatalogPrice:
    """One storefront line: a product with its cost and its sale price."""

    product_id: str
    name: str
    cost: float
    price: float


def _index_products(products: ProductLookup) -> Mapping[str, Product]:
    if isinstance(products, Mapping):
        return products
    return {p.id: p for p in products}


def _finite(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def apply_margin(cost: float, margin_percent: float) -> float:
    return _finite(to_number(cost) * (1 + to_number(margin_percent) / 100))


def final_price(product: Product, materials: MaterialLookup, margin_percent: float) -> float:
    """Product cost marked up by ``margin_percent``."""
    return apply_margin(product_cost(product, materials), margin_percent)


def quote_cost(
    items: Iterable[QuoteItem], products: ProductLookup, materials: MaterialLookup
) -> float:
    """Sum of product cost x quantity; unresolved products contribute 0."""
    product_index = _index_products(products)
    material_index = index_materials(materials)

    total = 0.0
    for item in items:
        product = product_index.get(item.product_id)
        if product is None:
            continue
        total += product_cost(product, material_index) * to_number(item.quantity)
    return _finite(total)


def quote_totals(
    items: Iterable[QuoteItem],
    products: ProductLookup,
    materials: MaterialLookup,
    margin_percent: float,
    discount_value: float,
) -> QuoteTotals:
    """Cost and price of a quote.

    The discount is a flat amount subtracted after the margin. It is not
    clamped, so a large discount may yield a negative price.
    """
    cost = quote_cost(items, products, materials)
    price = apply_margin(cost, margin_percent) - to_number(discount_value)
    return QuoteTotals(cost=cost, price=_finite(price))


def catalog_prices(data: AppData) -> list[CatalogPrice]:
    """Every product priced at the business's default margin."""
    materials = index_materials(data.materials)
    margin = data.settings.default_margin
    prices = []
    for product in data.products:
        cost = product_cost(product, materials)
        prices.append(
            CatalogPrice(
                product_id=product.id,
                name=product.name,
                cost=cost,
                price=apply_margin(cost, margin),
            )
        )
    return prices


@dataclass(frozen=True)
class LinePrice:
    product_id: str
    quantity: int
    unit_price: float
    line_total: float


@dataclass(frozen=True)
class QuotePreview:
    cost: float
    price: float
    lines: list[LinePrice]


def preview_quote(
    items: Iterable[QuoteItem],
    products: ProductLookup,
    materials: MaterialLookup,
    margin_percent: float,
    discount_value: float,
) -> QuotePreview:
    """Quote totals plus the unit price of every line, for the quote editor."""
    items = list(items)
    product_index = _index_products(products)
    material_index = index_materials(materials)

    lines = []
    for item in items:
        product = product_index.get(item.product_id)
        price = final_price(product, material_index, margin_percent) if product else 0.0
        lines.append(
            LinePrice(
                product_id=item.product_id,
                quantity=item.quantity,
                unit_price=price,
                line_total=_finite(price * to_number(item.quantity)),
            )
        )
    totals = quote_totals(items, product_index, material_index, margin_percent, discount_value)
    return QuotePreview(cost=totals.cost, price=totals.price, lines=lines)
