"""Domain entity — a catalog product built from material requirements."""

from dataclasses import dataclass, field
from uuid import uuid4


@dataclass(frozen=True)
class ProductMaterialRequirement:
    """How much of one material a product consumes.

    Either a plain ``quantity`` or, for rolled materials, a cut rectangle
    of ``width_cm`` x ``height_cm``.
    """

    material_id: str
    quantity: float = 0.0
    width_cm: float | None = None
    height_cm: float | None = None


@dataclass(frozen=True)
class Product:
    name: str
    description: str = ""
    materials: tuple[ProductMaterialRequirement, ...] = ()
    base_labor_cost: float = 0.0
    image_url: str | None = None
    id: str = field(default_factory=lambda: str(uuid4()))
