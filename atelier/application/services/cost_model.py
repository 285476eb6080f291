"""Cost model — what a material requirement and a whole product cost to make.

Dangling material references and malformed numbers never raise; they
contribute zero.
"""

from collections.abc import Iterable, Mapping

from atelier.domain.coercion import to_number
from atelier.domain.entities import Material, Product, ProductMaterialRequirement

MaterialLookup = Mapping[str, Material] | Iterable[Material]


def index_materials(materials: MaterialLookup) -> Mapping[str, Material]:
    """Return materials keyed by id (a mapping is returned as-is)."""
    if isinstance(materials, Mapping):
        return materials
    return {m.id: m for m in materials}


def requirement_cost(
    requirement: ProductMaterialRequirement, materials: MaterialLookup
) -> float:
    """Cost of one requirement.

    For a rolled material (unit ``m`` with a commercial width) cut as a
    ``width_cm`` x ``height_cm`` rectangle, the cost is the fraction of one
    metre of roll the rectangle occupies::

        cost_per_unit * (width_cm * height_cm) / (commercial_width_cm * 100)

    Anything else is billed as ``cost_per_unit * quantity``.
    """
    material = index_materials(materials).get(requirement.material_id)
    if material is None:
        return 0.0

    cost = to_number(material.cost_per_unit)
    cut_width = to_number(requirement.width_cm)
    cut_height = to_number(requirement.height_cm)
    roll_width = to_number(material.width_cm)

    if material.is_area_billed and cut_width and cut_height and roll_width:
        return cost * (cut_width * cut_height) / (roll_width * 100)

    return cost * to_number(requirement.quantity)


def product_cost(product: Product, materials: MaterialLookup) -> float:
    """Sum of all requirement costs plus the (non-negative) base labour cost."""
    lookup = index_materials(materials)
    materials_cost = sum(requirement_cost(req, lookup) for req in product.materials or ())
    labor = max(0.0, to_number(product.base_labor_cost))
    return materials_cost + labor
