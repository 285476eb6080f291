"""Domain entity — a raw material bought by the business."""

from dataclasses import dataclass, field
from enum import Enum
from uuid import uuid4


class MaterialUnit(str, Enum):
    """Unit in which a material is bought and consumed."""

    LINEAR = "m"      # sold by the metre off a roll of fixed width
    COUNT = "u"
    MASS = "kg"

    @classmethod
    def parse(cls, value: object) -> "MaterialUnit":
        """Return the matching unit, defaulting to COUNT for unknown values."""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.COUNT


@dataclass(frozen=True)
class Material:
    """A purchasable material.

    ``width_cm`` is the commercial width of a roll and only applies to
    LINEAR materials; it is dropped for any other unit.
    """

    name: str
    unit: MaterialUnit
    cost_per_unit: float
    width_cm: float | None = None
    id: str = field(default_factory=lambda: str(uuid4()))

    def __post_init__(self) -> None:
        if self.unit is not MaterialUnit.LINEAR and self.width_cm is not None:
            object.__setattr__(self, "width_cm", None)

    @property
    def is_area_billed(self) -> bool:
        """Rolled material priced by the cut rectangle it gives up."""
        return self.unit is MaterialUnit.LINEAR and bool(self.width_cm)
