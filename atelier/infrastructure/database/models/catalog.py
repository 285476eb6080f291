"""SQLAlchemy ORM models for the catalog tables (materials, products, clients)."""

from sqlalchemy import Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from atelier.infrastructure.database.base import Base


class MaterialModel(Base):
    """ORM model — maps to the 'materials' table."""

    __tablename__ = "materials"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    unit: Mapped[str] = mapped_column(String(8), nullable=False, default="u")
    cost_per_unit: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    width_cm: Mapped[float | None] = mapped_column(Float, nullable=True)

    def __repr__(self) -> str:
        return f"<MaterialModel(id={self.id}, name='{self.name}', unit='{self.unit}')>"


class ProductModel(Base):
    """ORM model — maps to the 'products' table."""

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    base_labor_cost: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<ProductModel(id={self.id}, name='{self.name}')>"


class ProductMaterialModel(Base):
    """ORM model — one material requirement of a product."""

    __tablename__ = "product_materials"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    )
    # No foreign key: a deleted material may still be referenced
    material_id: Mapped[str] = mapped_column(String(36), nullable=False)
    quantity: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    width_cm: Mapped[float | None] = mapped_column(Float, nullable=True)
    height_cm: Mapped[float | None] = mapped_column(Float, nullable=True)

    __table_args__ = (Index("ix_product_materials_product", "product_id"),)


class ClientModel(Base):
    """ORM model — maps to the 'clients' table."""

    __tablename__ = "clients"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    phone: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    address: Mapped[str] = mapped_column(Text, nullable=False, default="")

    def __repr__(self) -> str:
        return f"<ClientModel(id={self.id}, name='{self.name}')>"
