from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from entitychat.schema.markers import ai_description, ai_info, ai_visible

from .base import BusinessObject


@ai_visible()
@ai_description("Product categories for organizing the catalog")
class Category(BusinessObject):
    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str | None] = mapped_column(String(512), nullable=True)

    products: Mapped[list["Product"]] = relationship(back_populates="category")


@ai_visible()
@ai_description("Companies that supply products to the catalog")
class Supplier(BusinessObject):
    __tablename__ = "suppliers"

    company_name: Mapped[str] = mapped_column(String(128), nullable=False)
    contact_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    country: Mapped[str | None] = mapped_column(String(64), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)

    products: Mapped[list["Product"]] = relationship(back_populates="supplier")


@ai_visible()
@ai_description("Products available for sale, with pricing and stock levels")
class Product(BusinessObject):
    __tablename__ = "products"

    name: Mapped[str] = mapped_column(String(128), nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(
        Numeric(18, 2),
        nullable=False,
        default=Decimal("0"),
        info=ai_info(description="Price per unit in USD"),
    )
    units_in_stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    discontinued: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    internal_notes: Mapped[str | None] = mapped_column(Text, nullable=True, info=ai_info(visible=False))

    category_id: Mapped[int | None] = mapped_column(ForeignKey("categories.id"), nullable=True)
    category: Mapped[Optional["Category"]] = relationship(back_populates="products")

    supplier_id: Mapped[int | None] = mapped_column(ForeignKey("suppliers.id"), nullable=True)
    supplier: Mapped[Optional["Supplier"]] = relationship(back_populates="products")

    order_items: Mapped[list["OrderItem"]] = relationship(back_populates="product")
