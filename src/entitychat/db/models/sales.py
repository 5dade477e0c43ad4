import enum
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, Date, DateTime, Enum as SAEnum, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from entitychat.schema.markers import ai_description, ai_info, ai_visible

from .base import BusinessObject


class OrderStatus(str, enum.Enum):
    New = "New"
    Processing = "Processing"
    Shipped = "Shipped"
    Delivered = "Delivered"
    Cancelled = "Cancelled"


@ai_visible()
@ai_description("Customers who place orders")
class Customer(BusinessObject):
    __tablename__ = "customers"

    company_name: Mapped[str] = mapped_column(String(128), nullable=False)
    contact_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    email: Mapped[str | None] = mapped_column(String(256), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    city: Mapped[str | None] = mapped_column(String(64), nullable=True)
    country: Mapped[str | None] = mapped_column(String(64), nullable=True)
    credit_notes: Mapped[str | None] = mapped_column(Text, nullable=True, info=ai_info(visible=False))

    orders: Mapped[list["Order"]] = relationship(back_populates="customer")


@ai_visible()
@ai_description("Sales orders placed by customers and handled by employees")
class Order(BusinessObject):
    __tablename__ = "orders"

    order_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now)
    required_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    status: Mapped[OrderStatus] = mapped_column(
        SAEnum(OrderStatus, native_enum=False, validate_strings=True),
        nullable=False,
        default=OrderStatus.New,
        info=ai_info(description="Current fulfilment stage"),
    )
    freight: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)
    ship_country: Mapped[str | None] = mapped_column(String(64), nullable=True)

    customer_id: Mapped[int | None] = mapped_column(ForeignKey("customers.id"), nullable=True)
    customer: Mapped[Optional["Customer"]] = relationship(back_populates="orders")

    employee_id: Mapped[int | None] = mapped_column(ForeignKey("employees.id"), nullable=True)
    employee: Mapped[Optional["Employee"]] = relationship(back_populates="orders")

    items: Mapped[list["OrderItem"]] = relationship(back_populates="order", cascade="all, delete-orphan")
    invoices: Mapped[list["Invoice"]] = relationship(back_populates="order")


@ai_visible()
@ai_description("Line items within an order linking products to quantities and pricing")
class OrderItem(BusinessObject):
    __tablename__ = "order_items"

    unit_price: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=Decimal("0"))
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    discount: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=Decimal("0"))

    order_id: Mapped[int | None] = mapped_column(ForeignKey("orders.id"), nullable=True)
    order: Mapped[Optional["Order"]] = relationship(back_populates="items")

    product_id: Mapped[int | None] = mapped_column(ForeignKey("products.id"), nullable=True)
    product: Mapped[Optional["Product"]] = relationship(back_populates="order_items")


@ai_visible()
@ai_description("Invoices issued for orders")
class Invoice(BusinessObject):
    __tablename__ = "invoices"

    invoice_number: Mapped[str] = mapped_column(String(32), nullable=False)
    invoice_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=Decimal("0"))
    paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    order_id: Mapped[int | None] = mapped_column(ForeignKey("orders.id"), nullable=True)
    order: Mapped[Optional["Order"]] = relationship(back_populates="invoices")
