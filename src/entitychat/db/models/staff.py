from datetime import date
from typing import Optional

from sqlalchemy import Date, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from entitychat.schema.markers import ai_description, ai_visible

from .base import BusinessObject


@ai_visible()
@ai_description("Employees who handle orders and cover sales territories")
class Employee(BusinessObject):
    __tablename__ = "employees"

    first_name: Mapped[str] = mapped_column(String(64), nullable=False)
    last_name: Mapped[str] = mapped_column(String(64), nullable=False)
    job_title: Mapped[str | None] = mapped_column(String(128), nullable=True)
    email: Mapped[str | None] = mapped_column(String(256), nullable=True)
    hire_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    orders: Mapped[list["Order"]] = relationship(back_populates="employee")
    territories: Mapped[list["EmployeeTerritory"]] = relationship(back_populates="employee")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@ai_visible()
@ai_description("Geographic regions containing territories")
class Region(BusinessObject):
    __tablename__ = "regions"

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    territories: Mapped[list["Territory"]] = relationship(back_populates="region")


@ai_visible()
@ai_description("Sales territories within regions, assigned to employees")
class Territory(BusinessObject):
    __tablename__ = "territories"

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    region_id: Mapped[int | None] = mapped_column(ForeignKey("regions.id"), nullable=True)
    region: Mapped[Optional["Region"]] = relationship(back_populates="territories")

    employees: Mapped[list["EmployeeTerritory"]] = relationship(back_populates="territory")


@ai_visible()
@ai_description("Assignment of an employee to a sales territory")
class EmployeeTerritory(BusinessObject):
    __tablename__ = "employee_territories"

    employee_id: Mapped[int | None] = mapped_column(ForeignKey("employees.id"), nullable=True)
    employee: Mapped[Optional["Employee"]] = relationship(back_populates="territories")

    territory_id: Mapped[int | None] = mapped_column(ForeignKey("territories.id"), nullable=True)
    territory: Mapped[Optional["Territory"]] = relationship(back_populates="employees")
