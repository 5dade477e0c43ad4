# Business objects, split into domain modules and re-exported here
from .base import Base, BusinessObject
from .catalog import Category, Supplier, Product
from .sales import Customer, Order, OrderItem, OrderStatus, Invoice
from .staff import Employee, Region, Territory, EmployeeTerritory
from .engine import sqlite_engine, initialize_db

__all__ = [
    "Base",
    "BusinessObject",
    "Category",
    "Supplier",
    "Product",
    "Customer",
    "Order",
    "OrderItem",
    "OrderStatus",
    "Invoice",
    "Employee",
    "Region",
    "Territory",
    "EmployeeTerritory",
    "sqlite_engine",
    "initialize_db",
]
