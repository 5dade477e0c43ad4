from decimal import Decimal

import pytest

from entitychat.assistant import ActiveViewContext, EntityTools, QueuedNavigationService
from entitychat.db.connect import make_session_factory
from entitychat.db.models import (
    Base,
    Category,
    Customer,
    Employee,
    Order,
    OrderStatus,
    Product,
    Supplier,
    sqlite_engine,
)
from entitychat.schema import SchemaDiscoveryService


@pytest.fixture(scope="function")
def session_factory(tmp_path):
    engine = sqlite_engine(f"sqlite:///{tmp_path}/test.db")
    return make_session_factory(engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    with session_factory() as session:
        yield session


@pytest.fixture(scope="function")
def seeded(session_factory):
    """Small catalog: 3 categories, 2 suppliers, 5 products, 3 customers, 2 employees, 1 order."""

    with session_factory() as session:
        beverages = Category(name="Beverages", description="Soft drinks, coffees, teas")
        condiments = Category(name="Condiments", description="Sweet and savory sauces")
        grains = Category(name="Grains", description="Breads, crackers, pasta")
        exotic = Supplier(company_name="Exotic Liquids", country="UK")
        tokyo = Supplier(company_name="Tokyo Traders", country="Japan")
        session.add_all([beverages, condiments, grains, exotic, tokyo])
        session.flush()

        session.add_all(
            [
                Product(name="Chai", unit_price=Decimal("18.00"), units_in_stock=39, category=beverages, supplier=exotic),
                Product(name="Chang", unit_price=Decimal("19.00"), units_in_stock=17, category=beverages, supplier=exotic),
                Product(name="Aniseed Syrup", unit_price=Decimal("10.00"), units_in_stock=13, category=condiments),
                Product(name="Ikura", unit_price=Decimal("31.00"), units_in_stock=31, supplier=tokyo),
                Product(name="Tofu", unit_price=Decimal("23.25"), units_in_stock=35, discontinued=True, category=grains),
            ]
        )
        ernst = Customer(company_name="Ernst Handel", contact_name="Roland Mendel", country="Austria")
        session.add_all(
            [
                Customer(company_name="Around the Horn", contact_name="Thomas Hardy", country="UK"),
                Customer(company_name="Bon app'", contact_name="Laurence Lebihan", country="France"),
                ernst,
            ]
        )
        nancy = Employee(first_name="Nancy", last_name="Davolio", job_title="Sales Representative")
        session.add_all([nancy, Employee(first_name="Andrew", last_name="Fuller", job_title="Vice President, Sales")])
        session.flush()
        session.add(Order(customer=ernst, employee=nancy, status=OrderStatus.Shipped, ship_country="Austria"))

    return session_factory


@pytest.fixture(scope="function")
def schema_service():
    return SchemaDiscoveryService.for_base(Base)


@pytest.fixture(scope="function")
def navigation():
    return QueuedNavigationService()


@pytest.fixture(scope="function")
def active_view():
    return ActiveViewContext()


@pytest.fixture(scope="function")
def tools(seeded, schema_service, navigation, active_view):
    return EntityTools(seeded, schema_service, navigation=navigation, active_view=active_view)
