"""Shared fixtures: an in-memory database per test, seeded users and catalogue data."""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from app.auth import create_access_token, get_password_hash
from app.database import Base, dispose_engine, get_db, get_session_factory, init_engine
from app.main import app
from app.models.address import Address
from app.models.brand import Brand
from app.models.category import Category
from app.models.customer import Customer
from app.models.product_model import ProductModel
from app.models.supplier import Supplier
from app.models.user import User, UserRole
from app.schemas.item import AssetCreate, ItemCreate
from app.services.inventory import InventoryService

PASSWORD = "secret123"


@pytest.fixture
def engine():
    engine = init_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    dispose_engine()


@pytest.fixture
def db(engine):
    session = get_session_factory()()
    yield session
    session.close()


def _user(db, username, role, is_active=True):
    user = User(
        username=username,
        email=f"{username}@example.com",
        full_name=username.title(),
        hashed_password=get_password_hash(PASSWORD),
        role=role,
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def super_admin(db):
    return _user(db, "root", UserRole.SUPER_ADMIN)


@pytest.fixture
def admin(db):
    return _user(db, "manager", UserRole.ADMIN)


@pytest.fixture
def employee(db):
    return _user(db, "staff", UserRole.EMPLOYEE)


@pytest.fixture
def catalogue(db, admin):
    """One category requiring serial numbers, one brand, one model at 100.00, a supplier and a customer."""
    category = Category(name="Routers", requires_serial_number=True)
    brand = Brand(name="Acme")
    db.add_all([category, brand])
    db.flush()
    product_model = ProductModel(
        model_number="RT-100",
        selling_price=100.0,
        category_id=category.id,
        brand_id=brand.id,
        created_by_id=admin.id,
    )
    supplier = Supplier(supplier_code="SUP-1", name="Parts Ltd", created_by_id=admin.id)
    customer = Customer(customer_code="CUS-1", name="Jane Buyer", created_by_id=admin.id)
    db.add_all([product_model, supplier, customer])
    db.commit()
    return {
        "category": category,
        "brand": brand,
        "product_model": product_model,
        "supplier": supplier,
        "customer": customer,
    }


@pytest.fixture
def addresses(db):
    sender = Address(name="Main Office")
    receiver = Address(name="Acme Service Center")
    db.add_all([sender, receiver])
    db.commit()
    return sender, receiver


@pytest.fixture
def make_item(db, admin, catalogue):
    """Factory registering IN_STOCK sale items with serials SN-1, SN-2, ..."""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        data = {
            "product_model_id": catalogue["product_model"].id,
            "supplier_id": catalogue["supplier"].id,
            "serial_number": f"SN-{counter['n']}",
        }
        data.update(overrides)
        return InventoryService(db).add_item(ItemCreate(**data), admin)

    return _make


@pytest.fixture
def make_asset(db, admin, catalogue):
    """Factory registering IN_WAREHOUSE assets with codes AS-1, AS-2, ..."""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        data = {
            "asset_code": f"AS-{counter['n']}",
            "product_model_id": catalogue["product_model"].id,
            "serial_number": f"ASN-{counter['n']}",
        }
        data.update(overrides)
        return InventoryService(db).add_asset(AssetCreate(**data), admin)

    return _make


@pytest.fixture
def client(engine):
    def override_get_db():
        session = get_session_factory()()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(user):
        token = create_access_token({"sub": user.username, "role": user.role.value})
        return {"Authorization": f"Bearer {token}"}
    return _headers
