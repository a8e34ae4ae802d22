import os

os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shared.core.auth import build_user_token, create_access_token
from shared.core.database import Base, get_warehouse_db
from shared.models.users import Users
from warehouse_service.app.main import app
from warehouse_service.app.models.masters.items import Item
from warehouse_service.app.models.masters.warehouses import Warehouse
from warehouse_service.app.models.stock.inventory import Inventory

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_warehouse_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_user(db, username, role, **fields):
    fields.setdefault("status", "active")
    user = Users(username=username, name=username.title(), role=role, **fields)
    user.set_password("secret123")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user):
    token = create_access_token(build_user_token(user))
    return {"Authorization": f"Bearer {token}"}


def add_stock(db, item, warehouse, quantity):
    row = Inventory(item_id=item.id, warehouse_id=warehouse.id, quantity=quantity)
    db.add(row)
    db.commit()
    return row


def stock_of(db, item, warehouse):
    db.expire_all()
    row = db.query(Inventory).filter(
        Inventory.item_id == item.id, Inventory.warehouse_id == warehouse.id).first()
    return row.quantity if row else 0


@pytest.fixture
def admin(db):
    return make_user(db, "admin", "admin")


@pytest.fixture
def source_manager(db):
    return make_user(db, "source_manager", "manager")


@pytest.fixture
def destination_manager(db):
    return make_user(db, "destination_manager", "manager")


@pytest.fixture
def employee(db, source_manager):
    return make_user(db, "employee", "employee", manager_id=source_manager.id)


@pytest.fixture
def source(db, source_manager):
    warehouse = Warehouse(name="Alpha Depot", location="North", capacity=1000,
                          manager_id=source_manager.id)
    db.add(warehouse)
    db.commit()
    db.refresh(warehouse)
    return warehouse


@pytest.fixture
def destination(db, destination_manager):
    warehouse = Warehouse(name="Beta Depot", location="South", capacity=1000,
                          manager_id=destination_manager.id)
    db.add(warehouse)
    db.commit()
    db.refresh(warehouse)
    return warehouse


@pytest.fixture
def item(db):
    widget = Item(sku="WID-001", name="Widget", unit="pcs", min_stock_level=10)
    db.add(widget)
    db.commit()
    db.refresh(widget)
    return widget
