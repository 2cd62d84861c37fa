import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import models  # noqa: F401
from database import Base, get_db
from dependencies import get_current_user
from main import app
from models.user import User, UserRole, UserStatus
from models.customers import Customer
from models.suppliers import Supplier
from models.job_masters import Particular, Colour, BagType, CuttingType, PrintSize
from models.job_card import JobCard
from models.stock import StockItem, StockStage, StockStatus
from utils.job_cards import build_section_list


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def user(db):
    user = User(username="operator", password="unused", role=UserRole.ADMIN, status=UserStatus.ACTIVE)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def client(db, user):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = lambda: user
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def lookups(db):
    """Row 1 of each stage lookup is the placeholder used by inactive stages"""
    rows = {
        "print_size": PrintSize(print_size="N/A"),
        "cutting_type": CuttingType(cutting_type="N/A"),
        "bag_type_na": BagType(bag_type="N/A", bag_price=Decimal("0.00")),
        "colour": Colour(colour_name="Red"),
        "particular": Particular(particular_name="Kraft Paper", particular_status=1),
    }
    for row in rows.values():
        db.add(row)
        db.flush()
    rows["print_size_12"] = PrintSize(print_size="12 inch")
    rows["cutting_type_v"] = CuttingType(cutting_type="V Bottom")
    rows["bag_type"] = BagType(bag_type="Grocery Bag Small", bag_price=Decimal("1.20"))
    for key in ("print_size_12", "cutting_type_v", "bag_type"):
        db.add(rows[key])
    db.commit()
    return rows


@pytest.fixture
def make_customer(db):
    def factory(name="Acme Stores", mobile="0771234567"):
        customer = Customer(customer_full_name=name, customer_mobile=mobile, customer_address="1 Main St", del_ind=1)
        db.add(customer)
        db.commit()
        db.refresh(customer)
        return customer
    return factory


@pytest.fixture
def make_supplier(db):
    def factory(name="Paper Mills Ltd"):
        supplier = Supplier(supplier_name=name, del_ind=1)
        db.add(supplier)
        db.commit()
        db.refresh(supplier)
        return supplier
    return factory


@pytest.fixture
def make_stock(db, lookups):
    counter = {"next": 900001}

    def factory(weight="250.000", size="90", gsm="80", stage=StockStage.MRN, barcode=None):
        if barcode is None:
            barcode = counter["next"]
            counter["next"] += 1
        stock_item = StockItem(
            stock_barcode=int(barcode),
            particular_id=lookups["particular"].id,
            material_item_size=size,
            item_gsm=gsm,
            item_net_weight=Decimal(weight),
            material_used_by=int(stage),
            produced_by=int(stage),
            material_status=StockStatus.AVAILABLE,
        )
        db.add(stock_item)
        db.commit()
        db.refresh(stock_item)
        return stock_item
    return factory


@pytest.fixture
def make_job_card(db, user, lookups, make_customer):
    def factory(slitting=True, printing=True, cutting=True, customer=None):
        customer = customer or make_customer()
        job_card = JobCard(
            customer_id=customer.id,
            section_list=build_section_list(slitting, printing, cutting),
            unit_price=Decimal("1.50"),
            slitting_roll_type=lookups["particular"].id,
            slitting_paper_gsm="80",
            slitting_paper_size=90,
            printing_size=lookups["print_size"].id,
            cutting_type=lookups["cutting_type"].id,
            cutting_bag_type=lookups["bag_type"].id,
            add_date=datetime(2025, 3, 15, 12, 0),
            card_slitting=0,
            card_printing=0,
            card_cutting=0,
            user_id=user.id,
            del_ind=0,
        )
        db.add(job_card)
        db.commit()
        db.refresh(job_card)
        return job_card
    return factory
