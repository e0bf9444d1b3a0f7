from decimal import Decimal
import pytest
from src.config import TestConfig
from src.extensions import db
from src.main import create_app
from clients.client import Client
from products.product import Product
from settings.company_settings import Settings


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def customer(app):
    c = Client(name="Sarl Atlas", taxid="000016001234567", commerce_reg_number="16/00-1234567B21",
               address="12 rue Didouche Mourad", city="Alger", country="Algérie", phone="021 00 00 00")
    db.session.add(c)
    db.session.commit()
    return c


@pytest.fixture
def product(app):
    p = Product(code="P-100", name="Ciment CPJ 42.5", description="Sac de 50 kg",
                unit_price=Decimal("100.00"), tax_rate=Decimal("19.00"), stock_quantity=500, unit="sac")
    db.session.add(p)
    db.session.commit()
    return p


@pytest.fixture
def company(app):
    s = Settings(business_name="Entreprise Test", taxid="099916000000000", commerce_reg_number="16/00-0000000B99",
                 address="Zone industrielle, Rouiba", phone="023 00 00 00", email="contact@test.dz")
    db.session.add(s)
    db.session.commit()
    return s


@pytest.fixture
def sample_items(product):
    return [{"product_id": product.id, "quantity": 3, "discount": 10}]


def hydrated(kind="invoice", items=None, **overrides):
    """A renderer-ready document without touching the database."""
    items = items if items is not None else [{
        "product_code": "P-100",
        "product_name": "Ciment CPJ 42.5",
        "description": "Sac de 50 kg",
        "unit": "sac",
        "quantity": 3,
        "unit_price": Decimal("100.00"),
        "tax_rate": Decimal("19.00"),
        "discount": Decimal("10"),
        "total_excl": Decimal("270.00"),
        "total_tax": Decimal("51.30"),
        "total": Decimal("321.30"),
    }]
    document = {
        "kind": kind,
        "id": 1,
        "number": "FAC-2024-0001",
        "status": "unpaid",
        "issue_date": None,
        "notes": "",
        "subtotal": Decimal("270.00"),
        "tax_total": Decimal("51.30"),
        "total": Decimal("321.30"),
        "client": {"name": "Sarl Atlas", "taxid": "000016001234567", "address": "12 rue Didouche Mourad",
                   "city": "Alger", "country": "Algérie"},
        "items": items,
    }
    if kind in ("proforma", "invoice"):
        document.update({"due_date": None, "payment_type": "bank_transfer", "stamp_tax": Decimal("0"),
                         "bc": None, "amount_payable": Decimal("321.30")})
    if kind == "invoice":
        document.update({"proforma_id": None, "amount_paid": Decimal("0"), "client_debt": Decimal("321.30"),
                         "payment_date": None, "payments": []})
    if kind == "delivery":
        document.update({"delivery_date": None, "final_invoice_id": None,
                         "transport": {"driver_name": "Karim", "truck_id": "12345-116-16"}})
    document.update(overrides)
    return document
