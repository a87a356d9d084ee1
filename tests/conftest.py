import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from decimal import Decimal
from types import SimpleNamespace
import pytest
import requests
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from splitledger.database import Base
from splitledger import models
from splitledger.services import expenses as expense_service

RATES = {"THB": Decimal("1"), "USD": Decimal("36.25"), "JPY": Decimal("0.245")}

def fixed_rates():
    return dict(RATES)

@pytest.fixture(autouse=True)
def no_network(monkeypatch):
    def refuse(*args, **kwargs):
        raise requests.exceptions.ConnectionError("network disabled in tests")
    monkeypatch.setattr("splitledger.services.rates.requests.get", refuse)

@pytest.fixture
def engine():
    engine = create_engine("sqlite://", future=True, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()

@pytest.fixture
def db(engine):
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    db = TestingSessionLocal()
    yield db
    db.close()

@pytest.fixture
def world(db):
    """Three members of one group plus an outsider, and one expense paid by ``a``."""
    a = models.User(name="Alice", email="alice@example.com")
    b = models.User(name="Bob", email="bob@example.com")
    c = models.User(name="Carol", email="carol@example.com")
    outsider = models.User(name="Olga", email="olga@example.com")
    db.add_all([a, b, c, outsider])
    db.flush()
    g = models.Group(name="Trip")
    db.add(g); db.flush()
    for u in (a, b, c):
        db.add(models.GroupMember(group_id=g.id, user_id=u.id))
    db.commit()
    exp = expense_service.create_expense(db, g.id, a.id, "Dinner", fetch_live=fixed_rates)
    return SimpleNamespace(a=a, b=b, c=c, outsider=outsider, group=g, expense=exp)

def add_item(db, expense, amount, currency="THB", name="Item"):
    return expense_service.create_item(db, expense.id, name, Decimal(amount), currency)

def add_payment(db, expense, user, amount, status=models.PaymentStatus.VERIFIED):
    p = models.Payment(expense_id=expense.id, from_user_id=user.id, amount=Decimal(amount), status=status)
    db.add(p)
    db.commit()
    return p
