"""
Shared fixtures for basket-service tests.

Each test gets its own file-backed SQLite database (so several sessions
can see each other's commits) and an in-memory catalog instead of the
HTTP product-service.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from app.data.database import Base, make_engine, make_session_factory
import app.data.models  # noqa: F401
from app.domain.errors import ProductNotFound
from app.domain.schemas import ProductOut
from app.services.basket_service import BasketService


class FakeProductClient:
    """In-memory stand-in for ProductClient, counts catalog lookups."""

    def __init__(self, products):
        self.products = {p.id: p for p in products}
        self.calls = []

    def fetch_product(self, product_id: int) -> ProductOut:
        self.calls.append(product_id)
        product = self.products.get(product_id)
        if product is None:
            raise ProductNotFound(product_id)
        return product


@pytest.fixture
def catalog() -> FakeProductClient:
    return FakeProductClient(
        [
            ProductOut(id=1, name="Basic T-Shirt", price=Decimal("10.00"), colors=["red"], sizes=["M"]),
            ProductOut(id=2, name="Hoodie", price=Decimal("49.50"), colors=["grey", "black"], sizes=["M", "L"]),
            ProductOut(id=3, name="Denim Jacket", price=Decimal("89.99"), colors=["blue"], sizes=["S", "M"]),
        ]
    )


@pytest.fixture
def engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'basket.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def service(db, catalog) -> BasketService:
    return BasketService(db=db, product_client=catalog, flat_item_price=False)


@pytest.fixture
def make_service(session_factory, catalog):
    """Build extra services on fresh sessions (a second concurrent request)."""
    sessions = []

    def _make(flat_item_price: bool = False) -> BasketService:
        session = session_factory()
        sessions.append(session)
        return BasketService(db=session, product_client=catalog, flat_item_price=flat_item_price)

    yield _make

    for session in sessions:
        session.close()


@pytest.fixture
def test_client(session_factory, catalog):
    from app.api import create_app
    from app.api.routers.basket import get_product_client
    from app.data.database import get_db

    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_product_client] = lambda: catalog

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def basket_rows(db):
    from sqlalchemy import select
    from app.data.models import BasketModel

    def _rows(user_id: int):
        db.expire_all()
        return db.execute(select(BasketModel).where(BasketModel.user_id == user_id)).scalars().all()

    return _rows


@pytest.fixture
def check_totals(db, basket_rows):
    """Cached totals must equal the sums over the basket's line items."""
    from sqlalchemy import select
    from app.data.models import BasketItemModel

    def _check(user_id: int):
        baskets = basket_rows(user_id)
        assert len(baskets) == 1
        basket = baskets[0]
        items = db.execute(
            select(BasketItemModel).where(BasketItemModel.basket_id == basket.id)
        ).scalars().all()

        assert basket.total_items == sum(i.quantity for i in items)
        assert Decimal(basket.total_price) == sum((Decimal(i.price) for i in items), Decimal("0.00"))
        assert all(i.quantity > 0 for i in items)
        keys = [(i.product_id, i.color, i.size) for i in items]
        assert len(keys) == len(set(keys))
        return basket, items

    return _check
