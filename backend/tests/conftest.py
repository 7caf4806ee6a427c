"""
Shared fixtures: a throwaway SQLite database per test, an HTTP client wired
to it, and a small seeded catalog with orders around "today".
"""
import os

# Must be set before the application settings are first imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./unused-bootstrap.db"
os.environ["ENVIRONMENT"] = "test"
os.environ["BUSINESS_TIMEZONE"] = "Asia/Ho_Chi_Minh"

from collections.abc import AsyncGenerator
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.core.database import Base, create_session_factory, get_db_session, get_session_factory
from app.main import app
from app.models import Category, Order, OrderItem, OrderStatus, Product
from app.services.date_ranges import RangeType, business_timezone, get_date_range, get_previous_period


@pytest.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """File-backed SQLite so concurrent sessions get their own connections."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(engine)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def async_client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose requests run against the test database."""

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


def local_noon(day: date) -> datetime:
    """Midday in the business timezone, safely inside that day's bucket."""
    return datetime.combine(day, time(12, 0), tzinfo=business_timezone())


def business_today() -> date:
    return datetime.now(business_timezone()).date()


@dataclass
class SeededData:
    categories: dict[str, Category] = field(default_factory=dict)
    products: dict[str, Product] = field(default_factory=dict)
    orders: list[Order] = field(default_factory=list)


async def add_order(
    session: AsyncSession,
    *,
    status: OrderStatus,
    created_at: datetime,
    items: list[tuple[Product, int]],
) -> Order:
    order = Order(
        customer_name="Test Customer",
        status=int(status),
        created_at=created_at.astimezone(timezone.utc),
        total_amount=sum((product.price * quantity for product, quantity in items), Decimal("0")),
    )
    order.items = [
        OrderItem(product_id=product.id, quantity=quantity, price=product.price)
        for product, quantity in items
    ]
    session.add(order)
    await session.flush()
    return order


@pytest.fixture
async def catalog(db_session: AsyncSession) -> SeededData:
    """Two categories and three products: Coffee 10.00, Tea 5.00 (Drinks), Cake 20.00 (Food)."""
    data = SeededData()
    drinks = Category(name="Drinks")
    food = Category(name="Food")
    db_session.add_all([drinks, food])
    await db_session.flush()

    coffee = Product(name="Coffee", price=Decimal("10.00"), category_id=drinks.id)
    tea = Product(name="Tea", price=Decimal("5.00"), category_id=drinks.id)
    cake = Product(name="Cake", price=Decimal("20.00"), category_id=food.id)
    db_session.add_all([coffee, tea, cake])
    await db_session.commit()

    data.categories = {"Drinks": drinks, "Food": food}
    data.products = {"Coffee": coffee, "Tea": tea, "Cake": cake}
    return data


@pytest.fixture
async def seeded(db_session: AsyncSession, catalog: SeededData) -> SeededData:
    """
    Orders for the last-7-days dashboard.

    Current period (today and yesterday):
        completed  Coffee x2 + Cake x1  = 40
        completed  Tea x4               = 20
        pending    Coffee x1            = 10
        cancelled  Cake x1              = 20 (yesterday)
        completed  Cake x3              = 60 (yesterday)
    Previous period (ISO week before):
        completed  Coffee x5            = 50
    """
    coffee, tea, cake = (catalog.products[name] for name in ("Coffee", "Tea", "Cake"))
    today = business_today()
    yesterday = today - timedelta(days=1)
    previous = get_previous_period(RangeType.LAST_7_DAYS, get_date_range(RangeType.LAST_7_DAYS))

    catalog.orders = [
        await add_order(db_session, status=OrderStatus.COMPLETED, created_at=local_noon(today),
                        items=[(coffee, 2), (cake, 1)]),
        await add_order(db_session, status=OrderStatus.COMPLETED, created_at=local_noon(today),
                        items=[(tea, 4)]),
        await add_order(db_session, status=OrderStatus.PENDING, created_at=local_noon(today),
                        items=[(coffee, 1)]),
        await add_order(db_session, status=OrderStatus.CANCELLED, created_at=local_noon(yesterday),
                        items=[(cake, 1)]),
        await add_order(db_session, status=OrderStatus.COMPLETED, created_at=local_noon(yesterday),
                        items=[(cake, 3)]),
        await add_order(db_session, status=OrderStatus.COMPLETED,
                        created_at=local_noon(previous.start.date() + timedelta(days=1)),
                        items=[(coffee, 5)]),
    ]
    await db_session.commit()
    return catalog


@pytest.fixture
def make_order(db_session: AsyncSession):
    """Insert and commit one order: `await make_order(status, created_at, [(product, qty)])`."""

    async def _make_order(
        status: OrderStatus,
        created_at: datetime,
        items: list[tuple[Product, int]],
    ) -> Order:
        order = await add_order(db_session, status=status, created_at=created_at, items=items)
        await db_session.commit()
        return order

    return _make_order
