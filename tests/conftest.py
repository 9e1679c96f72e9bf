# conftest.py
from datetime import date

import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine

from db import init_db, make_sessionmaker
from models import Customer, Invoice, Revenue

CUSTOMERS = [
  dict(id="c1", name="Evil Rabbit", email="evil@rabbit.com", image_url="/customers/evil-rabbit.png"),
  dict(id="c2", name="Delba de Oliveira", email="delba@oliveira.com", image_url="/customers/delba.png"),
  dict(id="c3", name="Lee Robinson", email="lee@robinson.com", image_url="/customers/lee.png"),
  dict(id="c4", name="Amy Burns", email="amy@burns.com", image_url="/customers/amy.png"),  # no invoices
]

INVOICES = [
  dict(id="i1", customer_id="c1", amount=15795, status="pending", date=date(2022, 12, 6)),
  dict(id="i2", customer_id="c2", amount=20348, status="pending", date=date(2022, 11, 14)),
  dict(id="i3", customer_id="c3", amount=3040, status="paid", date=date(2022, 10, 29)),
  dict(id="i4", customer_id="c1", amount=44800, status="paid", date=date(2023, 9, 10)),
  dict(id="i5", customer_id="c2", amount=34577, status="pending", date=date(2023, 8, 5)),
  dict(id="i6", customer_id="c3", amount=54246, status="pending", date=date(2023, 7, 16)),
  dict(id="i7", customer_id="c1", amount=666, status="pending", date=date(2023, 6, 27)),
  dict(id="i8", customer_id="c2", amount=32545, status="paid", date=date(2023, 6, 9)),
]

REVENUE = [
  dict(month="Mar", revenue=2200),
  dict(month="Jan", revenue=2000),
  dict(month="Feb", revenue=1800),
]


async def seed(sm, customers=CUSTOMERS, invoices=INVOICES, revenue=REVENUE):
  async with sm() as session:
    session.add_all([Customer(**c) for c in customers])
    session.add_all([Revenue(**r) for r in revenue])
    await session.commit()
    session.add_all([Invoice(**i) for i in invoices])
    await session.commit()


@pytest_asyncio.fixture
async def engine(tmp_path):
  engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'dashboard.db'}")
  await init_db(engine)
  yield engine
  await engine.dispose()


@pytest_asyncio.fixture
async def empty_sessionmaker(engine):
  return make_sessionmaker(engine)


@pytest_asyncio.fixture
async def sessionmaker(engine):
  sm = make_sessionmaker(engine)
  await seed(sm)
  return sm


def broken_sessionmaker():
  raise ConnectionError("could not connect to server: Connection refused")
