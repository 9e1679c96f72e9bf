# db.py
import os
from typing import Optional
from dotenv import load_dotenv
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

load_dotenv()

_engine: Optional[AsyncEngine] = None
_sessionmaker: Optional[async_sessionmaker] = None

def async_url(url: str) -> str:
  if url.startswith("postgres://"):
    url = "postgresql://" + url[len("postgres://"):]
  if url.startswith("postgresql://"):
    return url.replace("postgresql://", "postgresql+asyncpg://", 1)
  if url.startswith("sqlite://"):
    return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
  return url

def get_engine() -> AsyncEngine:
  global _engine
  if _engine is None:
    database_url = os.getenv("DATABASE_URL", "").strip()
    if not database_url:
      raise RuntimeError("DATABASE_URL is not set in backend .env")
    _engine = create_async_engine(async_url(database_url), echo=False, pool_pre_ping=True)
  return _engine

def make_sessionmaker(engine: AsyncEngine) -> async_sessionmaker:
  return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

def get_sessionmaker() -> async_sessionmaker:
  global _sessionmaker
  if _sessionmaker is None:
    _sessionmaker = make_sessionmaker(get_engine())
  return _sessionmaker

async def init_db(engine: Optional[AsyncEngine] = None) -> None:
  # local/dev only, the hosted schema is managed elsewhere
  import models  # noqa: F401

  engine = engine or get_engine()
  async with engine.begin() as conn:
    await conn.run_sync(SQLModel.metadata.create_all)

async def dispose_engine() -> None:
  global _engine, _sessionmaker
  if _engine is not None:
    await _engine.dispose()
  _engine = None
  _sessionmaker = None
