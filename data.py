# data.py
import asyncio
import logging
import math
from typing import Awaitable, Callable, List, Optional, Tuple, TypeVar

from sqlalchemy import String, cast, func, or_
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.orm import selectinload
from sqlmodel import col, select

from db import get_sessionmaker
from models import (
  PAID, PENDING, CardData, Customer, CustomerField, CustomersTableRow, Invoice,
  InvoiceForm, InvoicesTableRow, LatestInvoice, Revenue,
)
from utils import format_currency

logger = logging.getLogger(__name__)

ITEMS_PER_PAGE = 6
LATEST_INVOICES = 5

T = TypeVar("T")


class DatabaseFetchError(Exception):
  def __init__(self, operation: str):
    super().__init__(operation)
    self.operation = operation


async def _run_fetch(
  message: str,
  fetch: Callable[[async_sessionmaker], Awaitable[T]],
  sessionmaker: Optional[async_sessionmaker] = None,
) -> T:
  try:
    return await fetch(sessionmaker or get_sessionmaker())
  except Exception:
    logger.exception("Database Error: %s", message)
    raise DatabaseFetchError(message) from None


def _like(query: str) -> str:
  return f"%{query}%"

def _invoice_filter(query: str):
  pattern = _like(query)
  return or_(
    col(Customer.name).ilike(pattern),
    col(Customer.email).ilike(pattern),
    cast(Invoice.amount, String).ilike(pattern),
    cast(Invoice.date, String).ilike(pattern),
    col(Invoice.status).ilike(pattern),
  )

def _invoices_with_customer(*columns):
  return (
    select(*columns)
    .select_from(Invoice)
    .join(Customer, col(Customer.id) == col(Invoice.customer_id))
  )

def _joined(row) -> Tuple[Invoice, Customer]:
  # one customer per invoice, the join is many-to-one
  invoice, customer = row
  return invoice, customer

def _sum_by_status(invoices, status: str) -> int:
  return sum(inv.amount for inv in invoices if inv.status == status)


async def fetch_revenue(sessionmaker: Optional[async_sessionmaker] = None) -> List[Revenue]:
  async def _fetch(sm):
    async with sm() as session:
      rows = await session.exec(select(Revenue).order_by(col(Revenue.month)))
      return list(rows.all())

  return await _run_fetch("Failed to fetch revenue data.", _fetch, sessionmaker)


async def fetch_latest_invoices(sessionmaker: Optional[async_sessionmaker] = None) -> List[LatestInvoice]:
  async def _fetch(sm):
    stmt = (
      _invoices_with_customer(Invoice, Customer)
      .order_by(col(Invoice.date).desc())
      .limit(LATEST_INVOICES)
    )
    async with sm() as session:
      rows = (await session.exec(stmt)).all()

    latest = []
    for row in rows:
      invoice, customer = _joined(row)
      latest.append(LatestInvoice(
        id=invoice.id,
        amount=int(invoice.amount),
        name=customer.name,
        email=customer.email,
        image_url=customer.image_url,
      ))
    return latest

  return await _run_fetch("Failed to fetch the latest invoices.", _fetch, sessionmaker)


async def _count(sm: async_sessionmaker, model) -> int:
  async with sm() as session:
    return (await session.exec(select(func.count()).select_from(model))).one()

async def _amounts_by_status(sm: async_sessionmaker):
  async with sm() as session:
    return (await session.exec(select(Invoice.amount, Invoice.status))).all()

async def fetch_card_data(sessionmaker: Optional[async_sessionmaker] = None) -> CardData:
  async def _fetch(sm):
    invoice_count, customer_count, invoice_status = await asyncio.gather(
      _count(sm, Invoice),
      _count(sm, Customer),
      _amounts_by_status(sm),
    )

    total_paid = sum(amount for amount, status in invoice_status if status == PAID)
    total_pending = sum(amount for amount, status in invoice_status if status == PENDING)

    return CardData(
      numberOfCustomers=customer_count or 0,
      numberOfInvoices=invoice_count or 0,
      totalPaidInvoices=format_currency(total_paid),
      totalPendingInvoices=format_currency(total_pending),
    )

  return await _run_fetch("Failed to fetch card data.", _fetch, sessionmaker)


async def fetch_filtered_invoices(
  query: str,
  current_page: int,
  sessionmaker: Optional[async_sessionmaker] = None,
) -> List[InvoicesTableRow]:
  offset = (max(current_page, 1) - 1) * ITEMS_PER_PAGE

  async def _fetch(sm):
    stmt = (
      _invoices_with_customer(Invoice, Customer)
      .where(_invoice_filter(query))
      .order_by(col(Invoice.date).desc())
      .offset(offset)
      .limit(ITEMS_PER_PAGE)
    )
    async with sm() as session:
      rows = (await session.exec(stmt)).all()

    invoices = []
    for row in rows:
      invoice, customer = _joined(row)
      invoices.append(InvoicesTableRow(
        id=invoice.id,
        customer_id=invoice.customer_id,
        amount=invoice.amount,
        date=invoice.date,
        status=invoice.status,
        name=customer.name,
        email=customer.email,
        image_url=customer.image_url,
      ))
    return invoices

  return await _run_fetch("Failed to fetch invoices.", _fetch, sessionmaker)


async def fetch_invoices_pages(query: str, sessionmaker: Optional[async_sessionmaker] = None) -> int:
  async def _fetch(sm):
    stmt = _invoices_with_customer(func.count()).where(_invoice_filter(query))
    async with sm() as session:
      count = (await session.exec(stmt)).one()
    return math.ceil((count or 0) / ITEMS_PER_PAGE)

  return await _run_fetch("Failed to fetch total number of invoices.", _fetch, sessionmaker)


async def fetch_invoice_by_id(invoice_id: str, sessionmaker: Optional[async_sessionmaker] = None) -> InvoiceForm:
  async def _fetch(sm):
    stmt = select(Invoice).where(col(Invoice.id) == invoice_id)
    async with sm() as session:
      # NoResultFound / MultipleResultsFound unless exactly one row
      invoice = (await session.exec(stmt)).one()

    return InvoiceForm(
      id=invoice.id,
      customer_id=invoice.customer_id,
      amount=invoice.amount / 100,
      status=invoice.status,
    )

  return await _run_fetch("Failed to fetch invoice.", _fetch, sessionmaker)


async def fetch_customers(sessionmaker: Optional[async_sessionmaker] = None) -> List[CustomerField]:
  async def _fetch(sm):
    stmt = select(Customer.id, Customer.name).order_by(col(Customer.name))
    async with sm() as session:
      rows = (await session.exec(stmt)).all()
    return [CustomerField(id=id_, name=name) for id_, name in rows]

  return await _run_fetch("Failed to fetch all customers.", _fetch, sessionmaker)


async def fetch_filtered_customers(
  query: str,
  sessionmaker: Optional[async_sessionmaker] = None,
) -> List[CustomersTableRow]:
  async def _fetch(sm):
    pattern = _like(query)
    stmt = (
      select(Customer)
      .where(or_(col(Customer.name).ilike(pattern), col(Customer.email).ilike(pattern)))
      .order_by(col(Customer.name))
      .options(selectinload(Customer.invoices))
    )
    async with sm() as session:
      customers = (await session.exec(stmt)).all()

    return [
      CustomersTableRow(
        id=customer.id,
        name=customer.name,
        email=customer.email,
        image_url=customer.image_url,
        total_invoices=len(customer.invoices or []),
        total_pending=_sum_by_status(customer.invoices or [], PENDING),
        total_paid=_sum_by_status(customer.invoices or [], PAID),
      )
      for customer in customers
    ]

  return await _run_fetch("Failed to fetch customer table.", _fetch, sessionmaker)
