# dashboard_route.py
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import async_sessionmaker

from db import get_sessionmaker
import data
from models import (
  CardData, CustomerField, CustomersTableRow, InvoiceForm, InvoicesTableRow,
  LatestInvoice, Revenue,
)

router = APIRouter(prefix="/api", tags=["dashboard"])

@router.get("/revenue", response_model=List[Revenue])
async def revenue(sm: async_sessionmaker = Depends(get_sessionmaker)):
  return await data.fetch_revenue(sm)

@router.get("/cards", response_model=CardData)
async def cards(sm: async_sessionmaker = Depends(get_sessionmaker)):
  return await data.fetch_card_data(sm)

@router.get("/invoices", response_model=List[InvoicesTableRow])
async def list_invoices(query: str = "", page: int = 1, sm: async_sessionmaker = Depends(get_sessionmaker)):
  return await data.fetch_filtered_invoices(query, page, sm)

@router.get("/invoices/latest", response_model=List[LatestInvoice])
async def latest_invoices(sm: async_sessionmaker = Depends(get_sessionmaker)):
  return await data.fetch_latest_invoices(sm)

@router.get("/invoices/pages")
async def invoices_pages(query: str = "", sm: async_sessionmaker = Depends(get_sessionmaker)):
  return {"total_pages": await data.fetch_invoices_pages(query, sm)}

@router.get("/invoices/{invoice_id}", response_model=InvoiceForm)
async def get_invoice(invoice_id: str, sm: async_sessionmaker = Depends(get_sessionmaker)):
  return await data.fetch_invoice_by_id(invoice_id, sm)

@router.get("/customers", response_model=List[CustomerField])
async def list_customers(sm: async_sessionmaker = Depends(get_sessionmaker)):
  return await data.fetch_customers(sm)

@router.get("/customers/table", response_model=List[CustomersTableRow])
async def customers_table(query: str = "", sm: async_sessionmaker = Depends(get_sessionmaker)):
  return await data.fetch_filtered_customers(query, sm)
