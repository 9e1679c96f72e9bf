# models.py
from typing import List, Optional
from datetime import date
from sqlmodel import SQLModel, Field, Relationship

PENDING = "pending"
PAID = "paid"

class Revenue(SQLModel, table=True):
  month: str = Field(primary_key=True)  # Jan, Feb, ...
  revenue: int

class Customer(SQLModel, table=True):
  __tablename__ = "customers"

  id: str = Field(primary_key=True, index=True)
  name: str = Field(index=True)
  email: str
  image_url: str
  invoices: List["Invoice"] = Relationship(back_populates="customer")

class Invoice(SQLModel, table=True):
  __tablename__ = "invoices"

  id: str = Field(primary_key=True, index=True)
  customer_id: str = Field(foreign_key="customers.id", index=True)
  amount: int  # cents
  date: date
  status: str = PENDING  # pending|paid
  customer: Optional[Customer] = Relationship(back_populates="invoices")


# View records, never persisted

class LatestInvoice(SQLModel):
  id: str
  amount: int
  name: str
  email: str
  image_url: str

class InvoicesTableRow(SQLModel):
  id: str
  customer_id: str
  amount: int
  date: date
  status: str
  name: str
  email: str
  image_url: str

class InvoiceForm(SQLModel):
  id: str
  customer_id: str
  amount: float  # dollars
  status: str

class CustomerField(SQLModel):
  id: str
  name: str

class CustomersTableRow(SQLModel):
  id: str
  name: str
  email: str
  image_url: str
  total_invoices: int = 0
  total_pending: int = 0
  total_paid: int = 0

class CardData(SQLModel):
  numberOfCustomers: int = 0
  numberOfInvoices: int = 0
  totalPaidInvoices: str
  totalPendingInvoices: str
