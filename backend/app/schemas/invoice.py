"""Invoice schemas."""

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, field_serializer

InvoiceStatus = Literal["pending", "paid"]


class InvoiceDocument(BaseModel):
    """An invoice as stored; ``amount`` is in cents."""

    id: str
    customer_id: str
    amount: int
    status: InvoiceStatus
    date: str


class InvoiceDetail(BaseModel):
    """An invoice with ``amount`` in base units; JSON carries it as a number."""

    id: str
    customer_id: str
    amount: Decimal
    status: InvoiceStatus
    date: str

    @field_serializer("amount", when_used="json")
    def amount_as_number(self, amount: Decimal) -> float:
        return float(amount)


class InvoiceListRow(BaseModel):
    """One row of the searchable invoices table (invoice joined to customer)."""

    id: str
    customer_id: str
    name: str
    email: str
    image_url: str
    date: str
    amount: int
    status: InvoiceStatus


class InvoiceTableRow(InvoiceListRow):
    formatted_amount: str


class InvoiceCount(BaseModel):
    count: int


class LatestInvoiceRaw(BaseModel):
    id: str
    name: str
    email: str
    image_url: str
    amount: int


class LatestInvoice(LatestInvoiceRaw):
    formatted_amount: str
