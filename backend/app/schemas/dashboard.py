"""Dashboard schemas for the summary cards."""

from pydantic import BaseModel


class StatusTotals(BaseModel):
    paid: int = 0
    pending: int = 0


class DashboardSummary(BaseModel):
    """Counts and paid/pending totals over every invoice, in cents."""

    invoice_count: int
    customer_count: int
    total_paid: int
    total_pending: int


class CardData(BaseModel):
    number_of_invoices: int
    number_of_customers: int
    total_paid_invoices: str
    total_pending_invoices: str
