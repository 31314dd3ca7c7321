"""Customer schemas."""

from pydantic import BaseModel


class CustomerField(BaseModel):
    id: str
    name: str


class CustomerRollupRow(BaseModel):
    """A customer with invoice totals; money fields are in cents."""

    id: str
    name: str
    email: str
    image_url: str
    total_invoices: int = 0
    total_pending: int = 0
    total_paid: int = 0


class CustomerTableRow(CustomerRollupRow):
    formatted_total_pending: str
    formatted_total_paid: str
