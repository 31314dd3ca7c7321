"""Shape stored rows for display.

Money is stored as integer cents. These helpers convert it to base units or
to a US-dollar display string; the shape_* functions apply that per row
after a query has run and never touch the numeric fields themselves.
"""

from decimal import Decimal

from backend.app.schemas.customer import CustomerRollupRow, CustomerTableRow
from backend.app.schemas.dashboard import CardData, DashboardSummary
from backend.app.schemas.invoice import (
    InvoiceDetail,
    InvoiceDocument,
    InvoiceListRow,
    InvoiceTableRow,
    LatestInvoice,
    LatestInvoiceRaw,
)

CENTS_PER_UNIT = Decimal(100)


def cents_to_units(cents: int | None) -> Decimal:
    return (Decimal(cents or 0) / CENTS_PER_UNIT).quantize(Decimal("0.01"))


def format_currency(cents: int | None) -> str:
    """Render cents as dollars, e.g. ``123456`` -> ``"$1,234.56"``."""
    units = cents_to_units(cents)
    sign = "-" if units < 0 else ""
    return f"{sign}${abs(units):,.2f}"


def shape_invoice_row(row: InvoiceListRow) -> InvoiceTableRow:
    return InvoiceTableRow(**row.model_dump(), formatted_amount=format_currency(row.amount))


def shape_latest_invoice(row: LatestInvoiceRaw) -> LatestInvoice:
    return LatestInvoice(**row.model_dump(), formatted_amount=format_currency(row.amount))


def shape_customer_row(row: CustomerRollupRow) -> CustomerTableRow:
    return CustomerTableRow(
        **row.model_dump(),
        formatted_total_pending=format_currency(row.total_pending),
        formatted_total_paid=format_currency(row.total_paid),
    )


def shape_invoice_detail(document: InvoiceDocument) -> InvoiceDetail:
    data = document.model_dump()
    data["amount"] = cents_to_units(document.amount)
    return InvoiceDetail(**data)


def shape_card_data(summary: DashboardSummary) -> CardData:
    return CardData(
        number_of_invoices=summary.invoice_count,
        number_of_customers=summary.customer_count,
        total_paid_invoices=format_currency(summary.total_paid),
        total_pending_invoices=format_currency(summary.total_pending),
    )
