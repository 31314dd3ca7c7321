"""Invoice queries: searchable table, page count, detail and latest list."""

import math

from pymongo.asynchronous.database import AsyncDatabase

from backend.app.db.base import INVOICES
from backend.app.schemas.invoice import (
    InvoiceCount,
    InvoiceDetail,
    InvoiceDocument,
    InvoiceListRow,
    InvoiceTableRow,
    LatestInvoice,
    LatestInvoiceRaw,
)
from backend.app.services.aggregation import aggregate_rows, find_one_row
from backend.app.services.formatting import shape_invoice_detail, shape_invoice_row, shape_latest_invoice
from backend.app.services.pipeline import ITEMS_PER_PAGE, PipelineKind, base_collection, build_pipeline
from backend.app.services.search import build_search_pattern


async def fetch_filtered_invoices(db: AsyncDatabase, query: str, current_page: int) -> list[InvoiceTableRow]:
    """Return one page of invoices whose customer, status, amount or date matches ``query``."""
    kind = PipelineKind.INVOICE_LIST
    stages = build_pipeline(kind, build_search_pattern(query), page=current_page)
    rows = await aggregate_rows(db, base_collection(kind), stages, InvoiceListRow, operation="fetch invoices")
    return [shape_invoice_row(row) for row in rows]


async def count_filtered_invoices(db: AsyncDatabase, query: str) -> int:
    kind = PipelineKind.INVOICE_COUNT
    stages = build_pipeline(kind, build_search_pattern(query))
    rows = await aggregate_rows(
        db,
        base_collection(kind),
        stages,
        InvoiceCount,
        operation="fetch total number of invoices",
    )
    # $count emits no document at all when nothing matched
    return rows[0].count if rows else 0


async def fetch_invoices_pages(db: AsyncDatabase, query: str) -> int:
    total = await count_filtered_invoices(db, query)
    return math.ceil(total / ITEMS_PER_PAGE)


async def fetch_invoice_by_id(db: AsyncDatabase, invoice_id: str) -> InvoiceDetail | None:
    document = await find_one_row(db, INVOICES, {"id": invoice_id}, InvoiceDocument, operation="fetch invoice")
    if document is None:
        return None
    return shape_invoice_detail(document)


async def fetch_latest_invoices(db: AsyncDatabase) -> list[LatestInvoice]:
    kind = PipelineKind.LATEST_INVOICES
    rows = await aggregate_rows(
        db,
        base_collection(kind),
        build_pipeline(kind),
        LatestInvoiceRaw,
        operation="fetch the latest invoices",
    )
    return [shape_latest_invoice(row) for row in rows]
