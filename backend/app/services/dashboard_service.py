"""Dashboard summary cards built from whole-collection rollups."""

import asyncio

from pymongo.asynchronous.database import AsyncDatabase

from backend.app.db.base import CUSTOMERS, INVOICES
from backend.app.schemas.dashboard import CardData, DashboardSummary, StatusTotals
from backend.app.services.aggregation import aggregate_documents, data_access
from backend.app.services.formatting import shape_card_data
from backend.app.services.pipeline import PipelineKind, build_pipeline


async def fetch_dashboard_summary(db: AsyncDatabase) -> DashboardSummary:
    """Count invoices and customers and total paid/pending amounts.

    The three reads run as one task group. The first failure cancels the
    reads still in flight, and the summary fails with ``DataAccessError``
    only once none of them is running.
    """
    async with data_access("fetch card data"):
        async with asyncio.TaskGroup() as group:
            invoice_count = group.create_task(db[INVOICES].count_documents({}))
            customer_count = group.create_task(db[CUSTOMERS].count_documents({}))
            totals = group.create_task(
                aggregate_documents(db, INVOICES, build_pipeline(PipelineKind.INVOICE_STATUS_TOTALS))
            )
        # An empty collection groups into no rows
        status_rows = totals.result()
        status_totals = StatusTotals.model_validate(status_rows[0]) if status_rows else StatusTotals()

    return DashboardSummary(
        invoice_count=invoice_count.result(),
        customer_count=customer_count.result(),
        total_paid=status_totals.paid,
        total_pending=status_totals.pending,
    )


async def fetch_card_data(db: AsyncDatabase) -> CardData:
    summary = await fetch_dashboard_summary(db)
    return shape_card_data(summary)
