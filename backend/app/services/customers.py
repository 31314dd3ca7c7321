"""Customer queries."""

from pymongo import ASCENDING
from pymongo.asynchronous.database import AsyncDatabase

from backend.app.db.base import CUSTOMERS
from backend.app.schemas.customer import CustomerField, CustomerRollupRow, CustomerTableRow
from backend.app.services.aggregation import aggregate_rows, find_rows
from backend.app.services.formatting import shape_customer_row
from backend.app.services.pipeline import PipelineKind, base_collection, build_pipeline
from backend.app.services.search import build_search_pattern


async def fetch_filtered_customers(db: AsyncDatabase, query: str) -> list[CustomerTableRow]:
    """Customers matching ``query`` by name or email, with invoice totals.

    Customers without invoices are included with zero totals.
    """
    kind = PipelineKind.CUSTOMER_LIST
    stages = build_pipeline(kind, build_search_pattern(query))
    rows = await aggregate_rows(
        db,
        base_collection(kind),
        stages,
        CustomerRollupRow,
        operation="fetch customer table",
    )
    return [shape_customer_row(row) for row in rows]


async def fetch_customers(db: AsyncDatabase) -> list[CustomerField]:
    return await find_rows(
        db,
        CUSTOMERS,
        CustomerField,
        operation="fetch all customers",
        projection={"id": 1, "name": 1},
        sort=[("name", ASCENDING)],
    )
