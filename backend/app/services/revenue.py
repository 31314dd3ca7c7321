"""Revenue helpers."""

from pymongo.asynchronous.database import AsyncDatabase

from backend.app.db.base import REVENUE
from backend.app.schemas.revenue import RevenueRow
from backend.app.services.aggregation import find_rows


async def fetch_revenue(db: AsyncDatabase) -> list[RevenueRow]:
    """Return every monthly revenue sample in stored order."""
    return await find_rows(db, REVENUE, RevenueRow, operation="fetch revenue data")
