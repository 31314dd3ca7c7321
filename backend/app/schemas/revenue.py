from pydantic import BaseModel


class RevenueRow(BaseModel):
    """Revenue sample for one month."""

    month: str
    revenue: int
