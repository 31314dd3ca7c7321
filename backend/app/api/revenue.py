"""Revenue endpoints."""

from typing import List

from fastapi import APIRouter, Depends
from pymongo.asynchronous.database import AsyncDatabase

from backend.app.db.session import get_db
from backend.app.schemas.revenue import RevenueRow
from backend.app.services.revenue import fetch_revenue

router = APIRouter(prefix="/revenue", tags=["revenue"])


@router.get("/", response_model=List[RevenueRow])
async def list_revenue(db: AsyncDatabase = Depends(get_db)):
    return await fetch_revenue(db)
