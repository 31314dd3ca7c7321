"""Dashboard summary endpoints."""

from fastapi import APIRouter, Depends
from pymongo.asynchronous.database import AsyncDatabase

from backend.app.db.session import get_db
from backend.app.schemas.dashboard import CardData, DashboardSummary
from backend.app.services.dashboard_service import fetch_card_data, fetch_dashboard_summary

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/summary", response_model=DashboardSummary)
async def get_dashboard_summary(db: AsyncDatabase = Depends(get_db)):
    return await fetch_dashboard_summary(db)


@router.get("/cards", response_model=CardData)
async def get_dashboard_cards(db: AsyncDatabase = Depends(get_db)):
    """Summary totals formatted for the dashboard cards."""
    return await fetch_card_data(db)
