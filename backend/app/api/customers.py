"""Customer routes."""

from typing import List

from fastapi import APIRouter, Depends
from pymongo.asynchronous.database import AsyncDatabase

from backend.app.db.session import get_db
from backend.app.schemas.customer import CustomerField, CustomerTableRow
from backend.app.services.customers import fetch_customers, fetch_filtered_customers

router = APIRouter(prefix="/customers", tags=["customers"])


@router.get("/", response_model=List[CustomerTableRow])
async def list_customers(query: str = "", db: AsyncDatabase = Depends(get_db)):
    return await fetch_filtered_customers(db, query)


@router.get("/all", response_model=List[CustomerField])
async def list_customer_fields(db: AsyncDatabase = Depends(get_db)):
    """Every customer's id and name, for pickers."""
    return await fetch_customers(db)
