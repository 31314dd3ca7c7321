"""Invoice routes."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pymongo.asynchronous.database import AsyncDatabase

from backend.app.db.session import get_db
from backend.app.schemas.invoice import InvoiceDetail, InvoiceTableRow, LatestInvoice
from backend.app.services.invoices import (
    fetch_filtered_invoices,
    fetch_invoice_by_id,
    fetch_invoices_pages,
    fetch_latest_invoices,
)

router = APIRouter(prefix="/invoices", tags=["invoices"])


@router.get("/", response_model=List[InvoiceTableRow])
async def list_invoices(
    query: str = "",
    page: int = Query(1, ge=1),
    db: AsyncDatabase = Depends(get_db),
):
    return await fetch_filtered_invoices(db, query, page)


@router.get("/pages")
async def get_invoice_pages(query: str = "", db: AsyncDatabase = Depends(get_db)):
    total_pages = await fetch_invoices_pages(db, query)
    return {"total_pages": total_pages}


@router.get("/latest", response_model=List[LatestInvoice])
async def list_latest_invoices(db: AsyncDatabase = Depends(get_db)):
    return await fetch_latest_invoices(db)


@router.get("/{invoice_id}", response_model=InvoiceDetail)
async def get_invoice(invoice_id: str, db: AsyncDatabase = Depends(get_db)):
    invoice = await fetch_invoice_by_id(db, invoice_id)
    if invoice is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found")
    return invoice
