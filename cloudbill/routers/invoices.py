from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from cloudbill.core.database import get_db
from cloudbill.models.invoice import Invoice, InvoiceStatus
from cloudbill.models.invoice_line_item import InvoiceLineItem
from cloudbill.models.tax_calculation import TaxCalculation
from cloudbill.repositories.invoice_line_item_repository import InvoiceLineItemRepository
from cloudbill.repositories.invoice_repository import InvoiceRepository
from cloudbill.repositories.tax_calculation_repository import TaxCalculationRepository
from cloudbill.schemas.invoice import (
    InvoiceGenerateRequest,
    InvoiceGenerationResponse,
    InvoiceLineItemResponse,
    InvoiceResponse,
)
from cloudbill.schemas.tax_calculation import TaxCalculationResponse
from cloudbill.services.invoice_generator import InvoiceGenerationService

router = APIRouter()


@router.get(
    "/",
    response_model=list[InvoiceResponse],
    summary="List invoices",
)
async def list_invoices(
    response: Response,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    account_id: str | None = None,
    status: InvoiceStatus | None = None,
    db: Session = Depends(get_db),
) -> list[Invoice]:
    """List invoices with optional filters."""
    repo = InvoiceRepository(db)
    response.headers["X-Total-Count"] = str(repo.count(account_id))
    return repo.get_all(account_id=account_id, status=status, skip=skip, limit=limit)


@router.post(
    "/generate",
    response_model=InvoiceGenerationResponse,
    status_code=201,
    summary="Generate invoice from unbilled usage",
    responses={
        400: {"description": "No unbilled usage for the period, or generation failed"},
        422: {"description": "Validation error"},
    },
)
async def generate_invoice(
    data: InvoiceGenerateRequest,
    db: Session = Depends(get_db),
) -> InvoiceGenerationResponse:
    """Generate a draft invoice with GST for an account's unbilled usage."""
    service = InvoiceGenerationService(db)
    result = service.generate_invoice(
        account_id=data.account_id,
        period_start=data.period_start,
        period_end=data.period_end,
        due_date=data.due_date,
    )
    if not result.success:
        raise HTTPException(status_code=400, detail=result.error)

    return InvoiceGenerationResponse(
        success=True,
        invoice=InvoiceResponse.model_validate(result.invoice),
        line_items=[InvoiceLineItemResponse.model_validate(item) for item in result.line_items],
        tax_calculation=TaxCalculationResponse.model_validate(result.tax_calculation),
    )


@router.get(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    summary="Get invoice",
    responses={404: {"description": "Invoice not found"}},
)
async def get_invoice(
    invoice_id: UUID,
    db: Session = Depends(get_db),
) -> Invoice:
    """Get an invoice by ID."""
    repo = InvoiceRepository(db)
    invoice = repo.get_by_id(invoice_id)
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return invoice


@router.get(
    "/{invoice_id}/line_items",
    response_model=list[InvoiceLineItemResponse],
    summary="List invoice line items",
    responses={404: {"description": "Invoice not found"}},
)
async def list_invoice_line_items(
    invoice_id: UUID,
    db: Session = Depends(get_db),
) -> list[InvoiceLineItem]:
    if not InvoiceRepository(db).get_by_id(invoice_id):
        raise HTTPException(status_code=404, detail="Invoice not found")
    return InvoiceLineItemRepository(db).get_by_invoice_id(invoice_id)


@router.get(
    "/{invoice_id}/tax_calculation",
    response_model=TaxCalculationResponse,
    summary="Get invoice GST audit record",
    responses={404: {"description": "Invoice or tax calculation not found"}},
)
async def get_invoice_tax_calculation(
    invoice_id: UUID,
    db: Session = Depends(get_db),
) -> TaxCalculation:
    if not InvoiceRepository(db).get_by_id(invoice_id):
        raise HTTPException(status_code=404, detail="Invoice not found")
    calculation = TaxCalculationRepository(db).get_by_invoice_id(invoice_id)
    if not calculation:
        raise HTTPException(status_code=404, detail="Tax calculation not found")
    return calculation


@router.post(
    "/{invoice_id}/finalize",
    response_model=InvoiceResponse,
    summary="Finalize invoice",
    responses={
        400: {"description": "Invoice cannot be finalized in current state"},
        404: {"description": "Invoice not found"},
    },
)
async def finalize_invoice(
    invoice_id: UUID,
    db: Session = Depends(get_db),
) -> Invoice:
    """Issue a draft invoice."""
    service = InvoiceGenerationService(db)
    try:
        invoice = service.finalize_invoice(invoice_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return invoice


@router.post(
    "/{invoice_id}/mark_paid",
    response_model=InvoiceResponse,
    summary="Mark invoice as paid",
    responses={
        400: {"description": "Invoice cannot be marked paid in current state"},
        404: {"description": "Invoice not found"},
    },
)
async def mark_invoice_paid(
    invoice_id: UUID,
    db: Session = Depends(get_db),
) -> Invoice:
    service = InvoiceGenerationService(db)
    try:
        invoice = service.mark_invoice_as_paid(invoice_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return invoice


@router.post(
    "/{invoice_id}/mark_overdue",
    response_model=InvoiceResponse,
    summary="Mark invoice as overdue",
    responses={404: {"description": "Invoice not found"}},
)
async def mark_invoice_overdue(
    invoice_id: UUID,
    db: Session = Depends(get_db),
) -> Invoice:
    """Mark an unpaid invoice overdue if its due date has passed.

    The invoice is returned unchanged when it is not eligible.
    """
    service = InvoiceGenerationService(db)
    invoice = service.mark_invoice_as_overdue(invoice_id)
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return invoice


@router.post(
    "/{invoice_id}/cancel",
    response_model=InvoiceResponse,
    summary="Cancel invoice",
    responses={
        400: {"description": "Paid invoices cannot be cancelled"},
        404: {"description": "Invoice not found"},
    },
)
async def cancel_invoice(
    invoice_id: UUID,
    db: Session = Depends(get_db),
) -> Invoice:
    service = InvoiceGenerationService(db)
    try:
        invoice = service.cancel_invoice(invoice_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return invoice
