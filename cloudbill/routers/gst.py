"""GST calculator and tax identifier API endpoints."""

from types import SimpleNamespace

from fastapi import APIRouter

from cloudbill.core.config import settings
from cloudbill.schemas.gst import (
    GstCalculateRequest,
    GstCalculationResponse,
    GstinLookupResponse,
    GstItemsRequest,
    GstSummaryResponse,
    HsnSacResponse,
    PanValidationResponse,
)
from cloudbill.services import gst

router = APIRouter()


@router.post(
    "/calculate",
    response_model=GstCalculationResponse,
    summary="Calculate GST for an amount",
    responses={422: {"description": "Validation error"}},
)
async def calculate(data: GstCalculateRequest) -> GstCalculationResponse:
    result = gst.calculate_gst(
        data.taxable_amount,
        data.seller_state or settings.SELLER_STATE,
        data.buyer_state,
        data.hsn_sac_code,
        data.tax_rate,
    )
    return GstCalculationResponse.model_validate(result)


@router.post(
    "/calculate_items",
    response_model=GstSummaryResponse,
    summary="Calculate GST for several items",
    responses={422: {"description": "Validation error"}},
)
async def calculate_items(data: GstItemsRequest) -> GstSummaryResponse:
    """Each item is taxed independently; totals are plain sums."""
    summary = gst.calculate_multiple_items(
        [
            gst.GstLineInput(
                amount=item.amount,
                hsn_sac_code=item.hsn_sac_code,
                tax_rate=item.tax_rate,
            )
            for item in data.items
        ],
        seller_address=SimpleNamespace(state=data.seller_state or settings.SELLER_STATE),
        buyer_address=SimpleNamespace(state=data.buyer_state),
    )
    return GstSummaryResponse.model_validate(summary)


@router.get(
    "/gstin/{gstin}",
    response_model=GstinLookupResponse,
    summary="Validate a GSTIN and resolve its state",
)
async def lookup_gstin(gstin: str) -> GstinLookupResponse:
    return GstinLookupResponse(
        gstin=gstin,
        valid=gst.validate_gst_number(gstin),
        state=gst.get_state_from_gstin(gstin),
    )


@router.get(
    "/pan/{pan}",
    response_model=PanValidationResponse,
    summary="Validate a PAN",
)
async def validate_pan(pan: str) -> PanValidationResponse:
    return PanValidationResponse(pan=pan, valid=gst.validate_pan(pan))


@router.get(
    "/hsn_sac/{category}",
    response_model=HsnSacResponse,
    summary="Default HSN/SAC code for a service category",
)
async def hsn_sac_for_service(category: str) -> HsnSacResponse:
    return HsnSacResponse(
        service_category=category,
        hsn_sac_code=gst.get_hsn_sac_for_service(category),
    )
