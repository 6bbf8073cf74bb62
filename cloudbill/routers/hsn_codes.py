"""HSN/SAC reference table API endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cloudbill.core.database import get_db
from cloudbill.models.hsn_code import HsnCode
from cloudbill.repositories.hsn_code_repository import HsnCodeRepository
from cloudbill.schemas.hsn_code import HsnCodeCreate, HsnCodeResponse

router = APIRouter()


@router.post(
    "/",
    response_model=HsnCodeResponse,
    status_code=201,
    summary="Create HSN/SAC entry",
    responses={422: {"description": "Validation error"}},
)
async def create_hsn_code(
    data: HsnCodeCreate,
    db: Session = Depends(get_db),
) -> HsnCode:
    return HsnCodeRepository(db).create(data)


@router.get(
    "/",
    response_model=list[HsnCodeResponse],
    summary="List HSN/SAC entries",
)
async def list_hsn_codes(
    active_only: bool = False,
    db: Session = Depends(get_db),
) -> list[HsnCode]:
    return HsnCodeRepository(db).get_all(active_only=active_only)
