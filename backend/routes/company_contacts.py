"""
Company contact endpoints — public listing, admin create/delete.

The create handler reads its body after require_admin has run.
"""
import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from db_models import User
from deps import Pagination, get_db, pagination_params, read_json_body, require_admin
from domain.responses import paginated_response
from models import CompanyContactOut, CompanyContactRequest
from services import content_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/company_contacts", tags=["company-contacts"])


@router.get("")
async def list_company_contacts(
    page: Pagination = Depends(pagination_params),
    db: AsyncSession = Depends(get_db),
):
    contacts, total = await content_service.list_contacts(db, limit=page["limit"], offset=page["offset"])
    return paginated_response(
        items=[CompanyContactOut.model_validate(c).to_json() for c in contacts],
        limit=page["limit"],
        offset=page["offset"],
        total=total,
    )


@router.post("/create", status_code=status.HTTP_201_CREATED)
async def create_company_contact(
    request: Request,
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    body = await read_json_body(request, CompanyContactRequest)
    contact = await content_service.create_contact(db, label=body.label, value=body.value)
    await db.commit()
    await db.refresh(contact)
    return CompanyContactOut.model_validate(contact).to_json()


@router.delete("/delete/{contact_id}")
async def delete_company_contact(
    contact_id: str,
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    contact = await content_service.delete_contact(db, contact_id)
    return CompanyContactOut.model_validate(contact).to_json()
