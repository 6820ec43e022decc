"""
Terms & conditions endpoints — public listing, admin create/update.

Mutating handlers read their body after require_admin has run, so an
unauthenticated caller gets 401 whatever it sends.
"""
import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from db_models import User
from deps import Pagination, get_db, pagination_params, read_json_body, require_admin
from domain.responses import paginated_response
from models import TermConditionOut, TermConditionRequest
from services import content_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/term_conditions", tags=["term-conditions"])


@router.get("")
async def list_term_conditions(
    page: Pagination = Depends(pagination_params),
    db: AsyncSession = Depends(get_db),
):
    terms, total = await content_service.list_terms(db, limit=page["limit"], offset=page["offset"])
    return paginated_response(
        items=[TermConditionOut.model_validate(t).to_json() for t in terms],
        limit=page["limit"],
        offset=page["offset"],
        total=total,
    )


@router.post("/create", status_code=status.HTTP_201_CREATED)
async def create_term_condition(
    request: Request,
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    body = await read_json_body(request, TermConditionRequest)
    term = await content_service.create_term(db, title=body.title, content=body.content)
    await db.commit()
    await db.refresh(term)
    return TermConditionOut.model_validate(term).to_json()


@router.put("/update/{term_id}")
async def update_term_condition(
    term_id: str,
    request: Request,
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Replace title and content."""
    body = await read_json_body(request, TermConditionRequest)
    term = await content_service.update_term(db, term_id, title=body.title, content=body.content)
    return TermConditionOut.model_validate(term).to_json()
