"""
Storefront content managed from the admin panel: company contacts and
terms & conditions.

Mutations on a missing id raise RecordUpdateError ("Internal server error"),
the same answer the admin panel gets for any other store failure.
"""
import logging
from typing import Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from db_models import CompanyContact, TermCondition
from domain.errors import RecordUpdateError
from utils.validators import require_fields

logger = logging.getLogger(__name__)


async def _list(db: AsyncSession, model, *, limit: int, offset: int) -> tuple[Sequence, int]:
    total = (await db.execute(select(func.count()).select_from(model))).scalar_one()
    q = await db.execute(
        select(model).order_by(model.created_at.asc(), model.id.asc()).limit(limit).offset(offset)
    )
    return q.scalars().all(), total


# ════════════════════════════════════════════════════════════════════
# Company Contacts
# ════════════════════════════════════════════════════════════════════


async def list_contacts(db: AsyncSession, *, limit: int = 50, offset: int = 0):
    return await _list(db, CompanyContact, limit=limit, offset=offset)


async def create_contact(db: AsyncSession, *, label: Optional[str], value: Optional[str]) -> CompanyContact:
    require_fields("Label and value are required", label, value)
    contact = CompanyContact(label=label.strip(), value=value.strip())
    db.add(contact)
    await db.flush()
    return contact


async def delete_contact(db: AsyncSession, contact_id: str) -> CompanyContact:
    try:
        contact = await db.get(CompanyContact, contact_id)
        if contact is None:
            raise RecordUpdateError(details={"id": contact_id})
        await db.delete(contact)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Company contact delete failed for {contact_id}: {e}")
        raise RecordUpdateError() from e

    logger.info(f"  🗑️ Company contact {contact_id} deleted")
    return contact


# ════════════════════════════════════════════════════════════════════
# Terms & Conditions
# ════════════════════════════════════════════════════════════════════


async def list_terms(db: AsyncSession, *, limit: int = 50, offset: int = 0):
    return await _list(db, TermCondition, limit=limit, offset=offset)


async def create_term(db: AsyncSession, *, title: Optional[str], content: Optional[str]) -> TermCondition:
    require_fields("Title and content are required", title, content)
    term = TermCondition(title=title.strip(), content=content)
    db.add(term)
    await db.flush()
    return term


async def update_term(
    db: AsyncSession,
    term_id: str,
    *,
    title: Optional[str],
    content: Optional[str],
) -> TermCondition:
    require_fields("Title and content are required", title, content)

    try:
        term = await db.get(TermCondition, term_id)
        if term is None:
            raise RecordUpdateError(details={"id": term_id})
        term.title = title.strip()
        term.content = content
        await db.commit()
        await db.refresh(term)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Term update failed for {term_id}: {e}")
        raise RecordUpdateError() from e

    return term
