"""
Checkout records.

Creation always starts at UNPAID; the payment webhook is the only other
writer of `status`.
"""
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from db_models import Checkout, User
from domain.enums import CheckoutStatus, Role
from domain.errors import NotFoundError, PermissionDeniedError

logger = logging.getLogger(__name__)


async def create_checkout(db: AsyncSession, *, user: User, total_amount: int) -> Checkout:
    checkout = Checkout(
        user_id=user.id,
        total_amount=total_amount,
        status=CheckoutStatus.UNPAID.value,
    )
    db.add(checkout)
    await db.flush()

    logger.info(f"  🛒 Checkout {checkout.id} created for user {user.id[:8]}... ({total_amount})")
    return checkout


async def get_checkout_for(db: AsyncSession, checkout_id: str, *, user: User) -> Checkout:
    """The checkout, provided the caller owns it or is an admin."""
    checkout = await db.get(Checkout, checkout_id)
    if checkout is None:
        raise NotFoundError("Checkout", checkout_id)
    if checkout.user_id != user.id and user.role != Role.ADMIN.value:
        raise PermissionDeniedError("Checkout belongs to another user.")
    return checkout


async def list_user_checkouts(db: AsyncSession, *, user_id: str, limit: int = 50, offset: int = 0):
    """Newest first."""
    total = (
        await db.execute(select(func.count()).select_from(Checkout).where(Checkout.user_id == user_id))
    ).scalar_one()
    q = await db.execute(
        select(Checkout)
        .where(Checkout.user_id == user_id)
        .order_by(Checkout.created_at.desc(), Checkout.id.desc())
        .limit(limit)
        .offset(offset)
    )
    return q.scalars().all(), total
