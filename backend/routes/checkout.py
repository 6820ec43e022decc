"""
Checkout endpoints.

The checkout id returned here is the external_id handed to Xendit when the
invoice is created; the webhook uses it to find the record again.
"""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from db_models import User
from deps import get_current_user, get_db
from models import CheckoutCreateRequest, CheckoutOut
from services import checkout_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/checkout", tags=["checkout"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_checkout(
    request: CheckoutCreateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    checkout = await checkout_service.create_checkout(db, user=user, total_amount=request.total_amount)
    await db.commit()
    await db.refresh(checkout)
    return CheckoutOut.model_validate(checkout).to_json()


@router.get("/{checkout_id}")
async def get_checkout(
    checkout_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    checkout = await checkout_service.get_checkout_for(db, checkout_id, user=user)
    return CheckoutOut.model_validate(checkout).to_json()
