"""
Xendit payment reconciliation.

Handles:
    1. Callback token verification (static shared secret, X-Callback-Token)
    2. Mapping the provider status onto CheckoutStatus
    3. Persisting the new status on the matching checkout

Known limitation: deliveries carry no sequence number and nothing is
deduplicated. A duplicate SETTLED callback rewrites PAID harmlessly, but a
late non-SETTLED callback arriving after SETTLED reverts the checkout to
UNPAID.
"""
import hmac
import logging
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from db_models import Checkout
from domain.constants import XENDIT_PAID_STATUS
from domain.enums import CheckoutStatus
from domain.errors import RecordUpdateError

logger = logging.getLogger(__name__)


# ════════════════════════════════════════════════════════════════════
# Callback Verification
# ════════════════════════════════════════════════════════════════════


def verify_callback_token(received: Optional[str], expected: str) -> bool:
    """
    Compare the X-Callback-Token header with the configured token.

    Byte-for-byte, constant time. FAILS CLOSED when no token is configured.
    """
    if not expected:
        logger.error(
            "XENDIT_WEBHOOK_TOKEN not configured — rejecting callback. "
            "Set XENDIT_WEBHOOK_TOKEN to accept Xendit webhooks."
        )
        return False

    if not received:
        logger.warning("Xendit callback received without X-Callback-Token header")
        return False

    return hmac.compare_digest(received.encode("utf-8"), expected.encode("utf-8"))


# ════════════════════════════════════════════════════════════════════
# Status Reconciliation
# ════════════════════════════════════════════════════════════════════


def map_provider_status(status: Any) -> CheckoutStatus:
    """Only the literal SETTLED means paid; everything else is UNPAID."""
    if status == XENDIT_PAID_STATUS:
        return CheckoutStatus.PAID
    return CheckoutStatus.UNPAID


async def apply_payment_status(
    db: AsyncSession,
    *,
    external_id: Any,
    provider_status: Any,
) -> Checkout:
    """
    Overwrite the status of the checkout identified by `external_id`.

    One read and one write, committed here. A missing checkout and a store
    failure both surface as RecordUpdateError (500).
    """
    new_status = map_provider_status(provider_status)

    logger.info(
        f"  📩 Xendit callback: external_id={external_id} "
        f"status={provider_status} → {new_status.value}"
    )

    if not isinstance(external_id, str) or not external_id:
        raise RecordUpdateError("Record to update not found.", details={"external_id": external_id})

    try:
        checkout = await db.get(Checkout, external_id)
        if checkout is None:
            raise RecordUpdateError("Record to update not found.", details={"external_id": external_id})

        checkout.status = new_status.value
        await db.commit()
        await db.refresh(checkout)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"  ❌ Checkout update failed for {external_id}: {e}")
        raise RecordUpdateError(str(e), details={"external_id": external_id}) from e

    logger.info(f"  ✅ Checkout {checkout.id} → {checkout.status}")
    return checkout
