"""
Xendit webhook — invoice payment callbacks.

POST /api/xendit/webhook
    Header: X-Callback-Token (must equal XENDIT_WEBHOOK_TOKEN)
    Body:   {"external_id": "<checkout id>", "status": "SETTLED" | ...}

Other methods get 405 from the router before any handler code runs.
"""
import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from deps import Settings, get_db, get_settings, read_json_body
from domain.constants import PAYMENT_UPDATED_MESSAGE, XENDIT_CALLBACK_HEADER
from domain.errors import UnauthorizedError
from models import CheckoutOut, XenditCallback
from services import payment_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/xendit", tags=["xendit"])


@router.post("/webhook")
async def xendit_webhook(
    request: Request,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Reconcile a checkout's payment status from a Xendit callback.

    The token is checked before the body is read, so a rejected call never
    touches the store whatever it carries.
    """
    token = request.headers.get(XENDIT_CALLBACK_HEADER)
    if not payment_service.verify_callback_token(token, settings.xendit_webhook_token):
        client_ip = request.client.host if request.client else "unknown"
        logger.warning(f"Rejected Xendit callback from {client_ip}: bad callback token")
        raise UnauthorizedError("Unauthorized")

    payload = await read_json_body(request, XenditCallback)

    checkout = await payment_service.apply_payment_status(
        db,
        external_id=payload.external_id,
        provider_status=payload.status,
    )

    return {
        "checkout": CheckoutOut.model_validate(checkout).to_json(),
        "message": PAYMENT_UPDATED_MESSAGE,
    }
