"""
Password reset endpoints.

Flow:
  1) POST /api/forgot-password  {email}                   -> code mailed if the account exists
  2) POST /api/reset-password   {email, token, password}  -> new password set, code consumed
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from deps import Settings, get_db, get_mailer, get_settings
from middleware.rate_limit import rate_limit
from models import ForgotPasswordRequest, ResetPasswordRequest
from services import user_service
from services.mailer import Mailer

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["password"])

# Same answer whether or not the address is registered
FORGOT_PASSWORD_MESSAGE = "If the email is registered, a password reset token has been sent"


@router.post("/forgot-password")
async def forgot_password(
    request: ForgotPasswordRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    mailer: Mailer = Depends(get_mailer),
    _rate=Depends(rate_limit(max_requests=5, window_seconds=60)),
):
    issued = await user_service.request_password_reset(
        db, email=request.email, settings=settings, mailer=mailer
    )
    if issued:
        await db.commit()
    return {"message": FORGOT_PASSWORD_MESSAGE}


@router.post("/reset-password")
async def reset_password(
    request: ResetPasswordRequest,
    db: AsyncSession = Depends(get_db),
    _rate=Depends(rate_limit(max_requests=10, window_seconds=60)),
):
    await user_service.reset_password(
        db,
        email=request.email,
        token=request.token,
        password=request.password,
    )
    await db.commit()
    return {"message": "Password successfully reset"}
