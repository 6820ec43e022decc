"""
Auth endpoints — account registration and login.

Both return {user, token}; the token is a JWT accepted as
`Authorization: Bearer <token>` by every protected endpoint.
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from deps import Settings, get_db, get_settings
from middleware.auth import issue_access_token
from middleware.rate_limit import rate_limit
from models import LoginRequest, RegisterRequest, UserOut
from services import user_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    _rate=Depends(rate_limit(max_requests=10, window_seconds=60)),
):
    user = await user_service.register_user(
        db,
        name=request.name,
        email=request.email,
        password=request.password,
        settings=settings,
    )
    token = issue_access_token(user_id=user.id, role=user.role, settings=settings)
    await db.commit()
    await db.refresh(user)

    return {"user": UserOut.model_validate(user).to_json(), "token": token}


@router.post("/login")
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    _rate=Depends(rate_limit(max_requests=20, window_seconds=60)),
):
    user = await user_service.authenticate(db, email=request.email, password=request.password)
    token = issue_access_token(user_id=user.id, role=user.role, settings=settings)

    return {"user": UserOut.model_validate(user).to_json(), "token": token}
