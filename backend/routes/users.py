"""
Account management endpoints — backs the user dashboard.

    GET    /api/user/navigation           — sidebar and landing shortcuts
    GET    /api/user/checkout-history     — caller's checkouts
    GET    /api/user/{user_id}            — account details (self or admin)
    PUT    /api/user/update/{user_id}     — update name / email / password
    POST   /api/user/send-delete-token    — mail a deletion code to the caller
    DELETE /api/user/delete/{user_id}     — delete own account with that code
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from db_models import User
from deps import (
    Pagination,
    Settings,
    get_current_user,
    get_db,
    get_mailer,
    get_settings,
    pagination_params,
    require_self,
    require_self_or_admin,
)
from domain.errors import NotFoundError
from domain.navigation import user_navigation
from domain.responses import paginated_response
from models import CheckoutOut, DeleteAccountRequest, UserOut, UserUpdateRequest
from services import checkout_service, user_service
from services.mailer import Mailer

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/user", tags=["user"])


# Static paths are declared before /{user_id} so they are not captured by it.

@router.get("/navigation")
async def get_navigation(user: User = Depends(get_current_user)):
    return user_navigation(user.name)


@router.get("/checkout-history")
async def get_checkout_history(
    user: User = Depends(get_current_user),
    page: Pagination = Depends(pagination_params),
    db: AsyncSession = Depends(get_db),
):
    checkouts, total = await checkout_service.list_user_checkouts(
        db, user_id=user.id, limit=page["limit"], offset=page["offset"]
    )
    return paginated_response(
        items=[CheckoutOut.model_validate(c).to_json() for c in checkouts],
        limit=page["limit"],
        offset=page["offset"],
        total=total,
    )


@router.post("/send-delete-token")
async def send_delete_token(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    mailer: Mailer = Depends(get_mailer),
):
    await user_service.issue_delete_token(db, user, settings=settings, mailer=mailer)
    await db.commit()
    return {"message": "Token akan dikirimkan ke email anda"}


@router.get("/{user_id}")
async def get_user(
    user_id: str,
    _caller: User = Depends(require_self_or_admin),
    db: AsyncSession = Depends(get_db),
):
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    return UserOut.model_validate(user).to_json()


@router.put("/update/{user_id}")
async def update_user(
    user_id: str,
    request: UserUpdateRequest,
    _caller: User = Depends(require_self_or_admin),
    db: AsyncSession = Depends(get_db),
):
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("User", user_id)

    user = await user_service.update_user(
        db,
        user,
        name=request.name,
        email=request.email,
        password=request.password,
    )
    await db.commit()
    await db.refresh(user)
    return UserOut.model_validate(user).to_json()


@router.delete("/delete/{user_id}")
async def delete_user(
    request: DeleteAccountRequest,
    user: User = Depends(require_self),
    db: AsyncSession = Depends(get_db),
):
    await user_service.delete_user(db, user, token=request.delete_token)
    await db.commit()
    return {"message": "Hapus akun berhasil"}
