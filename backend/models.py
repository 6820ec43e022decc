"""
Pydantic models for request/response validation.
"""
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ApiModel(BaseModel):
    """Shared base — allows construction by Python name or alias, and from ORM rows."""
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


# ── Response Models ─────────────────────────────────────────────────

class UserOut(ApiModel):
    """Public view of a user. The password hash is never part of it."""
    id: str
    name: str
    email: str
    role: str
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")


class CheckoutOut(ApiModel):
    id: str
    user_id: Optional[str] = Field(None, alias="userId")
    total_amount: int = Field(..., alias="totalAmount")
    status: str
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")


class CompanyContactOut(ApiModel):
    id: str
    label: str
    value: str
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")


class TermConditionOut(ApiModel):
    id: str
    title: str
    content: str
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")


# ── Request Models ──────────────────────────────────────────────────
# Fields are optional where the handler reports missing values itself
# with a 400 and a fixed message.

class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserUpdateRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class DeleteAccountRequest(ApiModel):
    delete_token: Optional[str] = Field(None, alias="deleteToken")


class ForgotPasswordRequest(BaseModel):
    email: Optional[str] = None


class ResetPasswordRequest(BaseModel):
    email: Optional[str] = None
    token: Optional[str] = None
    password: Optional[str] = None


class CompanyContactRequest(BaseModel):
    label: Optional[str] = None
    value: Optional[str] = None


class TermConditionRequest(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None


class CheckoutCreateRequest(ApiModel):
    total_amount: int = Field(..., alias="totalAmount", ge=0)


class XenditCallback(BaseModel):
    """
    Xendit invoice callback body.

    Only external_id and status are used; the rest of the provider payload
    is ignored.
    """
    model_config = ConfigDict(extra="ignore")

    # Untyped: a non-string id is a failed update (500), not a bad request
    external_id: Any = None
    status: Any = None
