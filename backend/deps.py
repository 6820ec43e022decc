"""
Shared FastAPI dependencies.

Routers import from here so the DB session, settings, mailer, auth guards
and pagination come from a single place.
"""

from __future__ import annotations

import json
from typing import TypedDict, TypeVar

from fastapi import Query, Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from config import Settings, get_settings
from database import get_db
from middleware.auth import (
    get_current_user,
    require_admin,
    require_self,
    require_self_or_admin,
)
from domain.errors import ValidationError
from services.mailer import Mailer

ModelT = TypeVar("ModelT", bound=BaseModel)

__all__ = [
    "Pagination",
    "Settings",
    "get_current_user",
    "get_db",
    "get_mailer",
    "get_settings",
    "pagination_params",
    "read_json_body",
    "require_admin",
    "require_self",
    "require_self_or_admin",
]


class Pagination(TypedDict):
    limit: int
    offset: int


def pagination_params(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0, le=100_000),
) -> Pagination:
    return {"limit": limit, "offset": offset}


def get_mailer(request: Request) -> Mailer:
    """The mailer the app was constructed with."""
    return request.app.state.mailer


async def read_json_body(request: Request, model: type[ModelT]) -> ModelT:
    """
    Parse the request body into `model` inside the handler.

    Handlers that take `Request` instead of a body parameter run their
    auth dependencies first; a malformed body then becomes a 400 in the
    shared error envelope instead of FastAPI's 422.
    """
    try:
        data = await request.json()
        return model.model_validate(data)
    except (json.JSONDecodeError, UnicodeDecodeError, PydanticValidationError):
        raise ValidationError("Invalid JSON payload")
