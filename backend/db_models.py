"""
SQLAlchemy ORM models for the Agro Koi store backend.

Tables:
    users              — storefront accounts (USER or ADMIN)
    checkouts          — orders; id doubles as the Xendit external_id
    company_contacts   — contact entries shown on the storefront
    term_conditions    — terms-of-service sections
"""
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from database import Base
from domain.enums import CheckoutStatus, Role


def _new_id() -> str:
    return uuid.uuid4().hex


class User(Base):
    """Storefront accounts."""
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=_new_id)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)  # argon2 hash
    role = Column(String(20), nullable=False, default=Role.USER.value)  # "USER" | "ADMIN"

    # One-time codes are stored hashed; cleared once used
    reset_token_hash = Column(String(255), nullable=True)
    reset_token_expires_at = Column(DateTime, nullable=True)
    delete_token_hash = Column(String(255), nullable=True)
    delete_token_expires_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    checkouts = relationship("Checkout", back_populates="user", lazy="select")


class Checkout(Base):
    """
    A checkout awaiting or having received payment.

    `id` is handed to Xendit as the invoice external_id and never changes.
    `status` moves UNPAID -> PAID through the payment webhook only.
    """
    __tablename__ = "checkouts"

    id = Column(String(32), primary_key=True, default=_new_id)
    user_id = Column(
        String(32),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    total_amount = Column(Integer, nullable=False, default=0)  # smallest currency unit (IDR)
    status = Column(String(20), nullable=False, default=CheckoutStatus.UNPAID.value, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="checkouts")


class CompanyContact(Base):
    """Contact entries (phone, address, social links) managed by admins."""
    __tablename__ = "company_contacts"

    id = Column(String(32), primary_key=True, default=_new_id)
    label = Column(String(100), nullable=False)
    value = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class TermCondition(Base):
    """Terms-of-service sections managed by admins."""
    __tablename__ = "term_conditions"

    id = Column(String(32), primary_key=True, default=_new_id)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
