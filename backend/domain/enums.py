"""
Domain enums (minimal set used for clarity in services).
"""

from enum import Enum


class Role(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class CheckoutStatus(str, Enum):
    UNPAID = "UNPAID"
    PAID = "PAID"
